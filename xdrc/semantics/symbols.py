"""Global symbol table and resolved definition records.

XDR has a single flat namespace: constants, type definitions and enum labels
all share it. Each symbol carries a three-state resolution marker; the
RESOLVING state exists only so the depth-first resolver can recognise a name
it re-enters as a cycle.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from xdrc.internals.errors import raise_internal_error
from xdrc.internals.report import Span
from xdrc.semantics.typesys import BuiltinType, RefKind, Type, TypeRef


class SymbolKind(str, Enum):
    CONST = "constant"
    ENUM_LABEL = "enum label"
    TYPEDEF = "typedef"
    STRUCT = "struct"
    UNION = "union"
    ENUM = "enum"

    @property
    def is_type(self) -> bool:
        return self in (SymbolKind.TYPEDEF, SymbolKind.STRUCT, SymbolKind.UNION, SymbolKind.ENUM)

    @property
    def is_value(self) -> bool:
        return self in (SymbolKind.CONST, SymbolKind.ENUM_LABEL)

    def ref_kind(self) -> RefKind:
        return RefKind(self.value)


class ResolutionState(Enum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"


# === Resolved records ===

@dataclass(frozen=True)
class ResolvedField:
    name: str
    ty: Type


@dataclass(frozen=True)
class ResolvedConst:
    name: str
    value: int


@dataclass(frozen=True)
class ResolvedTypedef:
    name: str
    target: Type


@dataclass(frozen=True)
class ResolvedStruct:
    name: str
    fields: Tuple[ResolvedField, ...]


@dataclass(frozen=True)
class ResolvedEnum:
    name: str
    labels: Tuple[Tuple[str, int], ...]

    def value_of(self, label: str) -> Optional[int]:
        for name, value in self.labels:
            if name == label:
                return value
        return None

    def label_of(self, value: int) -> Optional[str]:
        for name, v in self.labels:
            if v == value:
                return name
        return None


@dataclass(frozen=True)
class ResolvedArm:
    """A union arm: the generated variant name, its discriminant values and payload.

    `label_names` parallels `labels` and keeps the identifier a label was
    written as (None for numeric literals). `field` is None for void arms.
    """
    variant: str
    labels: Tuple[int, ...]
    label_names: Tuple[Optional[str], ...]
    field: Optional[ResolvedField]

    @property
    def is_void(self) -> bool:
        return self.field is None

    @property
    def carries_discriminant(self) -> bool:
        """Multi-label and default arms keep the wire discriminant alongside the payload."""
        return len(self.labels) != 1


@dataclass(frozen=True)
class ResolvedUnion:
    name: str
    discriminant: ResolvedField
    discriminant_base: Union[BuiltinType, TypeRef]   # after following typedefs
    arms: Tuple[ResolvedArm, ...]
    default: Optional[ResolvedArm] = None

    @property
    def is_unsigned(self) -> bool:
        return self.discriminant_base == BuiltinType.UNSIGNED_INT

    @property
    def enum_name(self) -> Optional[str]:
        if isinstance(self.discriminant_base, TypeRef):
            return self.discriminant_base.name
        return None

    def arm_for(self, value: int) -> Optional[ResolvedArm]:
        for arm in self.arms:
            if value in arm.labels:
                return arm
        return self.default

    def case_values(self) -> List[int]:
        return [v for arm in self.arms for v in arm.labels]


ResolvedDef = Union[ResolvedConst, ResolvedTypedef, ResolvedStruct, ResolvedEnum, ResolvedUnion]


# === Symbols ===

@dataclass
class Symbol:
    name: str
    kind: SymbolKind
    node: object                                # AST definition (or EnumMember for labels)
    loc: Optional[Span] = None
    owner: Optional[str] = None                 # Enum that declares an ENUM_LABEL
    state: ResolutionState = ResolutionState.UNRESOLVED
    resolved: Optional[ResolvedDef] = None


@dataclass
class SymbolTable:
    by_name: Dict[str, Symbol] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)

    def declare(self, symbol: Symbol) -> None:
        self.by_name[symbol.name] = symbol
        self.order.append(symbol.name)

    def lookup(self, name: str) -> Optional[Symbol]:
        return self.by_name.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.by_name

    def __iter__(self) -> Iterator[Symbol]:
        return (self.by_name[name] for name in self.order)

    def get(self, name: str) -> Symbol:
        sym = self.by_name.get(name)
        if sym is None:
            raise_internal_error("XE0003", name=name)
        return sym

    def definition(self, name: str) -> ResolvedDef:
        sym = self.get(name)
        if sym.state is not ResolutionState.RESOLVED or sym.resolved is None:
            raise_internal_error("XE0004", name=name)
        return sym.resolved

    def types(self) -> List[Symbol]:
        """Type definitions in declaration order."""
        return [s for s in self if s.kind.is_type]

    def constants(self) -> List[ResolvedConst]:
        """Top-level `const` definitions in declaration order."""
        return [s.resolved for s in self
                if s.kind is SymbolKind.CONST and s.node is not None and s.resolved is not None]

    def underlying(self, ty: Type) -> Type:
        """Follow typedef links down to a non-typedef type."""
        seen = set()
        while isinstance(ty, TypeRef) and ty.kind is RefKind.TYPEDEF and ty.name not in seen:
            seen.add(ty.name)
            target = self.definition(ty.name)
            assert isinstance(target, ResolvedTypedef)
            ty = target.target
        return ty

"""On-wire size analysis for resolved XDR types.

Every type gets a SizeInfo: the minimum and maximum number of encoded bytes,
and whether the size is exact. The code generator turns the minimum into one
up-front length check per decode and exports all three as associated
constants.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from xdrc.semantics.symbols import SymbolTable

from xdrc.backend.constants import (
    DISCRIMINANT_SIZE_BYTES,
    LENGTH_PREFIX_BYTES,
    OPTIONAL_FLAG_BYTES,
    WORD_SIZE_BYTES,
    pad4,
)
from xdrc.internals.errors import raise_internal_error
from xdrc.semantics.symbols import (
    ResolvedArm,
    ResolvedEnum,
    ResolvedStruct,
    ResolvedTypedef,
    ResolvedUnion,
)
from xdrc.semantics.typesys import (
    BUILTIN_SIZES,
    BuiltinType,
    FixedArrayType,
    OpaqueType,
    OptionalType,
    StringType,
    Type as Ty,
    TypeRef,
    VariableArrayType,
)


@dataclass(frozen=True)
class SizeInfo:
    """Encoded size range in bytes; `max` is None when unbounded."""
    min: int
    max: Optional[int]
    fixed: bool = False

    @classmethod
    def fixed_size(cls, n: int) -> 'SizeInfo':
        return cls(n, n, True)

    @classmethod
    def bounded(cls, min: int, max: Optional[int]) -> 'SizeInfo':
        return cls(min, max, False)

    @property
    def is_bounded(self) -> bool:
        return self.max is not None

    def __str__(self) -> str:
        if self.fixed:
            return f"Fixed({self.min})"
        return f"Bounded({self.min}, {'unbounded' if self.max is None else self.max})"


# Contribution of a definition re-entered while its own size is being computed.
# Only reachable through an optional or variable-length array link.
RECURSIVE = SizeInfo.bounded(0, None)


def _add_max(a: Optional[int], b: Optional[int]) -> Optional[int]:
    if a is None or b is None:
        return None
    return a + b


def sequence(parts: Iterable[SizeInfo]) -> SizeInfo:
    """Size of items encoded back to back (struct fields)."""
    total_min, total_max, fixed = 0, 0, True
    for part in parts:
        total_min += part.min
        total_max = _add_max(total_max, part.max)
        fixed = fixed and part.fixed
    if fixed:
        return SizeInfo.fixed_size(total_min)
    return SizeInfo.bounded(total_min, total_max)


class TypeSizing:
    """Calculate encoded sizes for resolved types.

    Results are cached per definition name. A definition that is re-entered
    during its own computation contributes `RECURSIVE`; that can only happen
    behind an optional or a variable-length array, whose own minimum does not
    depend on the element, so the re-entered definition's result is exact.
    The definitions computed in between saw a placeholder instead of a real
    size, so their results are not cached and get recomputed on their own.
    """

    def __init__(self, symbols: 'SymbolTable'):
        self.symbols = symbols
        self._cache: Dict[str, SizeInfo] = {}
        self._stack: List[str] = []
        self._partial: Set[str] = set()

    def size_of_definition(self, name: str) -> SizeInfo:
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        if name in self._stack:
            self._partial.update(self._stack[self._stack.index(name) + 1:])
            return RECURSIVE

        self._stack.append(name)
        try:
            definition = self.symbols.definition(name)
            match definition:
                case ResolvedTypedef(target=target):
                    info = self.size_of(target)
                case ResolvedStruct(fields=fields):
                    info = sequence(self.size_of(f.ty) for f in fields)
                case ResolvedEnum():
                    info = SizeInfo.fixed_size(WORD_SIZE_BYTES)
                case ResolvedUnion():
                    info = self._union_size(definition)
                case _:
                    raise_internal_error("XE0002", node=type(definition).__name__)
        finally:
            self._stack.pop()

        if name in self._partial:
            self._partial.discard(name)
        else:
            self._cache[name] = info
        return info

    def size_of(self, ty: Ty) -> SizeInfo:
        match ty:
            case BuiltinType():
                return SizeInfo.fixed_size(BUILTIN_SIZES[ty])
            case TypeRef(name=name):
                return self.size_of_definition(name)
            case FixedArrayType(element=element, length=length):
                elem = self.size_of(element)
                if elem.fixed:
                    return SizeInfo.fixed_size(elem.min * length)
                return SizeInfo.bounded(elem.min * length,
                                        None if elem.max is None else elem.max * length)
            case VariableArrayType(element=element, max_length=max_length):
                elem = self.size_of(element)
                if max_length is None or elem.max is None:
                    return SizeInfo.bounded(LENGTH_PREFIX_BYTES, None)
                return SizeInfo.bounded(LENGTH_PREFIX_BYTES, LENGTH_PREFIX_BYTES + max_length * elem.max)
            case OpaqueType(length=length, fixed=True):
                return SizeInfo.fixed_size(pad4(length))
            case OpaqueType(length=length) | StringType(max_length=length):
                if length is None:
                    return SizeInfo.bounded(LENGTH_PREFIX_BYTES, None)
                return SizeInfo.bounded(LENGTH_PREFIX_BYTES, LENGTH_PREFIX_BYTES + pad4(length))
            case OptionalType(inner=inner):
                inner_size = self.size_of(inner)
                return SizeInfo.bounded(OPTIONAL_FLAG_BYTES, _add_max(OPTIONAL_FLAG_BYTES, inner_size.max))
        raise_internal_error("XE0002", node=type(ty).__name__)

    def arm_size(self, arm: ResolvedArm) -> SizeInfo:
        if arm.field is None:
            return SizeInfo.fixed_size(0)
        return self.size_of(arm.field.ty)

    def _union_size(self, union: ResolvedUnion) -> SizeInfo:
        arms = list(union.arms)
        if union.default is not None:
            arms.append(union.default)
        sizes = [self.arm_size(arm) for arm in arms]

        if all(s.fixed for s in sizes) and len({s.min for s in sizes}) == 1:
            return SizeInfo.fixed_size(DISCRIMINANT_SIZE_BYTES + sizes[0].min)

        lo = min(s.min for s in sizes)
        hi = None if any(s.max is None for s in sizes) else max(s.max for s in sizes)
        return SizeInfo.bounded(DISCRIMINANT_SIZE_BYTES + lo, _add_max(DISCRIMINANT_SIZE_BYTES, hi))

# xdrc/semantics/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union

from xdrc.internals.report import Span
from xdrc.semantics.typesys import Type

# === Core node base ===

@dataclass
class Node:
    loc: Optional[Span]

# === Values (constants, bounds, case labels) ===

@dataclass(frozen=True)
class IntLit:
    value: int
    text: str = ""                   # Literal as written, for diagnostics
    loc: Optional[Span] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.text or str(self.value)

@dataclass(frozen=True)
class ConstName:
    name: str
    loc: Optional[Span] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.name

Value = Union[IntLit, ConstName]

# === Declarations ===

@dataclass
class Declaration(Node):
    """A `type name` declaration; `ty` is None for `void`."""
    name: Optional[str]
    ty: Optional[Type]
    name_span: Optional[Span] = None

    @property
    def is_void(self) -> bool:
        return self.ty is None

# === Definitions ===

@dataclass
class ConstDef(Node):
    name: str
    value: Value
    name_span: Optional[Span] = None

@dataclass
class TypedefDef(Node):
    name: str
    ty: Type
    name_span: Optional[Span] = None

@dataclass
class StructDef(Node):
    name: str
    fields: List[Declaration]
    name_span: Optional[Span] = None

@dataclass
class EnumMember:
    name: str
    value: Value
    loc: Optional[Span] = None

@dataclass
class EnumDef(Node):
    name: str
    members: List[EnumMember]
    name_span: Optional[Span] = None

@dataclass
class UnionArm:
    """One `case` arm; several labels may share the arm's declaration."""
    labels: List[Value]
    decl: Declaration
    loc: Optional[Span] = None

@dataclass
class UnionDef(Node):
    name: str
    discriminant: Declaration
    arms: List[UnionArm]
    default: Optional[Declaration] = None
    name_span: Optional[Span] = None

Definition = Union[ConstDef, TypedefDef, StructDef, EnumDef, UnionDef]

# === Program structure ===

@dataclass
class Program(Node):
    definitions: List[Definition]

    def of_kind(self, kind: type) -> List[Definition]:
        return [d for d in self.definitions if isinstance(d, kind)]

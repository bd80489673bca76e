from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

# Bounds are literal ints once resolved; before that they are AST value nodes.
Bound = Union[int, "Value"]


class BuiltinType(Enum):
    INT = "int"
    UNSIGNED_INT = "unsigned int"
    HYPER = "hyper"
    UNSIGNED_HYPER = "unsigned hyper"
    FLOAT = "float"
    DOUBLE = "double"
    BOOL = "bool"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NamedType:
    """Reference to a definition by name, as written in the spec."""
    name: str

    def __str__(self) -> str:
        return self.name


class RefKind(str, Enum):
    TYPEDEF = "typedef"
    STRUCT = "struct"
    UNION = "union"
    ENUM = "enum"


@dataclass(frozen=True)
class TypeRef:
    """Resolved link to a definition.

    Links go by identifier into the symbol table rather than embedding the
    target, so mutually referential types stay a finite graph.
    """
    name: str
    kind: RefKind

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FixedArrayType:
    element: "Type"
    length: Bound

    def __str__(self) -> str:
        return f"{self.element}[{self.length}]"


@dataclass(frozen=True)
class VariableArrayType:
    element: "Type"
    max_length: Optional[Bound] = None

    def __str__(self) -> str:
        return f"{self.element}<{'' if self.max_length is None else self.max_length}>"


@dataclass(frozen=True)
class OpaqueType:
    length: Optional[Bound]
    fixed: bool

    def __str__(self) -> str:
        if self.fixed:
            return f"opaque[{self.length}]"
        return f"opaque<{'' if self.length is None else self.length}>"


@dataclass(frozen=True)
class StringType:
    max_length: Optional[Bound] = None

    def __str__(self) -> str:
        return f"string<{'' if self.max_length is None else self.max_length}>"


@dataclass(frozen=True)
class OptionalType:
    inner: "Type"

    def __str__(self) -> str:
        return f"{self.inner}*"


Type = Union[
    BuiltinType,
    NamedType,
    TypeRef,
    FixedArrayType,
    VariableArrayType,
    OpaqueType,
    StringType,
    OptionalType,
]

TYPE_NODE_NAMES = {
    "int_t": BuiltinType.INT,
    "uint_t": BuiltinType.UNSIGNED_INT,
    "hyper_t": BuiltinType.HYPER,
    "uhyper_t": BuiltinType.UNSIGNED_HYPER,
    "float_t": BuiltinType.FLOAT,
    "double_t": BuiltinType.DOUBLE,
    "bool_t": BuiltinType.BOOL,
}

# Wire width of each builtin in bytes.
BUILTIN_SIZES = {
    BuiltinType.INT: 4,
    BuiltinType.UNSIGNED_INT: 4,
    BuiltinType.FLOAT: 4,
    BuiltinType.BOOL: 4,
    BuiltinType.HYPER: 8,
    BuiltinType.UNSIGNED_HYPER: 8,
    BuiltinType.DOUBLE: 8,
}


def is_byte_data(ty: Type) -> bool:
    """True for variable-length byte payloads that decode as borrowed views."""
    return isinstance(ty, StringType) or (isinstance(ty, OpaqueType) and not ty.fixed)

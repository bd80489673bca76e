"""Python values produced and accepted by the reference codec.

Primitives map onto `int`, `float` and `bool`, arrays onto lists, optional
data onto `None` or the value, and byte data onto `memoryview` slices of the
input. Every named definition gets a wrapper that records which definition
it belongs to, so two typedefs of the same underlying type never compare
equal to each other or to the raw value.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class EnumValue:
    enum: str
    label: str
    value: int


@dataclass(frozen=True)
class StructValue:
    struct: str
    fields: Dict[str, Any]

    def __getitem__(self, name: str) -> Any:
        return self.fields[name]


@dataclass(frozen=True)
class UnionValue:
    """A union arm; `arm` is the variant name, `discriminant` the raw wire value.

    `discriminant` may be left as None when encoding a single-label arm.
    """
    union: str
    arm: str
    discriminant: Optional[int] = None
    value: Any = None


@dataclass(frozen=True)
class TypedefValue:
    typedef: str
    value: Any

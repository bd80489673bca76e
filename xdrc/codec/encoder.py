"""Canonical XDR encoding of reference-codec values."""
from __future__ import annotations

import struct
from typing import Any, Optional

from xdrc.backend.constants import U32_MAX, padding_of
from xdrc.codec.errors import InvalidUnionDiscriminant, LengthExceedsBound, XdrEncodeError
from xdrc.codec.values import EnumValue, StructValue, TypedefValue, UnionValue
from xdrc.internals.errors import raise_internal_error
from xdrc.semantics.symbols import (
    ResolvedArm,
    ResolvedEnum,
    ResolvedStruct,
    ResolvedTypedef,
    ResolvedUnion,
    SymbolTable,
)
from xdrc.semantics.typesys import (
    BuiltinType,
    FixedArrayType,
    OpaqueType,
    OptionalType,
    StringType,
    Type,
    TypeRef,
    VariableArrayType,
)

_INT_FORMATS = {
    BuiltinType.INT: ">i",
    BuiltinType.UNSIGNED_INT: ">I",
    BuiltinType.HYPER: ">q",
    BuiltinType.UNSIGNED_HYPER: ">Q",
}

_FLOAT_FORMATS = {
    BuiltinType.FLOAT: ">f",
    BuiltinType.DOUBLE: ">d",
}


def _as_bytes(value: Any, ty: Type) -> bytes | memoryview:
    if isinstance(value, str) and isinstance(ty, StringType):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return value
    raise XdrEncodeError(f"expected bytes for {ty}, got {type(value).__name__}")


def _check_bound(length: int, bound: Optional[int]) -> None:
    limit = U32_MAX if bound is None else bound
    if length > limit:
        raise LengthExceedsBound(limit, length)


class XdrEncoder:
    def __init__(self, symbols: SymbolTable):
        self.symbols = symbols
        self.out = bytearray()

    def _pack(self, fmt: str, value) -> None:
        try:
            self.out += struct.pack(fmt, value)
        except (struct.error, OverflowError) as e:
            raise XdrEncodeError(f"{value!r} does not fit ({e})") from e

    def _opaque(self, data: bytes | memoryview) -> None:
        self.out += data
        self.out += bytes(padding_of(len(data)))

    def encode(self, ty: Type, value: Any) -> None:
        match ty:
            case BuiltinType.BOOL:
                if value not in (True, False):
                    raise XdrEncodeError(f"expected bool, got {value!r}")
                self._pack(">I", int(value))
            case BuiltinType() if ty in _INT_FORMATS:
                if not isinstance(value, int):
                    raise XdrEncodeError(f"expected int for {ty}, got {type(value).__name__}")
                self._pack(_INT_FORMATS[ty], value)
            case BuiltinType():
                if not isinstance(value, (int, float)):
                    raise XdrEncodeError(f"expected float for {ty}, got {type(value).__name__}")
                self._pack(_FLOAT_FORMATS[ty], value)
            case TypeRef(name=name):
                self.encode_definition(name, value)
            case FixedArrayType(element=element, length=length):
                items = self._sequence(value, ty)
                if len(items) != length:
                    raise LengthExceedsBound(length, len(items))
                for item in items:
                    self.encode(element, item)
            case VariableArrayType(element=element, max_length=bound):
                items = self._sequence(value, ty)
                _check_bound(len(items), bound)
                self._pack(">I", len(items))
                for item in items:
                    self.encode(element, item)
            case OpaqueType(length=length, fixed=True):
                data = _as_bytes(value, ty)
                if len(data) != length:
                    raise LengthExceedsBound(length, len(data))
                self._opaque(data)
            case OpaqueType(length=bound) | StringType(max_length=bound):
                data = _as_bytes(value, ty)
                _check_bound(len(data), bound)
                self._pack(">I", len(data))
                self._opaque(data)
            case OptionalType(inner=inner):
                if value is None:
                    self._pack(">I", 0)
                else:
                    self._pack(">I", 1)
                    self.encode(inner, value)
            case _:
                raise_internal_error("XE0002", node=type(ty).__name__)

    def _sequence(self, value: Any, ty: Type) -> list | tuple:
        if not isinstance(value, (list, tuple)):
            raise XdrEncodeError(f"expected a list for {ty}, got {type(value).__name__}")
        return value

    def encode_definition(self, name: str, value: Any) -> None:
        definition = self.symbols.definition(name)
        match definition:
            case ResolvedTypedef(target=target):
                if not isinstance(value, TypedefValue) or value.typedef != name:
                    raise XdrEncodeError(f"expected TypedefValue of '{name}', got {value!r}")
                self.encode(target, value.value)
            case ResolvedStruct(fields=fields):
                if not isinstance(value, StructValue) or value.struct != name:
                    raise XdrEncodeError(f"expected StructValue of '{name}', got {value!r}")
                expected = [f.name for f in fields]
                if sorted(value.fields) != sorted(expected):
                    raise XdrEncodeError(f"struct '{name}' needs fields {expected}, got {list(value.fields)}")
                for f in fields:
                    self.encode(f.ty, value.fields[f.name])
            case ResolvedEnum():
                self._pack(">i", self._enum_value(definition, value))
            case ResolvedUnion():
                self._union(definition, value)
            case _:
                raise_internal_error("XE0002", node=type(definition).__name__)

    def _enum_value(self, enum: ResolvedEnum, value: Any) -> int:
        if isinstance(value, EnumValue) and value.enum == enum.name:
            label = value.label
        elif isinstance(value, str):
            label = value
        else:
            raise XdrEncodeError(f"expected EnumValue of '{enum.name}', got {value!r}")
        number = enum.value_of(label)
        if number is None:
            raise XdrEncodeError(f"'{label}' is not a label of enum '{enum.name}'")
        return number

    def _union(self, union: ResolvedUnion, value: Any) -> None:
        if not isinstance(value, UnionValue) or value.union != union.name:
            raise XdrEncodeError(f"expected UnionValue of '{union.name}', got {value!r}")

        arm = self._arm(union, value.arm)
        disc = value.discriminant
        if disc is None:
            if len(arm.labels) != 1:
                raise XdrEncodeError(f"arm '{arm.variant}' of '{union.name}' needs an explicit discriminant")
            disc = arm.labels[0]
        if union.arm_for(disc) is not arm:
            raise InvalidUnionDiscriminant(disc)

        self._pack(">I" if union.is_unsigned else ">i", disc)
        if arm.field is not None:
            self.encode(arm.field.ty, value.value)
        elif value.value is not None:
            raise XdrEncodeError(f"arm '{arm.variant}' of '{union.name}' is void")

    def _arm(self, union: ResolvedUnion, variant: str) -> ResolvedArm:
        for arm in (*union.arms, union.default):
            if arm is not None and arm.variant == variant:
                return arm
        raise XdrEncodeError(f"union '{union.name}' has no arm '{variant}'")

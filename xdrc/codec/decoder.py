"""Decoding of XDR bytes against a resolved definition graph.

Follows the generated Rust decoders rule for rule: one up-front length check
per definition, length prefixes validated before any element is read, zero
padding enforced, and byte data handed out as views of the input.
"""
from __future__ import annotations

import struct
from typing import Any, Optional

from xdrc.backend.constants import DEFAULT_MAX_DEPTH, U32_MAX, padding_of
from xdrc.backend.types.sizing import TypeSizing
from xdrc.codec.errors import (
    DepthLimitExceeded,
    InvalidEnumValue,
    InvalidUnionDiscriminant,
    LengthExceedsBound,
    NonZeroPadding,
    UnexpectedEof,
)
from xdrc.codec.values import EnumValue, StructValue, TypedefValue, UnionValue
from xdrc.internals.errors import raise_internal_error
from xdrc.semantics.symbols import (
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

_FORMATS = {
    BuiltinType.INT: ">i",
    BuiltinType.UNSIGNED_INT: ">I",
    BuiltinType.HYPER: ">q",
    BuiltinType.UNSIGNED_HYPER: ">Q",
    BuiltinType.FLOAT: ">f",
    BuiltinType.DOUBLE: ">d",
}


class XdrDecoder:
    def __init__(self, symbols: SymbolTable, sizing: TypeSizing, data, offset: int = 0,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        self.symbols = symbols
        self.sizing = sizing
        view = memoryview(data)
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        self.view = view
        self.pos = offset
        self.max_depth = max_depth
        self.depth = 0

    @property
    def remaining(self) -> int:
        return len(self.view) - self.pos

    def _ensure(self, n: int) -> None:
        if self.remaining < n:
            raise UnexpectedEof(n, self.remaining)

    def _take(self, n: int) -> memoryview:
        self._ensure(n)
        chunk = self.view[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def _unpack(self, fmt: str, size: int):
        self._ensure(size)
        (value,) = struct.unpack_from(fmt, self.view, self.pos)
        self.pos += size
        return value

    def _u32(self) -> int:
        return self._unpack(">I", 4)

    def _i32(self) -> int:
        return self._unpack(">i", 4)

    def _padding(self, length: int) -> None:
        start = self.pos
        if any(self._take(padding_of(length))):
            raise NonZeroPadding(start)

    def _length(self, bound: Optional[int]) -> int:
        limit = U32_MAX if bound is None else bound
        actual = self._u32()
        if actual > limit:
            raise LengthExceedsBound(limit, actual)
        return actual

    def decode(self, ty: Type) -> Any:
        match ty:
            case BuiltinType.BOOL:
                raw = self._u32()
                if raw not in (0, 1):
                    raise InvalidEnumValue(raw)
                return raw == 1
            case BuiltinType():
                fmt = _FORMATS[ty]
                return self._unpack(fmt, struct.calcsize(fmt))
            case TypeRef(name=name):
                return self.decode_definition(name)
            case FixedArrayType(element=element, length=length):
                return [self.decode(element) for _ in range(length)]
            case VariableArrayType(element=element, max_length=bound):
                count = self._length(bound)
                return [self.decode(element) for _ in range(count)]
            case OpaqueType(length=length, fixed=True):
                data = self._take(length)
                self._padding(length)
                return data
            case OpaqueType(length=bound) | StringType(max_length=bound):
                length = self._length(bound)
                data = self._take(length)
                self._padding(length)
                return data
            case OptionalType(inner=inner):
                flag = self._u32()
                if flag == 0:
                    return None
                if flag != 1:
                    raise InvalidUnionDiscriminant(flag)
                return self.decode(inner)
        raise_internal_error("XE0002", node=type(ty).__name__)

    def decode_definition(self, name: str) -> Any:
        self._ensure(self.sizing.size_of_definition(name).min)
        if self.depth >= self.max_depth:
            raise DepthLimitExceeded(self.max_depth)
        self.depth += 1
        try:
            return self._definition(name)
        finally:
            self.depth -= 1

    def _definition(self, name: str) -> Any:
        definition = self.symbols.definition(name)
        match definition:
            case ResolvedTypedef(target=target):
                return TypedefValue(name, self.decode(target))
            case ResolvedStruct(fields=fields):
                return StructValue(name, {f.name: self.decode(f.ty) for f in fields})
            case ResolvedEnum():
                value = self._i32()
                label = definition.label_of(value)
                if label is None:
                    raise InvalidEnumValue(value)
                return EnumValue(name, label, value)
            case ResolvedUnion():
                disc = self._u32() if definition.is_unsigned else self._i32()
                arm = definition.arm_for(disc)
                if arm is None:
                    raise InvalidUnionDiscriminant(disc)
                value = None if arm.field is None else self.decode(arm.field.ty)
                return UnionValue(name, arm.variant, disc, value)
        raise_internal_error("XE0002", node=type(definition).__name__)

"""`XdrDecode` implementations.

Each decode reads through an immutable cursor and returns a Result; nothing
in the emitted code indexes, unwraps or allocates past what the input can
actually hold. Byte-view types decode as `T<&'a [u8]>`, borrowing from the
input buffer.
"""
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xdrc.backend.codegen_rust import RustCodegen

from xdrc.backend.constants import U32_MAX
from xdrc.backend.rust_types import BUILTIN_RUST_TYPES, rust_ident
from xdrc.internals.errors import raise_internal_error
from xdrc.semantics.symbols import (
    ResolvedArm,
    ResolvedEnum,
    ResolvedStruct,
    ResolvedTypedef,
    ResolvedUnion,
)
from xdrc.semantics.typesys import (
    BuiltinType,
    FixedArrayType,
    OpaqueType,
    OptionalType,
    StringType,
    Type as Ty,
    TypeRef,
    VariableArrayType,
)

OK = "::core::result::Result::Ok"
ERR = "::core::result::Result::Err"


def max_arg(bound) -> str:
    return "u32::MAX" if bound is None or bound == U32_MAX else str(bound)


class DecodeEmitter:
    def __init__(self, cg: 'RustCodegen'):
        self.cg = cg
        self.w = cg.w
        self.types = cg.types

    def expr(self, ty: Ty) -> str:
        """A Rust expression of type `XdrResult<T>` that decodes `ty` from `_cur`."""
        match ty:
            case BuiltinType():
                return f"{BUILTIN_RUST_TYPES[ty]}::decode(_cur)"
            case TypeRef(name=name):
                if self.types.is_generic(name):
                    return f"<{self.types.named(name, decode=True)}>::decode(_cur)"
                return f"{rust_ident(name)}::decode(_cur)"
            case FixedArrayType(element=element, length=length):
                return f"decode_fixed_array::<_, _, {length}>(_cur, |_cur| {self.expr(element)})"
            case VariableArrayType(element=element, max_length=max_length):
                return f"decode_var_array(_cur, {max_arg(max_length)}, |_cur| {self.expr(element)})"
            case OpaqueType(length=length, fixed=True):
                return f"_cur.read_fixed_opaque::<{length}>()"
            case OpaqueType(length=bound) | StringType(max_length=bound):
                return f"_cur.read_opaque({max_arg(bound)})"
            case OptionalType(inner=inner):
                return f"decode_optional(_cur, |_cur| {self.expr(inner)})"
        raise_internal_error("XE0002", node=type(ty).__name__)

    def emit_impl(self, name: str) -> None:
        definition = self.cg.symbols.definition(name)
        target = self.types.named(name, decode=True)

        with self.w.block(f"impl<'a> XdrDecode<'a> for {target}"):
            with self.w.block("fn decode(_cur: &mut XdrCursor<'a>) -> XdrResult<Self>"):
                if self.cg.sizing.size_of_definition(name).min > 0:
                    self.w.line("_cur.ensure(Self::XDR_MIN_SIZE)?;")
                # Every definition spends one level of the cursor's nesting budget.
                with self.w.block("_cur.nested(|_cur|", suffix=")"):
                    self._body(definition)

    def _body(self, definition) -> None:
        match definition:
            case ResolvedTypedef(target=inner):
                self.w.line(f"{OK}(Self({self.expr(inner)}?))")
            case ResolvedStruct():
                self._struct(definition)
            case ResolvedEnum():
                self.w.line("let _value = _cur.read_u32()? as i32;")
                self.w.line("Self::from_xdr_value(_value).ok_or(XdrError::InvalidEnumValue(_value as i64))")
            case ResolvedUnion():
                self._union(definition)
            case _:
                raise_internal_error("XE0002", node=type(definition).__name__)

    def _struct(self, struct: ResolvedStruct) -> None:
        if not struct.fields:
            self.w.line(f"{OK}(Self {{}})")
            return
        # Field initialisers run in source order, which is wire order.
        with self.w.block(f"{OK}(Self", suffix=")"):
            for f in struct.fields:
                self.w.line(f"{rust_ident(f.name)}: {self.expr(f.ty)}?,")

    def _union(self, union: ResolvedUnion) -> None:
        if union.is_unsigned:
            self.w.line("let _disc = _cur.read_u32()?;")
        else:
            self.w.line("let _disc = _cur.read_u32()? as i32;")

        with self.w.block("match _disc"):
            for arm in union.arms:
                pattern = " | ".join(str(v) for v in arm.labels)
                self.w.line(f"{pattern} => {OK}({self._construct(arm)}),")
            if union.default is not None:
                self.w.line(f"_ => {OK}({self._construct(union.default)}),")
            else:
                self.w.line(f"_ => {ERR}(XdrError::InvalidUnionDiscriminant(_disc as i64)),")

    def _construct(self, arm: ResolvedArm) -> str:
        args = []
        if arm.carries_discriminant:
            args.append("_disc")
        if arm.field is not None:
            args.append(f"{self.expr(arm.field.ty)}?")
        variant = f"Self::{rust_ident(arm.variant)}"
        return f"{variant}({', '.join(args)})" if args else variant

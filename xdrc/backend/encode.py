"""`XdrEncode` implementations.

Encoding re-validates what the type system cannot: variable-length data
against its bound, and the raw discriminant carried by multi-label and
default union arms against the labels of that arm.
"""
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xdrc.backend.codegen_rust import RustCodegen

from xdrc.backend.decode import ERR, OK, max_arg
from xdrc.backend.rust_types import rust_ident
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


def _ref(place: str) -> str:
    """Reference to a place; `*x` places are already behind the reference `x`."""
    return place[1:] if place.startswith("*") else f"&{place}"


def _receiver(place: str) -> str:
    return place[1:] if place.startswith("*") else place


class EncodeEmitter:
    def __init__(self, cg: 'RustCodegen'):
        self.cg = cg
        self.w = cg.w
        self.types = cg.types

    def expr(self, ty: Ty, place: str) -> str:
        """A Rust expression of type `XdrResult<()>` that appends `place` to `_out`."""
        match ty:
            case BuiltinType() | TypeRef():
                return f"{_receiver(place)}.encode(_out)"
            case FixedArrayType(element=element):
                return f"encode_fixed_array({_ref(place)}, _out, |_item, _out| {self.expr(element, '*_item')})"
            case VariableArrayType(element=element, max_length=max_length):
                return (f"encode_var_array({_ref(place)}, {max_arg(max_length)}, _out, "
                        f"|_item, _out| {self.expr(element, '*_item')})")
            case OpaqueType(fixed=True):
                return f"encode_fixed_opaque({_ref(place)}, _out)"
            case OpaqueType(length=bound) | StringType(max_length=bound):
                return f"encode_opaque(::core::convert::AsRef::<[u8]>::as_ref({_ref(place)}), {max_arg(bound)}, _out)"
            case OptionalType(inner=inner):
                return f"encode_optional({_ref(place)}, _out, |_item, _out| {self.expr(inner, '*_item')})"
        raise_internal_error("XE0002", node=type(ty).__name__)

    def emit_impl(self, name: str) -> None:
        definition = self.cg.symbols.definition(name)
        target = self.types.named(name)
        if self.types.is_generic(name):
            header = f"impl<{self.types.byte_param}: ::core::convert::AsRef<[u8]>> XdrEncode for {target}"
        else:
            header = f"impl XdrEncode for {target}"

        with self.w.block(header):
            with self.w.block("fn encode(&self, _out: &mut ::std::vec::Vec<u8>) -> XdrResult<()>"):
                match definition:
                    case ResolvedTypedef(target=inner):
                        self.w.line(self.expr(inner, "self.0"))
                    case ResolvedStruct():
                        self._struct(definition)
                    case ResolvedEnum():
                        self.w.line("self.xdr_value().encode(_out)")
                    case ResolvedUnion():
                        self._union(definition)
                    case _:
                        raise_internal_error("XE0002", node=type(definition).__name__)

    def _struct(self, struct: ResolvedStruct) -> None:
        if not struct.fields:
            self.w.line("let _ = _out;")
        for f in struct.fields:
            self.w.line(f"{self.expr(f.ty, f'self.{rust_ident(f.name)}')}?;")
        self.w.line(f"{OK}(())")

    def _union(self, union: ResolvedUnion) -> None:
        disc = self.types.discriminant_type(union)
        taken = " | ".join(str(v) for v in union.case_values())

        with self.w.block("match self"):
            for arm in union.arms:
                self._arm(arm, disc, " | ".join(str(v) for v in arm.labels), inside=True)
            if union.default is not None:
                self._arm(union.default, disc, taken, inside=False)

    def _arm(self, arm: ResolvedArm, disc: str, labels: str, inside: bool) -> None:
        binds = []
        if arm.carries_discriminant:
            binds.append("_disc")
        if arm.field is not None:
            binds.append("_v")
        variant = f"Self::{rust_ident(arm.variant)}"
        pattern = f"{variant}({', '.join(binds)})" if binds else variant

        with self.w.block(f"{pattern} =>"):
            if arm.carries_discriminant:
                # Multi-label arms must hold one of their labels; the default arm must hold none.
                if inside:
                    self.w.line(f"if !::core::matches!(*_disc, {labels}) {{")
                elif labels:
                    self.w.line(f"if ::core::matches!(*_disc, {labels}) {{")
                if inside or labels:
                    self.w.line(f"    return {ERR}(XdrError::InvalidUnionDiscriminant(*_disc as i64));")
                    self.w.line("}")
                self.w.line("_disc.encode(_out)?;")
            else:
                self.w.line(f"({arm.labels[0]}{disc}).encode(_out)?;")
            if arm.field is not None:
                self.w.line(self.expr(arm.field.ty, "*_v"))
            else:
                self.w.line(f"{OK}(())")

"""Rust type declarations: constants, newtypes, structs, enums and unions."""
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xdrc.backend.codegen_rust import RustCodegen

from xdrc.backend.constants import U64_MAX
from xdrc.backend.rust_types import OPTION, rust_ident
from xdrc.backend.types.sizing import SizeInfo
from xdrc.internals.errors import raise_internal_error
from xdrc.semantics.symbols import (
    ResolvedArm,
    ResolvedConst,
    ResolvedEnum,
    ResolvedStruct,
    ResolvedTypedef,
    ResolvedUnion,
)


class DeclarationEmitter:
    def __init__(self, cg: 'RustCodegen'):
        self.cg = cg
        self.w = cg.w
        self.types = cg.types

    def emit_constant(self, const: ResolvedConst) -> None:
        self.w.line(f"pub const {rust_ident(const.name)}: i64 = {const.value};")

    def emit_definition(self, name: str) -> None:
        definition = self.cg.symbols.definition(name)
        size = self.cg.sizing.size_of_definition(name)
        kind = type(definition).__name__.removeprefix("Resolved").lower()

        self.w.line(f"/// XDR {kind} `{name}`, encoded size {size}.")
        for annotation in self.cg.config.annotations_for(name):
            self.w.line(annotation.strip())

        header = self.types.named(name)
        match definition:
            case ResolvedTypedef(target=target):
                self.w.line(f"pub struct {header}(pub {self.types.rust_type(target)});")
            case ResolvedStruct():
                self._struct(header, definition)
            case ResolvedEnum():
                self._enum(header, definition)
            case ResolvedUnion():
                self._union(header, definition)
            case _:
                raise_internal_error("XE0002", node=kind)

        self.w.blank()
        self._size_constants(name, size)
        if isinstance(definition, ResolvedEnum):
            self.w.blank()
            self._enum_values(header, definition)

    def _struct(self, header: str, struct: ResolvedStruct) -> None:
        with self.w.block(f"pub struct {header}"):
            for f in struct.fields:
                self.w.line(f"pub {rust_ident(f.name)}: {self.types.rust_type(f.ty)},")

    def _enum(self, header: str, enum: ResolvedEnum) -> None:
        self.w.line("#[repr(i32)]")
        with self.w.block(f"pub enum {header}"):
            for label, value in enum.labels:
                self.w.line(f"{rust_ident(label)} = {value},")

    def _enum_values(self, header: str, enum: ResolvedEnum) -> None:
        with self.w.block(f"impl {header}"):
            with self.w.block(f"pub fn from_xdr_value(_value: i32) -> {OPTION}<Self>"):
                with self.w.block("match _value"):
                    for label, value in enum.labels:
                        self.w.line(f"{value} => {OPTION}::Some(Self::{rust_ident(label)}),")
                    self.w.line(f"_ => {OPTION}::None,")
            self.w.blank()
            with self.w.block("pub fn xdr_value(&self) -> i32"):
                with self.w.block("match self"):
                    for label, value in enum.labels:
                        self.w.line(f"Self::{rust_ident(label)} => {value},")

    def _union(self, header: str, union: ResolvedUnion) -> None:
        disc = self.types.discriminant_type(union)
        with self.w.block(f"pub enum {header}"):
            for arm in union.arms:
                self.w.line(f"{self._variant(arm, disc)},")
            if union.default is not None:
                self.w.line(f"{self._variant(union.default, disc)},")

    def _variant(self, arm: ResolvedArm, disc: str) -> str:
        payload = []
        if arm.carries_discriminant:
            payload.append(disc)
        if arm.field is not None:
            payload.append(self.types.rust_type(arm.field.ty))
        name = rust_ident(arm.variant)
        return f"{name}({', '.join(payload)})" if payload else name

    def _size_constants(self, name: str, size: SizeInfo) -> None:
        impl = self.cg.impl_header(name)
        with self.w.block(impl):
            self.w.line(f"pub const XDR_MIN_SIZE: u64 = {min(size.min, U64_MAX)};")
            if size.max is None or size.max > U64_MAX:
                self.w.line(f"pub const XDR_MAX_SIZE: {OPTION}<u64> = {OPTION}::None;")
            else:
                self.w.line(f"pub const XDR_MAX_SIZE: {OPTION}<u64> = {OPTION}::Some({size.max});")
            if size.fixed and size.min <= U64_MAX:
                self.w.line(f"pub const XDR_FIXED_SIZE: u64 = {size.min};")

"""
Rust backend orchestrator for the XDR compiler.

Coordinates the specialised emitters that turn a resolved definition graph
into one Rust module: the support prelude, constants, then for every type
its declaration, size constants, decode and encode implementations.

API:
    from xdrc.backend.codegen_rust import RustCodegen
    source = RustCodegen(analysis, config).generate()
"""
from __future__ import annotations
from typing import List, Optional

from xdrc.backend.declarations import DeclarationEmitter
from xdrc.backend.decode import DecodeEmitter
from xdrc.backend.encode import EncodeEmitter
from xdrc.backend.runtime import render_prelude
from xdrc.backend.rust_types import RustTypeSystem
from xdrc.backend.types.sizing import TypeSizing
from xdrc.backend.writer import RustWriter
from xdrc.compiler.config import CodegenConfig
from xdrc.internals.version import get_versions
from xdrc.semantics.semantic_analyzer import Analysis

LINT_ALLOWS = ("dead_code", "non_camel_case_types", "non_snake_case", "non_upper_case_globals")


class RustCodegen:
    """Main Rust backend orchestrator."""

    def __init__(self, analysis: Analysis, config: Optional[CodegenConfig] = None,
                 source_name: str = "<input>") -> None:
        self.analysis = analysis
        self.symbols = analysis.symbols
        self.config = config or CodegenConfig()
        self.source_name = source_name

        self.w = RustWriter()
        self.types = RustTypeSystem(self.symbols)
        self.sizing = TypeSizing(self.symbols)
        self.declarations = DeclarationEmitter(self)
        self.decoders = DecodeEmitter(self)
        self.encoders = EncodeEmitter(self)

    def type_names(self) -> List[str]:
        """Type definitions in spec order."""
        return [s.name for s in self.symbols.types()]

    def impl_header(self, name: str) -> str:
        """`impl` line for inherent items of a type, generic over the byte view if needed."""
        target = self.types.named(name)
        if self.types.is_generic(name):
            return f"impl<{self.types.byte_param}> {target}"
        return f"impl {target}"

    def generate(self) -> str:
        self.types.check_names()

        w = self.w
        w.line(f"// Code generated by xdrc {get_versions()['app']} from {self.source_name}. DO NOT EDIT.")
        w.line(f"#![allow({', '.join(LINT_ALLOWS)})]")
        w.blank()

        if self.config.prelude:
            w.raw(render_prelude())
        else:
            w.line(f"use {self.config.prelude_path}::*;")
        w.blank()

        constants = self.analysis.constants()
        for const in constants:
            self.declarations.emit_constant(const)
        if constants:
            w.blank()

        for name in self.type_names():
            self.declarations.emit_definition(name)
            w.blank()
            self.decoders.emit_impl(name)
            w.blank()
            self.encoders.emit_impl(name)
            w.blank()

        return w.text()

    def layout(self) -> List[str]:
        """One `name: size` line per type, for --dump-layout."""
        return [f"{name}: {self.sizing.size_of_definition(name)}" for name in self.type_names()]

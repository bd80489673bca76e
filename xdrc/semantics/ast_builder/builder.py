"""Main ASTBuilder orchestrator for the XDR compiler.

Coordinates parsing of Lark parse trees into AST nodes, delegating to:

- Declaration parsing (types, bounds, values): semantics.ast_builder.types
- Definition parsing: semantics.ast_builder.declarations
- Utilities: semantics.ast_builder.utils

The builder performs no cross-definition resolution; it only rejects input
that is structurally invalid on its own.
"""
from __future__ import annotations
from typing import List

from lark import Tree

from xdrc.internals.errors import raise_internal_error
from xdrc.internals.report import span_of
from xdrc.semantics.ast import Definition, Program
from xdrc.semantics.ast_builder.types.parser import DeclarationParser


class ASTBuilder:
    def __init__(self):
        """Initialize ASTBuilder with a lazy-loaded declaration parser."""
        self._decls = None

    @property
    def decls(self) -> DeclarationParser:
        """Lazy-load DeclarationParser on first use."""
        if self._decls is None:
            self._decls = DeclarationParser(self)
        return self._decls

    def build(self, tree: Tree) -> Program:
        """Build Program AST from parse tree, preserving definition order."""
        from xdrc.semantics.ast_builder.declarations import constants, typedefs, structs, enums, unions

        assert isinstance(tree, Tree) and tree.data == "start"

        handlers = {
            "const_def": constants.parse_constdef,
            "typedef_def": typedefs.parse_typedef,
            "struct_def": structs.parse_structdef,
            "enum_def": enums.parse_enumdef,
            "union_def": unions.parse_uniondef,
        }

        definitions: List[Definition] = []
        for node in tree.children:
            if not isinstance(node, Tree):
                continue
            handler = handlers.get(node.data)
            if handler is None:
                raise_internal_error("XE0001", node=node.data)
            definitions.append(handler(node, self))

        return Program(definitions=definitions, loc=span_of(tree))

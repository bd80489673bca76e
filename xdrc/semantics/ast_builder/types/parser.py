"""Parser for declarations (`type name`, arrays, opaque, strings, pointers)."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from lark import Token, Tree

from xdrc.internals.errors import raise_internal_error
from xdrc.internals.report import span_of
from xdrc.semantics.ast import ConstName, Declaration, IntLit, Value
from xdrc.semantics.ast_builder.utils.literals import parse_int_literal
from xdrc.semantics.ast_builder.utils.tree_navigation import first_name, trees
from xdrc.semantics.typesys import (
    TYPE_NODE_NAMES,
    FixedArrayType,
    NamedType,
    OpaqueType,
    OptionalType,
    StringType,
    Type,
    VariableArrayType,
)

if TYPE_CHECKING:
    from xdrc.semantics.ast_builder.builder import ASTBuilder

DECLARATION_NODES = {
    "plain_decl",
    "fixed_array_decl",
    "var_array_decl",
    "fixed_opaque_decl",
    "var_opaque_decl",
    "string_decl",
    "optional_decl",
    "void_decl",
}

_VALUE_NODES = ("number", "const_ref")
_TYPE_SPEC_NODES = tuple(TYPE_NODE_NAMES) + ("name_t",)


class DeclarationParser:
    """Turns declaration subtrees into `Declaration` nodes."""

    def __init__(self, ast_builder: 'ASTBuilder'):
        self.ast_builder = ast_builder

    def parse_declaration(self, node: Tree) -> Declaration:
        if node.data not in DECLARATION_NODES:
            raise_internal_error("XE0001", node=node.data)

        if node.data == "void_decl":
            return Declaration(name=None, ty=None, loc=span_of(node))

        name_tok = first_name(node.children)
        if name_tok is None:
            raise_internal_error("XE0001", node=f"{node.data} without NAME")
        bound = self._optional_value(node)

        match node.data:
            case "plain_decl":
                ty: Type = self.parse_type_specifier(node)
            case "fixed_array_decl":
                ty = FixedArrayType(element=self.parse_type_specifier(node), length=bound)
            case "var_array_decl":
                ty = VariableArrayType(element=self.parse_type_specifier(node), max_length=bound)
            case "fixed_opaque_decl":
                ty = OpaqueType(length=bound, fixed=True)
            case "var_opaque_decl":
                ty = OpaqueType(length=bound, fixed=False)
            case "string_decl":
                ty = StringType(max_length=bound)
            case "optional_decl":
                ty = OptionalType(inner=self.parse_type_specifier(node))

        return Declaration(
            name=str(name_tok),
            ty=ty,
            loc=span_of(node),
            name_span=span_of(name_tok),
        )

    def parse_type_specifier(self, decl: Tree) -> Type:
        spec = next(trees(decl.children, *_TYPE_SPEC_NODES), None)
        if spec is None:
            raise_internal_error("XE0001", node=f"{decl.data} without type specifier")
        if spec.data == "name_t":
            return NamedType(str(first_name(spec.children)))
        return TYPE_NODE_NAMES[spec.data]

    def parse_value(self, node: Tree) -> Value:
        """Parse `number` / `const_ref` into an IntLit or ConstName."""
        tok = node.children[0]
        assert isinstance(tok, Token)
        if node.data == "number":
            return IntLit(parse_int_literal(str(tok), span_of(tok)), text=str(tok), loc=span_of(tok))
        if node.data == "const_ref":
            return ConstName(str(tok), loc=span_of(tok))
        raise_internal_error("XE0001", node=node.data)

    def _optional_value(self, node: Tree) -> Optional[Value]:
        value_node = next(trees(node.children, *_VALUE_NODES), None)
        return self.parse_value(value_node) if value_node is not None else None

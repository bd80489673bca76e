"""Constant definition parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING

from lark import Tree

from xdrc.internals.report import span_of
from xdrc.semantics.ast import ConstDef
from xdrc.semantics.ast_builder.utils.tree_navigation import first_name, trees

if TYPE_CHECKING:
    from xdrc.semantics.ast_builder.builder import ASTBuilder


def parse_constdef(t: Tree, ast_builder: 'ASTBuilder') -> ConstDef:
    """Parse const_def: "const" NAME "=" value ";" """
    assert t.data == "const_def"

    name_tok = first_name(t.children)
    if name_tok is None:
        raise NotImplementedError("const_def: missing constant NAME")

    value_node = next(trees(t.children, "number", "const_ref"), None)
    if value_node is None:
        raise NotImplementedError("const_def: missing value")

    return ConstDef(
        name=str(name_tok),
        value=ast_builder.decls.parse_value(value_node),
        loc=span_of(t),
        name_span=span_of(name_tok),
    )

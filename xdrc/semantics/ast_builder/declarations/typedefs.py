"""Typedef parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING

from lark import Tree

from xdrc.internals.report import span_of
from xdrc.semantics.ast import TypedefDef
from xdrc.semantics.ast_builder.exceptions import MisplacedVoidError
from xdrc.semantics.ast_builder.types.parser import DECLARATION_NODES
from xdrc.semantics.ast_builder.utils.tree_navigation import trees

if TYPE_CHECKING:
    from xdrc.semantics.ast_builder.builder import ASTBuilder


def parse_typedef(t: Tree, ast_builder: 'ASTBuilder') -> TypedefDef:
    """Parse typedef_def: "typedef" declaration ";"

    The declared name becomes the new type; the rest of the declaration is
    the type it wraps.
    """
    assert t.data == "typedef_def"

    decl_node = next(trees(t.children, *DECLARATION_NODES), None)
    if decl_node is None:
        raise NotImplementedError("typedef_def: missing declaration")

    decl = ast_builder.decls.parse_declaration(decl_node)
    if decl.is_void:
        raise MisplacedVoidError("a typedef", span_of(t))

    return TypedefDef(
        name=decl.name,
        ty=decl.ty,
        loc=span_of(t),
        name_span=decl.name_span,
    )

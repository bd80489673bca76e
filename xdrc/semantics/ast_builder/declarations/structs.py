"""Struct definition and field parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List

from lark import Tree

from xdrc.internals.report import span_of
from xdrc.semantics.ast import Declaration, StructDef
from xdrc.semantics.ast_builder.exceptions import DuplicateFieldError, MisplacedVoidError
from xdrc.semantics.ast_builder.types.parser import DECLARATION_NODES
from xdrc.semantics.ast_builder.utils.tree_navigation import first_name, first_tree, trees

if TYPE_CHECKING:
    from xdrc.semantics.ast_builder.builder import ASTBuilder


def parse_structdef(t: Tree, ast_builder: 'ASTBuilder') -> StructDef:
    """Parse struct_def: "struct" NAME struct_body ";" """
    assert t.data == "struct_def"

    name_tok = first_name(t.children)
    if name_tok is None:
        raise NotImplementedError("struct_def: missing struct NAME")
    name = str(name_tok)

    body = first_tree(t.children, "struct_body")
    if body is None:
        raise NotImplementedError("struct_def: missing body")

    fields: List[Declaration] = []
    seen: set[str] = set()
    for decl_node in trees(body.children, *DECLARATION_NODES):
        decl = ast_builder.decls.parse_declaration(decl_node)
        if decl.is_void:
            raise MisplacedVoidError(f"struct '{name}'", decl.loc)
        if decl.name in seen:
            raise DuplicateFieldError(decl.name, name, decl.name_span)
        seen.add(decl.name)
        fields.append(decl)

    return StructDef(
        name=name,
        fields=fields,
        loc=span_of(t),
        name_span=span_of(name_tok),
    )

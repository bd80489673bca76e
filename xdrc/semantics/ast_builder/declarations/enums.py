"""Enum definition and label parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List

from lark import Tree

from xdrc.internals.report import span_of
from xdrc.semantics.ast import EnumDef, EnumMember
from xdrc.semantics.ast_builder.utils.tree_navigation import first_name, first_tree, trees

if TYPE_CHECKING:
    from xdrc.semantics.ast_builder.builder import ASTBuilder


def parse_enumdef(t: Tree, ast_builder: 'ASTBuilder') -> EnumDef:
    """Parse enum_def: "enum" NAME enum_body ";"

    Label uniqueness is a namespace question and label values may name
    constants, so both are checked by the resolver, not here.
    """
    assert t.data == "enum_def"

    name_tok = first_name(t.children)
    if name_tok is None:
        raise NotImplementedError("enum_def: missing enum NAME")

    body = first_tree(t.children, "enum_body")
    if body is None:
        raise NotImplementedError("enum_def: missing body")

    members: List[EnumMember] = []
    for member in trees(body.children, "enum_member"):
        members.append(parse_enum_member(member, ast_builder))

    return EnumDef(
        name=str(name_tok),
        members=members,
        loc=span_of(t),
        name_span=span_of(name_tok),
    )


def parse_enum_member(t: Tree, ast_builder: 'ASTBuilder') -> EnumMember:
    """Parse enum_member: NAME "=" value"""
    name_tok = first_name(t.children)
    if name_tok is None:
        raise NotImplementedError("enum_member: missing label NAME")

    value_node = next(trees(t.children, "number", "const_ref"), None)
    if value_node is None:
        raise NotImplementedError("enum_member: missing value")

    return EnumMember(
        name=str(name_tok),
        value=ast_builder.decls.parse_value(value_node),
        loc=span_of(name_tok),
    )

"""Discriminated union parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional

from lark import Tree

from xdrc.internals.report import span_of
from xdrc.semantics.ast import Declaration, UnionArm, UnionDef
from xdrc.semantics.ast_builder.exceptions import (
    DuplicateDefaultArmError,
    DuplicateFieldError,
    InvalidDiscriminantError,
    MissingDefaultArmError,
)
from xdrc.semantics.ast_builder.types.parser import DECLARATION_NODES
from xdrc.semantics.ast_builder.utils.tree_navigation import first_name, first_tree, trees

if TYPE_CHECKING:
    from xdrc.semantics.ast_builder.builder import ASTBuilder


def parse_uniondef(t: Tree, ast_builder: 'ASTBuilder') -> UnionDef:
    """Parse union_def: "union" NAME "switch" "(" declaration ")" "{" arms "}" ";" """
    assert t.data == "union_def"

    name_tok = first_name(t.children)
    if name_tok is None:
        raise NotImplementedError("union_def: missing union NAME")
    name = str(name_tok)

    body = first_tree(t.children, "union_body")
    if body is None:
        raise NotImplementedError("union_def: missing body")

    disc_node = next(trees(body.children, *DECLARATION_NODES), None)
    if disc_node is None:
        raise NotImplementedError("union_def: missing discriminant")
    if disc_node.data != "plain_decl":
        raise InvalidDiscriminantError(name, span_of(disc_node))
    discriminant = ast_builder.decls.parse_declaration(disc_node)

    arms: List[UnionArm] = []
    default: Optional[Declaration] = None
    seen: set[str] = set()

    for child in trees(body.children, "case_arm", "default_arm"):
        if child.data == "case_arm":
            arm = parse_case_arm(child, ast_builder)
            decl = arm.decl
            arms.append(arm)
        else:
            if default is not None:
                raise DuplicateDefaultArmError(name, span_of(child))
            decl = _arm_declaration(child, ast_builder)
            default = decl

        if decl.name is not None:
            if decl.name in seen:
                raise DuplicateFieldError(decl.name, name, decl.name_span)
            seen.add(decl.name)

    if not arms and default is None:
        raise MissingDefaultArmError(name, span_of(t))

    return UnionDef(
        name=name,
        discriminant=discriminant,
        arms=arms,
        default=default,
        loc=span_of(t),
        name_span=span_of(name_tok),
    )


def parse_case_arm(t: Tree, ast_builder: 'ASTBuilder') -> UnionArm:
    """Parse case_arm: case_label+ declaration ";" """
    labels = []
    for label in trees(t.children, "case_label"):
        value_node = next(trees(label.children, "number", "const_ref"))
        labels.append(ast_builder.decls.parse_value(value_node))

    return UnionArm(
        labels=labels,
        decl=_arm_declaration(t, ast_builder),
        loc=span_of(t),
    )


def _arm_declaration(t: Tree, ast_builder: 'ASTBuilder') -> Declaration:
    decl_node = next(trees(t.children, *DECLARATION_NODES), None)
    if decl_node is None:
        raise NotImplementedError(f"{t.data}: missing declaration")
    return ast_builder.decls.parse_declaration(decl_node)

"""Lark parser setup and AST construction."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from lark import Lark, Tree

from xdrc.semantics.ast import Program
from xdrc.semantics.ast_builder import ASTBuilder

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"

_parser: Optional[Lark] = None


def get_parser() -> Lark:
    """Build the LALR parser once; it holds no per-parse state."""
    global _parser
    if _parser is None:
        _parser = Lark.open(
            str(GRAMMAR_PATH),
            parser="lalr",
            lexer="basic",
            propagate_positions=True,
            maybe_placeholders=False,
        )
    return _parser


def parse_tree(src: str) -> Tree:
    """Parse spec text into a lark parse tree.

    Raises:
        ParseError: if the text does not match the XDR grammar.
    """
    from lark import UnexpectedInput
    from xdrc.internals.parse_errors import to_syntax_error

    try:
        return get_parser().parse(src)
    except UnexpectedInput as e:
        raise to_syntax_error(e) from None


def parse_to_ast(src: str, dump_parse: bool = False) -> tuple[Program, Tree]:
    """Parse spec text into an AST.

    Returns:
        Tuple of (ast, parse_tree).
    """
    tree = parse_tree(src)
    if dump_parse:
        print(tree.pretty())

    ast_builder = ASTBuilder()
    return ast_builder.build(tree), tree

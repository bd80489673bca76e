"""Translate lark parse failures into located syntax errors."""
from __future__ import annotations

from lark import UnexpectedInput
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedToken

from xdrc.internals.report import Span
from xdrc.semantics.ast_builder.exceptions import ParseError

# Readable spellings for the anonymous terminals lark generates.
_TERMINAL_NAMES = {
    "SEMICOLON": "';'",
    "COLON": "':'",
    "COMMA": "','",
    "EQUAL": "'='",
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "LPAR": "'('",
    "RPAR": "')'",
    "LSQB": "'['",
    "RSQB": "']'",
    "LESSTHAN": "'<'",
    "MORETHAN": "'>'",
    "STAR": "'*'",
    "NAME": "identifier",
    "NUMBER": "number",
    "$END": "end of input",
}


def _terminal(name: str) -> str:
    if name in _TERMINAL_NAMES:
        return _TERMINAL_NAMES[name]
    # Keyword terminals are named after the keyword itself (e.g. STRUCT).
    return f"'{name.lower()}'"


def improve_parse_error(e: UnexpectedInput) -> str:
    """Short, single-line message for a lark parse failure."""
    if isinstance(e, UnexpectedToken):
        expected = sorted(_terminal(t) for t in e.expected)
        if e.token.type == "$END":
            got = "end of input"
        else:
            got = f"'{e.token}'"
        if len(expected) > 6:
            return f"unexpected {got}"
        return f"unexpected {got}, expected one of: {', '.join(expected)}"
    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character '{e.char}'"
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of input"
    return str(e).splitlines()[0]


def to_syntax_error(e: UnexpectedInput) -> ParseError:
    line = getattr(e, "line", None) or 0
    col = getattr(e, "column", None) or 0
    span = Span(line, col, line, col) if line > 0 else None
    return ParseError(improve_parse_error(e), span)

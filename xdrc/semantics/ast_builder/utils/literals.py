"""Integer literal validation for the XDR constant syntax."""
from __future__ import annotations
import re
from typing import Optional

from xdrc.internals.report import Span
from xdrc.semantics.ast_builder.exceptions import MalformedLiteralError

# RFC 4506 section 6.2: decimal, hexadecimal (0x) and octal (leading 0).
_DECIMAL = re.compile(r"^-?(0|[1-9][0-9]*)$")
_HEX = re.compile(r"^-?0[xX][0-9a-fA-F]+$")
_OCTAL = re.compile(r"^-?0[0-7]+$")


def parse_int_literal(text: str, span: Optional[Span] = None) -> int:
    """Convert a NUMBER token to an int.

    Raises:
        MalformedLiteralError: for floats, empty hex prefixes, stray letters
            and octal literals with 8/9 digits.
    """
    negative = text.startswith("-")
    digits = text[1:] if negative else text

    if _HEX.match(text):
        value = int(digits[2:], 16)
    elif _OCTAL.match(text):
        value = int(digits[1:], 8)
    elif _DECIMAL.match(text):
        value = int(digits, 10)
    else:
        raise MalformedLiteralError(text, span)

    return -value if negative else value

"""Errors raised while emitting Rust code."""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from xdrc.internals.errors import ERR, CompileError

if TYPE_CHECKING:
    from xdrc.internals.report import Span


class ReservedName(CompileError):
    """A definition or field name the generated module cannot use."""

    def __init__(self, name: str, what: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE3001, span, name=name, what=what)
        self.name = name

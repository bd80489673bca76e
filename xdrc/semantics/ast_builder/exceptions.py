"""Syntax errors raised while turning the parse tree into an AST."""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from xdrc.internals.errors import ERR, CompileError

if TYPE_CHECKING:
    from xdrc.internals.report import Span


class XdrSyntaxError(CompileError):
    """Base class for structurally invalid spec text (carries `span` and `message`)."""


class ParseError(XdrSyntaxError):
    """Exception raised when the grammar rejects the input."""
    def __init__(self, message: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE1001, span, message=message)


class DuplicateFieldError(XdrSyntaxError):
    """Exception raised when a struct or union repeats a field name."""
    def __init__(self, field: str, owner: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE1002, span, field=field, owner=owner)
        self.field = field
        self.owner = owner


class MalformedLiteralError(XdrSyntaxError):
    """Exception raised for integer literals that are not decimal, hex or octal."""
    def __init__(self, literal: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE1003, span, literal=literal)
        self.literal = literal


class MissingDefaultArmError(XdrSyntaxError):
    """Exception raised when a union has neither cases nor a default arm."""
    def __init__(self, name: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE1004, span, name=name)


class MisplacedVoidError(XdrSyntaxError):
    """Exception raised when 'void' appears outside a union arm."""
    def __init__(self, context: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE1005, span, context=context)


class InvalidDiscriminantError(XdrSyntaxError):
    """Exception raised when a union switches on something other than 'type name'."""
    def __init__(self, name: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE1006, span, name=name)


class DuplicateDefaultArmError(XdrSyntaxError):
    def __init__(self, name: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE1007, span, name=name)

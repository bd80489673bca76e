"""Semantic errors raised by the symbol collector and resolver.

Every error is terminal for the compilation attempt: the resolver stops at
the first one because later phases assume a complete, valid graph.
"""
from __future__ import annotations
from typing import Optional, Sequence, TYPE_CHECKING

from xdrc.internals.errors import ERR, CompileError

if TYPE_CHECKING:
    from xdrc.internals.report import Span


class UndefinedReference(CompileError):
    def __init__(self, name: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE2001, span, name=name)
        self.name = name


class DuplicateDefinition(CompileError):
    def __init__(self, name: str, span: Optional['Span'] = None, previous: Optional['Span'] = None):
        prev = f" (previous definition at {previous})" if previous is not None else ""
        super().__init__(ERR.XE2002, span, name=name, prev=prev)
        self.name = name
        self.previous = previous


class CyclicTypedef(CompileError):
    """A definition depends on itself without an optional/array link in between.

    `chain` lists the names along the cycle, starting and ending with the
    re-entered name.
    """
    def __init__(self, chain: Sequence[str], span: Optional['Span'] = None):
        self.chain = list(chain)
        super().__init__(ERR.XE2003, span, chain=" -> ".join(self.chain))


class DuplicateEnumValue(CompileError):
    def __init__(self, name: str, value: int, first: str, second: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE2004, span, name=name, value=value, first=first, second=second)
        self.value = value


class NonConstantBound(CompileError):
    def __init__(self, what: str, reason: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE2005, span, what=what, reason=reason)


class InvalidUnionCaseSet(CompileError):
    def __init__(self, name: str, reason: str, span: Optional['Span'] = None):
        super().__init__(ERR.XE2006, span, name=name, reason=reason)

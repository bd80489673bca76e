# xdrc/internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from xdrc.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL   = "general"
    SYNTAX    = "syntax"
    NAME      = "name"
    TYPE      = "type"
    CONSTANT  = "constant"
    UNION     = "union"
    CODEGEN   = "codegen"
    INTERNAL  = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)


class CompileError(Exception):
    """A terminal compile-time error.

    Carries the catalog entry, the source span and the format arguments so the
    caller can either inspect it or hand it to a Reporter via `report()`.
    """

    def __init__(self, em: ErrorMessage, span: Optional[Span] = None, **kwargs) -> None:
        self.error = em
        self.span = span
        self.args_map = kwargs
        super().__init__(_fmt(em.code, **kwargs))

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return str(self)

    def report(self, r: Reporter) -> None:
        emit(r, self.error, self.span, **self.args_map)


def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def raise_internal_error(code: str, **kwargs) -> None:
    """Raise a RuntimeError for internal compiler errors.

    Internal errors (XE0xxx) indicate compiler bugs, not problems in the
    input spec. They surface as plain Python exceptions.

    Raises:
        RuntimeError: Always raises with formatted error message
    """
    text = _fmt(code, **kwargs)
    raise RuntimeError(f"{code}: {text}")


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Internal errors (compiler bugs) - XE0xxx range
_add(ErrorMessage("XE0001", Severity.ERROR,
    "unknown parse tree node '{node}'",
    Category.INTERNAL, "The AST builder met a grammar rule it does not handle."))

_add(ErrorMessage("XE0002", Severity.ERROR,
    "unknown type node '{node}'",
    Category.INTERNAL, "A type description reached a phase that cannot handle it."))

_add(ErrorMessage("XE0003", Severity.ERROR,
    "unresolved reference '{name}' after resolution",
    Category.INTERNAL, "A later phase found a symbol the resolver should have completed."))

_add(ErrorMessage("XE0004", Severity.ERROR,
    "symbol '{name}' has no resolved definition",
    Category.INTERNAL, "Lookup of a resolved definition by name failed."))

# Syntax errors - XE1xxx range
_add(ErrorMessage("XE1001", Severity.ERROR,
    "{message}",
    Category.SYNTAX, "The spec text does not match the XDR grammar."))

_add(ErrorMessage("XE1002", Severity.ERROR,
    "duplicate field '{field}' in '{owner}'",
    Category.SYNTAX, "Field and arm names must be unique within one struct or union."))

_add(ErrorMessage("XE1003", Severity.ERROR,
    "malformed integer literal '{literal}'",
    Category.SYNTAX, "Integer literals are decimal, 0x-prefixed hex, or leading-zero octal."))

_add(ErrorMessage("XE1004", Severity.ERROR,
    "union '{name}' needs a default arm when it declares no cases",
    Category.SYNTAX, "A union must have at least one case arm or a default arm."))

_add(ErrorMessage("XE1005", Severity.ERROR,
    "'void' is only allowed as a union arm, not in {context}",
    Category.SYNTAX, "Void declarations carry no data and only make sense inside a union."))

_add(ErrorMessage("XE1006", Severity.ERROR,
    "union '{name}' discriminant must be a plain 'type name' declaration",
    Category.SYNTAX, "Arrays, opaque data, strings and pointers cannot select a union arm."))

_add(ErrorMessage("XE1007", Severity.ERROR,
    "union '{name}' declares more than one default arm",
    Category.SYNTAX, "Only one default arm is allowed per union."))

# Name resolution - XE2xxx range
_add(ErrorMessage("XE2001", Severity.ERROR,
    "undefined reference '{name}'",
    Category.NAME, "Every referenced name must be declared somewhere in the spec."))

_add(ErrorMessage("XE2002", Severity.ERROR,
    "'{name}' is already defined{prev}",
    Category.NAME, "Constants, types and enum labels share one flat namespace."))

_add(ErrorMessage("XE2003", Severity.ERROR,
    "cyclic definition: {chain}",
    Category.TYPE, "Self-referential types need an optional ('*') or variable-length array link."))

_add(ErrorMessage("XE2004", Severity.ERROR,
    "enum '{name}' assigns value {value} to both '{first}' and '{second}'",
    Category.CONSTANT, "Enum label values must be distinct."))

_add(ErrorMessage("XE2005", Severity.ERROR,
    "'{what}' is not a usable constant: {reason}",
    Category.CONSTANT, "Bounds and constant values must resolve to non-negative integers at compile time."))

_add(ErrorMessage("XE2006", Severity.ERROR,
    "invalid case set in union '{name}': {reason}",
    Category.UNION, "Case labels must be unique values of the discriminant type."))

# Code generation - XE3xxx range
_add(ErrorMessage("XE3001", Severity.ERROR,
    "'{name}' collides with a {what} in the generated module",
    Category.CODEGEN, "Rename the definition; the name is reserved by the generated support code."))

# Warnings - XW range
_add(ErrorMessage("XW2001", Severity.WARNING,
    "union '{name}' has no default arm and does not cover {labels}",
    Category.UNION, "Decoding any uncovered label fails with InvalidUnionDiscriminant."))

_add(ErrorMessage("XW2002", Severity.WARNING,
    "spec declares no types; the generated module only holds support code",
    Category.GENERAL, "Nothing to generate beyond constants and the prelude."))

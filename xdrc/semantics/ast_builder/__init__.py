"""
AST Builder module for the XDR compiler.

Exports:
    ASTBuilder: Main class for building the AST from Lark parse trees
    Exceptions: Syntax errors raised for structurally invalid definitions
"""
from xdrc.semantics.ast_builder.builder import ASTBuilder

from xdrc.semantics.ast_builder.exceptions import (
    XdrSyntaxError,
    ParseError,
    DuplicateFieldError,
    MalformedLiteralError,
    MissingDefaultArmError,
    MisplacedVoidError,
    InvalidDiscriminantError,
    DuplicateDefaultArmError,
)

__all__ = [
    'ASTBuilder',
    'XdrSyntaxError',
    'ParseError',
    'DuplicateFieldError',
    'MalformedLiteralError',
    'MissingDefaultArmError',
    'MisplacedVoidError',
    'InvalidDiscriminantError',
    'DuplicateDefaultArmError',
]

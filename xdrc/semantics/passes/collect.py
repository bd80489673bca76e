# xdrc/semantics/passes/collect.py
"""Pass 1: declare every top-level name and every enum label.

Nothing is resolved here. Each symbol starts UNRESOLVED so the constant
evaluator and type resolver can walk the graph in any order, which is what
lets definitions refer forward to names declared later in the file.
"""

from __future__ import annotations
from typing import Optional

from xdrc.internals.report import Span
from xdrc.semantics.ast import ConstDef, EnumDef, Program, StructDef, TypedefDef, UnionDef
from xdrc.semantics.exceptions import DuplicateDefinition
from xdrc.semantics.symbols import (
    ResolutionState,
    ResolvedConst,
    Symbol,
    SymbolKind,
    SymbolTable,
)

# RFC 4506 boolean literals; usable wherever a constant is expected.
BUILTIN_CONSTANTS = {"TRUE": 1, "FALSE": 0}

_KINDS = {
    ConstDef: SymbolKind.CONST,
    TypedefDef: SymbolKind.TYPEDEF,
    StructDef: SymbolKind.STRUCT,
    UnionDef: SymbolKind.UNION,
    EnumDef: SymbolKind.ENUM,
}


class CollectorPass:
    """Builds the flat symbol table for one Program."""

    def __init__(self) -> None:
        self.symbols = SymbolTable()

    def run(self, root: Program) -> SymbolTable:
        for name, value in BUILTIN_CONSTANTS.items():
            self.symbols.declare(Symbol(
                name=name,
                kind=SymbolKind.CONST,
                node=None,
                state=ResolutionState.RESOLVED,
                resolved=ResolvedConst(name, value),
            ))

        for definition in root.definitions:
            kind = _KINDS[type(definition)]
            self._declare(definition.name, kind, definition,
                          definition.name_span or definition.loc)
            if isinstance(definition, EnumDef):
                for member in definition.members:
                    self._declare(member.name, SymbolKind.ENUM_LABEL, member,
                                  member.loc, owner=definition.name)

        return self.symbols

    def _declare(self, name: str, kind: SymbolKind, node: object,
                 loc: Optional[Span], owner: Optional[str] = None) -> None:
        prev = self.symbols.lookup(name)
        if prev is not None:
            raise DuplicateDefinition(name, loc, prev.loc)
        self.symbols.declare(Symbol(name=name, kind=kind, node=node, loc=loc, owner=owner))

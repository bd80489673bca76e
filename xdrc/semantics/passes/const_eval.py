# xdrc/semantics/passes/const_eval.py
"""Compile-time evaluation of constants, enum label values and bounds."""

from __future__ import annotations
from typing import List, Optional

from xdrc.internals.report import Span
from xdrc.semantics.ast import ConstDef, ConstName, EnumMember, IntLit, Value
from xdrc.semantics.exceptions import CyclicTypedef, NonConstantBound, UndefinedReference
from xdrc.semantics.symbols import ResolutionState, ResolvedConst, SymbolTable

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1
U32_MAX = (1 << 32) - 1


class ConstantEvaluator:
    """Evaluates value expressions against the symbol table.

    A value is either an integer literal or the name of a constant or enum
    label. Names are evaluated on demand with the same three-state marker the
    type resolver uses, so `const A = B; const B = A;` is reported as a cycle
    instead of recursing forever.
    """

    def __init__(self, symbols: SymbolTable) -> None:
        self.symbols = symbols
        self._stack: List[str] = []

    def evaluate_all(self) -> None:
        """Evaluate every constant and enum label in declaration order."""
        for sym in self.symbols:
            if sym.kind.is_value:
                self.value_of(sym.name, sym.loc)

    def evaluate(self, value: Value) -> int:
        match value:
            case IntLit(value=v):
                return v
            case ConstName(name=name, loc=loc):
                return self.value_of(name, loc)
        raise TypeError(f"not a value node: {value!r}")

    def value_of(self, name: str, span: Optional[Span] = None) -> int:
        sym = self.symbols.lookup(name)
        if sym is None:
            raise UndefinedReference(name, span)
        if not sym.kind.is_value:
            raise NonConstantBound(name, f"'{name}' names a {sym.kind.value}, not a constant", span)

        if sym.state is ResolutionState.RESOLVED:
            return sym.resolved.value
        if sym.state is ResolutionState.RESOLVING:
            chain = self._stack[self._stack.index(name):] + [name]
            raise CyclicTypedef(chain, span)

        sym.state = ResolutionState.RESOLVING
        self._stack.append(name)
        try:
            node = sym.node
            assert isinstance(node, (ConstDef, EnumMember))
            value = self.evaluate(node.value)
            if not I64_MIN <= value <= I64_MAX:
                raise NonConstantBound(name, "value does not fit in a signed 64-bit integer", sym.loc)
        finally:
            self._stack.pop()

        sym.resolved = ResolvedConst(name, value)
        sym.state = ResolutionState.RESOLVED
        return value

    def bound(self, value: Value) -> int:
        """Evaluate an array, opaque or string bound; must fit in an unsigned 32-bit int."""
        n = self.evaluate(value)
        if n < 0 or n > U32_MAX:
            raise NonConstantBound(str(value), f"bound {n} is outside 0..{U32_MAX}",
                                   getattr(value, "loc", None))
        return n

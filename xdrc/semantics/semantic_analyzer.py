# xdrc/semantics/semantic_analyzer.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from xdrc.internals import errors as er
from xdrc.internals.report import Reporter
from xdrc.semantics.ast import Program
from xdrc.semantics.error_reporter import PassErrorReporter
from xdrc.semantics.passes import CollectorPass, ConstantEvaluator, TypeResolver
from xdrc.semantics.symbols import ResolvedConst, ResolvedDef, Symbol, SymbolTable


@dataclass
class Analysis:
    """The resolved definition graph of one spec.

    Built once per run and never mutated afterwards; the size analyzer, the
    code generator and the reference codec all read from it.
    """
    program: Program
    symbols: SymbolTable

    def definition(self, name: str) -> ResolvedDef:
        return self.symbols.definition(name)

    def types(self) -> List[Symbol]:
        return self.symbols.types()

    def constants(self) -> List[ResolvedConst]:
        return self.symbols.constants()


class SemanticAnalyzer:
    """
    Runs the semantic passes over a Program.

    Pass execution order:
      - Pass 1: Symbol collection (every definition and enum label, UNRESOLVED)
      - Pass 1.5: Constant evaluation (const values and enum label values)
      - Pass 2: Type resolution (references, bounds, cycles, union case sets)

    Errors are raised and stop the run; warnings go to the reporter.
    """

    def __init__(self, reporter: Optional[Reporter] = None) -> None:
        self.reporter = reporter if reporter is not None else Reporter()
        self.err = PassErrorReporter(self.reporter)
        self.symbols: Optional[SymbolTable] = None

    def check(self, program: Program) -> Analysis:
        # Pass 1: declare names
        self.symbols = CollectorPass().run(program)

        # Pass 1.5: evaluate constants and enum labels
        consts = ConstantEvaluator(self.symbols)
        consts.evaluate_all()

        # Pass 2: resolve type definitions depth-first
        TypeResolver(self.symbols, consts, self.reporter).run()

        if not self.symbols.types():
            self.err.emit(er.ERR.XW2002, program.loc)

        return Analysis(program=program, symbols=self.symbols)

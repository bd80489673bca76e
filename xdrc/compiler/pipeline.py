"""Compilation pipeline: spec text -> AST -> resolved graph -> Rust source.

`analyze_source` and `compile_source` are the library entry points and
raise `CompileError` subclasses; `run` is what the CLI drives, turning those
errors into diagnostics and an exit code.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from xdrc.backend.codegen_rust import RustCodegen
from xdrc.compiler.config import CodegenConfig, ConfigError, load_config
from xdrc.internals.errors import CompileError
from xdrc.internals.parser import parse_to_ast
from xdrc.internals.report import Reporter
from xdrc.semantics.semantic_analyzer import Analysis, SemanticAnalyzer


def analyze_source(source: str, reporter: Optional[Reporter] = None,
                   dump_parse: bool = False) -> Analysis:
    """Parse and resolve a spec.

    Raises:
        CompileError: the first syntax or semantic error found.
    """
    program, _ = parse_to_ast(source, dump_parse=dump_parse)
    return SemanticAnalyzer(reporter).check(program)


def compile_source(source: str, config: Optional[CodegenConfig] = None,
                   filename: str = "<input>", reporter: Optional[Reporter] = None) -> str:
    """Compile spec text into one Rust module.

    Raises:
        CompileError: the first syntax, semantic or naming error found.
    """
    analysis = analyze_source(source, reporter)
    return RustCodegen(analysis, config, source_name=Path(filename).name).generate()


def _stage(verbose: bool, message: str) -> None:
    if verbose:
        print(message, file=sys.stderr)


def run(args) -> int:
    """Compile `args.source` per the parsed CLI arguments; returns the exit code."""
    src_path = Path(args.source)
    try:
        src = src_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"error: cannot read {src_path}: {e}", file=sys.stderr)
        return 2

    try:
        config = load_config(Path(args.config)) if args.config else CodegenConfig()
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    if args.no_prelude:
        config.prelude = False

    reporter = Reporter(source=src, filename=str(src_path))

    try:
        _stage(args.verbose, f"Parsing {src_path}")
        program, _ = parse_to_ast(src, dump_parse=args.dump_parse)
        if args.dump_ast:
            print(program)
            print()

        _stage(args.verbose, "Resolving definitions")
        analysis = SemanticAnalyzer(reporter).check(program)

        _stage(args.verbose, "Generating Rust")
        cg = RustCodegen(analysis, config, source_name=src_path.name)
        rust = cg.generate()
        if args.dump_layout:
            for line in cg.layout():
                print(line)
            print()
    except CompileError as e:
        e.report(reporter)
        reporter.print()
        return 2

    if args.out:
        out_path = Path(args.out)
        try:
            out_path.write_text(rust, encoding="utf-8")
        except OSError as e:
            print(f"error: cannot write {out_path}: {e}", file=sys.stderr)
            return 2
        _stage(args.verbose, f"Wrote {out_path}")
    else:
        sys.stdout.write(rust)

    reporter.print()
    return reporter.exit_code()

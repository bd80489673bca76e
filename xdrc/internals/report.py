from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from lark import Token


class C:
    """ANSI color/style escape codes."""
    RESET = "\x1b[0m"
    BOLD  = "\x1b[1m"
    DIM   = "\x1b[2m"
    RED   = "\x1b[31m"
    YELLOW = "\x1b[33m"
    CYAN  = "\x1b[36m"
    GRAY  = "\x1b[90m"


@dataclass
class Span:
    line: int
    col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.line}:{self.col}"


@dataclass
class Diagnostic:
    kind: str
    code: str
    message: str
    span: Optional[Span] = None
    filename: Optional[str] = None


def span_of(t: Any) -> Optional[Span]:
    """Source span of a lark Tree (via propagated meta) or Token."""
    if t is None:
        return None
    m = getattr(t, "meta", None)
    if m is not None and not getattr(m, "empty", True):
        return Span(m.line, m.column, m.end_line, m.end_column)
    if isinstance(t, Token):
        line = getattr(t, "line", None)
        col = getattr(t, "column", None)
        if line is not None and col is not None:
            end_line = getattr(t, "end_line", None)
            end_col = getattr(t, "end_column", None)
            return Span(line, col, end_line or line, end_col or col)
    return None


class Reporter:
    def __init__(self, source: Optional[str] = None, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self.items: List[Diagnostic] = []

    def error(self, code: str, msg: str, span: Optional[Span]) -> None:
        self.items.append(Diagnostic("error", code, msg, span, filename=self.filename))

    def warn(self, code: str, msg: str, span: Optional[Span]) -> None:
        self.items.append(Diagnostic("warning", code, msg, span, filename=self.filename))

    @property
    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.items)

    @property
    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.items)

    def exit_code(self) -> int:
        """0 = clean, 1 = warnings only, 2 = errors."""
        if self.has_errors:
            return 2
        if self.has_warnings:
            return 1
        return 0

    def _display_name(self, filename: str) -> str:
        try:
            rel_path = Path(filename).resolve().relative_to(Path.cwd())
            return f"./{rel_path}"
        except ValueError:
            return Path(filename).name

    def _marker_width(self, span: Span, line_text: str) -> int:
        """Columns to underline: the span on its first line, at least one."""
        if span.end_line == span.line and span.end_col > span.col:
            return span.end_col - span.col
        return max(1, len(line_text) - span.col + 1)

    def summary(self) -> str:
        """'N error(s), M warning(s)' tally, empty when nothing was reported."""
        errors = sum(1 for d in self.items if d.kind == "error")
        warnings = len(self.items) - errors
        parts = []
        if errors:
            parts.append(f"{errors} error{'s' if errors != 1 else ''}")
        if warnings:
            parts.append(f"{warnings} warning{'s' if warnings != 1 else ''}")
        return ", ".join(parts)

    def format(self, use_color: bool = True, use_unicode: bool = True) -> str:
        """Render every diagnostic with its source line and an underline.

        use_color   → ANSI colorize location, kind and underline
        use_unicode → box-drawing frame around the snippet
        """
        lines: List[str] = []
        src_lines = self.source.splitlines() if self.source else []

        for d in self.items:
            where = self._display_name(d.filename or self.filename)
            if d.span:
                where = f"{where}:{d.span}"
            text = d.message if d.message.endswith('.') else f"{d.message}."
            tint = C.RED if d.kind == "error" else C.YELLOW

            if use_color:
                head = f"{C.CYAN}{where}{C.RESET}: {C.BOLD}{tint}{d.kind}{C.RESET} [{C.DIM}{d.code}{C.RESET}]: {text}"
            else:
                head = f"{where}: {d.kind} [{d.code}]: {text}"

            if d.span is None or not (0 < d.span.line <= len(src_lines)):
                lines.append(head)
                continue

            snippet = src_lines[d.span.line - 1]
            pad = " " * (max(1, d.span.col) - 1)
            width = self._marker_width(d.span, snippet)
            underline = ("━" if use_unicode else "^") * width
            if use_color:
                underline = f"{tint}{underline}{C.RESET}"

            if use_unicode:
                frame = (lambda s: f"{C.GRAY}{s}{C.RESET}") if use_color else (lambda s: s)
                lines.append(f"{frame('  ╭─ ')}{head}")
                lines.append(f"{frame(f'{d.span.line:>3} │')} {snippet}")
                lines.append(f"{frame('    │')} {pad}{underline}")
                lines.append(frame("    ╰─"))
            else:
                lines.append(head)
                lines.append(f"{d.span.line:>4} | {snippet}")
                lines.append(f"     | {pad}{underline}")

        return "\n".join(lines)

    def print(self, stream=None, use_color: Optional[bool] = None, use_unicode: Optional[bool] = None) -> None:
        """Write diagnostics plus a tally line to `stream` (default: sys.stderr).

        Color and the unicode frame are on for a TTY unless NO_COLOR,
        NO_UNICODE or TERM=dumb say otherwise.
        """
        import os, sys
        stream = stream or sys.stderr
        interactive = getattr(stream, "isatty", lambda: False)() and os.getenv("TERM") != "dumb"

        if use_color is None:
            use_color = interactive and os.getenv("NO_COLOR") is None
        if use_unicode is None:
            use_unicode = interactive and os.getenv("NO_UNICODE") is None

        text = self.format(use_color=use_color, use_unicode=use_unicode)
        if text:
            print(text, file=stream)
            print(f"{self.filename}: {self.summary()}", file=stream)

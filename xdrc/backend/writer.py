"""Indented line writer for Rust source."""
from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, List

INDENT = "    "


class RustWriter:
    def __init__(self) -> None:
        self.lines: List[str] = []
        self.depth = 0

    def line(self, text: str = "") -> None:
        self.lines.append(INDENT * self.depth + text if text else "")

    def blank(self) -> None:
        if self.lines and self.lines[-1] != "":
            self.lines.append("")

    def raw(self, block: str) -> None:
        """Append pre-formatted source at the current depth."""
        for text in block.rstrip("\n").split("\n"):
            self.line(text)

    @contextmanager
    def block(self, header: str, suffix: str = "") -> Iterator[None]:
        """`header {` ... `}suffix`, indenting everything written inside."""
        self.line(f"{header} {{" if header else "{")
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1
            self.line(f"}}{suffix}")

    def text(self) -> str:
        while self.lines and self.lines[-1] == "":
            self.lines.pop()
        return "\n".join(self.lines) + "\n"

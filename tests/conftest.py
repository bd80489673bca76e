import struct

import pytest

from xdrc import analyze_source, compile_source
from xdrc.codec import XdrCodec
from xdrc.internals.report import Reporter


def words(*values: int) -> bytes:
    """Big-endian 4-byte words; negative values are written as signed."""
    return b"".join(struct.pack(">i" if v < 0 else ">I", v) for v in values)


@pytest.fixture
def analyze():
    def _analyze(src: str, reporter: Reporter | None = None):
        return analyze_source(src, reporter)
    return _analyze


@pytest.fixture
def codec():
    def _codec(src: str) -> XdrCodec:
        return XdrCodec(analyze_source(src))
    return _codec


@pytest.fixture
def rust():
    def _rust(src: str, config=None) -> str:
        return compile_source(src, config, filename="test.x")
    return _rust

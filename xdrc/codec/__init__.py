"""Reference XDR codec driven by a resolved definition graph.

Decodes and encodes with the same rules as the generated Rust code, so test
vectors can be checked against a spec without compiling anything:

    codec = XdrCodec(analyze_source(text))
    value = codec.decode("Shape", payload)
    assert codec.encode("Shape", value) == payload
"""
from __future__ import annotations
from typing import Any, Tuple

from xdrc.backend.constants import DEFAULT_MAX_DEPTH
from xdrc.backend.types.sizing import TypeSizing
from xdrc.codec.decoder import XdrDecoder
from xdrc.codec.encoder import XdrEncoder
from xdrc.codec.errors import (
    DepthLimitExceeded,
    InvalidEnumValue,
    InvalidUnionDiscriminant,
    LengthExceedsBound,
    NonZeroPadding,
    TrailingBytes,
    UnexpectedEof,
    XdrDecodeError,
    XdrEncodeError,
)
from xdrc.codec.values import EnumValue, StructValue, TypedefValue, UnionValue
from xdrc.semantics.semantic_analyzer import Analysis


class XdrCodec:
    """Decode and encode values of the types one resolved spec defines.

    `max_depth` bounds how deeply definitions may nest in decoded data, like
    the nesting budget of the generated `XdrCursor`. Running out of
    interpreter stack before that budget is spent is reported the same way.
    """

    def __init__(self, analysis: Analysis, max_depth: int = DEFAULT_MAX_DEPTH):
        self.symbols = analysis.symbols
        self.sizing = TypeSizing(self.symbols)
        self.max_depth = max_depth

    def _check_type(self, type_name: str) -> None:
        sym = self.symbols.lookup(type_name)
        if sym is None or not sym.kind.is_type:
            raise KeyError(f"'{type_name}' is not a type defined by this spec")

    def _decode(self, decoder: XdrDecoder, type_name: str) -> Any:
        try:
            return decoder.decode_definition(type_name)
        except RecursionError as e:
            raise DepthLimitExceeded(self.max_depth) from e

    def decode(self, type_name: str, data) -> Any:
        """Decode a whole buffer; every byte must belong to the value."""
        self._check_type(type_name)
        decoder = XdrDecoder(self.symbols, self.sizing, data, max_depth=self.max_depth)
        value = self._decode(decoder, type_name)
        if decoder.remaining:
            raise TrailingBytes(decoder.remaining)
        return value

    def decode_from(self, type_name: str, data, offset: int = 0) -> Tuple[Any, int]:
        """Decode one value starting at `offset`; returns it with the offset just past it."""
        self._check_type(type_name)
        decoder = XdrDecoder(self.symbols, self.sizing, data, offset, max_depth=self.max_depth)
        value = self._decode(decoder, type_name)
        return value, decoder.pos

    def encode(self, type_name: str, value: Any) -> bytes:
        self._check_type(type_name)
        encoder = XdrEncoder(self.symbols)
        encoder.encode_definition(type_name, value)
        return bytes(encoder.out)


__all__ = [
    'XdrCodec',
    'EnumValue',
    'StructValue',
    'TypedefValue',
    'UnionValue',
    'XdrDecodeError',
    'XdrEncodeError',
    'UnexpectedEof',
    'InvalidUnionDiscriminant',
    'InvalidEnumValue',
    'LengthExceedsBound',
    'NonZeroPadding',
    'DepthLimitExceeded',
    'TrailingBytes',
]

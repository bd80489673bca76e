"""Errors raised by the reference codec.

The decode errors mirror the variants of the generated Rust `XdrError`
one for one; `TrailingBytes` is the extra check of whole-buffer decoding.
"""
from __future__ import annotations


class XdrDecodeError(Exception):
    pass


class UnexpectedEof(XdrDecodeError):
    def __init__(self, needed: int, available: int):
        super().__init__(f"unexpected end of XDR input: needed {needed} bytes, {available} left")
        self.needed = needed
        self.available = available


class InvalidUnionDiscriminant(XdrDecodeError):
    def __init__(self, value: int):
        super().__init__(f"invalid union discriminant {value}")
        self.value = value


class InvalidEnumValue(XdrDecodeError):
    def __init__(self, value: int):
        super().__init__(f"invalid enum value {value}")
        self.value = value


class LengthExceedsBound(XdrDecodeError):
    def __init__(self, max: int, actual: int):
        super().__init__(f"length {actual} exceeds bound {max}")
        self.max = max
        self.actual = actual


class NonZeroPadding(XdrDecodeError):
    def __init__(self, offset: int):
        super().__init__(f"non-zero XDR padding at offset {offset}")
        self.offset = offset


class DepthLimitExceeded(XdrDecodeError):
    def __init__(self, max_depth: int):
        super().__init__(f"XDR data nested deeper than {max_depth} definitions")
        self.max_depth = max_depth


class TrailingBytes(XdrDecodeError):
    def __init__(self, count: int):
        super().__init__(f"{count} bytes left after the decoded value")
        self.count = count


class XdrEncodeError(ValueError):
    """A Python value does not have the shape of the XDR type it is encoded as."""

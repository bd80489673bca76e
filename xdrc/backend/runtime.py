"""Support code emitted at the top of every generated Rust module.

The prelude is self-contained: it needs nothing beyond `core` and `std`, and
every path in it is fully qualified so user definitions named `Option`,
`Vec` or `Result` cannot shadow what the generated code relies on.

Decoding never panics: every read goes through `XdrCursor::take`, which
bounds-checks with `get`, array pre-allocation is capped by the bytes
actually left in the input, and every definition decode spends one unit of
the cursor's nesting budget so hostile input cannot exhaust the stack.

Every local binding and parameter here, and in the emitted impls, starts
with an underscore. XDR identifiers start with a letter, so no definition in
the module can clash with them (a tuple struct or const named `data` would
otherwise capture `let data = ...` as a pattern).
"""
from __future__ import annotations

from xdrc.backend.constants import DEFAULT_MAX_DEPTH

# Items the prelude defines at module level; spec definitions may not reuse them.
PRELUDE_ITEMS = frozenset({
    "XdrError",
    "XdrCursor",
    "XdrDecode",
    "XdrEncode",
    "XdrBuf",
    "XdrResult",
    "XDR_DEFAULT_MAX_DEPTH",
    "decode_fixed_array",
    "decode_var_array",
    "decode_optional",
    "encode_fixed_array",
    "encode_var_array",
    "encode_optional",
    "encode_opaque",
    "encode_fixed_opaque",
    "check_length",
})

ERROR_TYPE = """\
/// Failure while decoding XDR data, or while re-validating a value for encoding.
#[derive(Debug, Clone, Copy, PartialEq, Eq)]
pub enum XdrError {
    /// The input ended before the value was complete.
    UnexpectedEof,
    /// A union discriminant matched no arm (or did not belong to its arm on encode).
    InvalidUnionDiscriminant(i64),
    /// An enum or bool word held a value outside the declared set.
    InvalidEnumValue(i64),
    /// A length prefix (or a value being encoded) exceeded its declared bound.
    LengthExceedsBound { max: u32, actual: u32 },
    /// Padding after opaque or string data was not all zero.
    NonZeroPadding,
    /// Definitions nested deeper than the cursor's nesting budget.
    DepthLimitExceeded,
}

impl ::core::fmt::Display for XdrError {
    fn fmt(&self, _f: &mut ::core::fmt::Formatter<'_>) -> ::core::fmt::Result {
        match self {
            XdrError::UnexpectedEof => _f.write_str("unexpected end of XDR input"),
            XdrError::InvalidUnionDiscriminant(_v) => write!(_f, "invalid union discriminant {}", _v),
            XdrError::InvalidEnumValue(_v) => write!(_f, "invalid enum value {}", _v),
            XdrError::LengthExceedsBound { max: _max, actual: _actual } => {
                write!(_f, "length {} exceeds bound {}", _actual, _max)
            }
            XdrError::NonZeroPadding => _f.write_str("non-zero XDR padding"),
            XdrError::DepthLimitExceeded => _f.write_str("XDR data nested too deeply"),
        }
    }
}

impl ::std::error::Error for XdrError {}

pub type XdrResult<T> = ::core::result::Result<T, XdrError>;
"""

CURSOR = """\
/// Nesting budget of `XdrCursor::new`.
pub const XDR_DEFAULT_MAX_DEPTH: u32 = @DEPTH@;

/// Read position over an immutable input buffer.
#[derive(Debug, Clone, Copy)]
pub struct XdrCursor<'a> {
    buf: &'a [u8],
    pos: usize,
    depth: u32,
}

impl<'a> XdrCursor<'a> {
    pub fn new(_buf: &'a [u8]) -> Self {
        XdrCursor::with_max_depth(_buf, XDR_DEFAULT_MAX_DEPTH)
    }

    /// Cursor that allows definitions to nest `_max_depth` levels deep.
    pub fn with_max_depth(_buf: &'a [u8], _max_depth: u32) -> Self {
        XdrCursor { buf: _buf, pos: 0, depth: _max_depth }
    }

    pub fn position(&self) -> usize {
        self.pos
    }

    pub fn remaining(&self) -> usize {
        self.buf.len() - self.pos
    }

    /// Fail early when fewer than `_n` bytes are left.
    pub fn ensure(&self, _n: u64) -> XdrResult<()> {
        if (self.remaining() as u64) < _n {
            return ::core::result::Result::Err(XdrError::UnexpectedEof);
        }
        ::core::result::Result::Ok(())
    }

    /// Run `_f` one nesting level deeper.
    pub fn nested<T, F>(&mut self, _f: F) -> XdrResult<T>
    where
        F: FnOnce(&mut XdrCursor<'a>) -> XdrResult<T>,
    {
        if self.depth == 0 {
            return ::core::result::Result::Err(XdrError::DepthLimitExceeded);
        }
        self.depth -= 1;
        let _result = _f(&mut *self);
        self.depth += 1;
        _result
    }

    pub fn take(&mut self, _n: usize) -> XdrResult<&'a [u8]> {
        let _end = self.pos.checked_add(_n).ok_or(XdrError::UnexpectedEof)?;
        let _bytes = self.buf.get(self.pos.._end).ok_or(XdrError::UnexpectedEof)?;
        self.pos = _end;
        ::core::result::Result::Ok(_bytes)
    }

    fn take_array<const N: usize>(&mut self) -> XdrResult<[u8; N]> {
        let _bytes = self.take(N)?;
        let mut _array = [0u8; N];
        _array.copy_from_slice(_bytes);
        ::core::result::Result::Ok(_array)
    }

    pub fn read_u32(&mut self) -> XdrResult<u32> {
        ::core::result::Result::Ok(u32::from_be_bytes(self.take_array::<4>()?))
    }

    pub fn read_u64(&mut self) -> XdrResult<u64> {
        ::core::result::Result::Ok(u64::from_be_bytes(self.take_array::<8>()?))
    }

    /// Consume the zero padding that follows `_len` bytes of opaque data.
    pub fn read_padding(&mut self, _len: usize) -> XdrResult<()> {
        let _pad = (4 - _len % 4) % 4;
        if self.take(_pad)?.iter().any(|_b| *_b != 0) {
            return ::core::result::Result::Err(XdrError::NonZeroPadding);
        }
        ::core::result::Result::Ok(())
    }

    /// Read a length prefix and check it against `_max` before anything else is read.
    pub fn read_length(&mut self, _max: u32) -> XdrResult<usize> {
        let _actual = self.read_u32()?;
        if _actual > _max {
            return ::core::result::Result::Err(XdrError::LengthExceedsBound { max: _max, actual: _actual });
        }
        ::core::result::Result::Ok(_actual as usize)
    }

    /// Variable-length opaque or string data, borrowed from the input.
    pub fn read_opaque(&mut self, _max: u32) -> XdrResult<&'a [u8]> {
        let _len = self.read_length(_max)?;
        let _data = self.take(_len)?;
        self.read_padding(_len)?;
        ::core::result::Result::Ok(_data)
    }

    pub fn read_fixed_opaque<const N: usize>(&mut self) -> XdrResult<[u8; N]> {
        let _data = self.take_array::<N>()?;
        self.read_padding(N)?;
        ::core::result::Result::Ok(_data)
    }
}
""".replace("@DEPTH@", str(DEFAULT_MAX_DEPTH))

TRAITS = """\
pub trait XdrDecode<'a>: Sized {
    fn decode(_cur: &mut XdrCursor<'a>) -> XdrResult<Self>;

    /// Decode one value from the start of `_buf`; returns it with the number of bytes consumed.
    fn from_xdr(_buf: &'a [u8]) -> XdrResult<(Self, usize)> {
        let mut _cur = XdrCursor::new(_buf);
        let _value = Self::decode(&mut _cur)?;
        ::core::result::Result::Ok((_value, _cur.position()))
    }
}

pub trait XdrEncode {
    fn encode(&self, _out: &mut ::std::vec::Vec<u8>) -> XdrResult<()>;

    fn to_xdr(&self) -> XdrResult<::std::vec::Vec<u8>> {
        let mut _out = ::std::vec::Vec::new();
        self.encode(&mut _out)?;
        ::core::result::Result::Ok(_out)
    }
}

macro_rules! xdr_word {
    ($ty:ty, $read:ident, $bits:ty) => {
        impl<'a> XdrDecode<'a> for $ty {
            fn decode(_cur: &mut XdrCursor<'a>) -> XdrResult<Self> {
                ::core::result::Result::Ok(_cur.$read()? as $ty)
            }
        }

        impl XdrEncode for $ty {
            fn encode(&self, _out: &mut ::std::vec::Vec<u8>) -> XdrResult<()> {
                _out.extend_from_slice(&(*self as $bits).to_be_bytes());
                ::core::result::Result::Ok(())
            }
        }
    };
}

xdr_word!(i32, read_u32, u32);
xdr_word!(u32, read_u32, u32);
xdr_word!(i64, read_u64, u64);
xdr_word!(u64, read_u64, u64);

impl<'a> XdrDecode<'a> for f32 {
    fn decode(_cur: &mut XdrCursor<'a>) -> XdrResult<Self> {
        ::core::result::Result::Ok(f32::from_bits(_cur.read_u32()?))
    }
}

impl XdrEncode for f32 {
    fn encode(&self, _out: &mut ::std::vec::Vec<u8>) -> XdrResult<()> {
        _out.extend_from_slice(&self.to_bits().to_be_bytes());
        ::core::result::Result::Ok(())
    }
}

impl<'a> XdrDecode<'a> for f64 {
    fn decode(_cur: &mut XdrCursor<'a>) -> XdrResult<Self> {
        ::core::result::Result::Ok(f64::from_bits(_cur.read_u64()?))
    }
}

impl XdrEncode for f64 {
    fn encode(&self, _out: &mut ::std::vec::Vec<u8>) -> XdrResult<()> {
        _out.extend_from_slice(&self.to_bits().to_be_bytes());
        ::core::result::Result::Ok(())
    }
}

impl<'a> XdrDecode<'a> for bool {
    fn decode(_cur: &mut XdrCursor<'a>) -> XdrResult<Self> {
        match _cur.read_u32()? {
            0 => ::core::result::Result::Ok(false),
            1 => ::core::result::Result::Ok(true),
            _v => ::core::result::Result::Err(XdrError::InvalidEnumValue(_v as i64)),
        }
    }
}

impl XdrEncode for bool {
    fn encode(&self, _out: &mut ::std::vec::Vec<u8>) -> XdrResult<()> {
        (*self as u32).encode(_out)
    }
}
"""

HELPERS = """\
pub fn decode_fixed_array<'a, T, F, const N: usize>(_cur: &mut XdrCursor<'a>, mut _f: F) -> XdrResult<[T; N]>
where
    F: FnMut(&mut XdrCursor<'a>) -> XdrResult<T>,
{
    let mut _items = ::std::vec::Vec::with_capacity(N.min(_cur.remaining()));
    for _ in 0..N {
        _items.push(_f(_cur)?);
    }
    <[T; N] as ::core::convert::TryFrom<::std::vec::Vec<T>>>::try_from(_items)
        .map_err(|_| XdrError::UnexpectedEof)
}

pub fn decode_var_array<'a, T, F>(_cur: &mut XdrCursor<'a>, _max: u32, mut _f: F) -> XdrResult<::std::vec::Vec<T>>
where
    F: FnMut(&mut XdrCursor<'a>) -> XdrResult<T>,
{
    let _len = _cur.read_length(_max)?;
    let mut _items = ::std::vec::Vec::with_capacity(_len.min(_cur.remaining()));
    for _ in 0.._len {
        _items.push(_f(_cur)?);
    }
    ::core::result::Result::Ok(_items)
}

pub fn decode_optional<'a, T, F>(_cur: &mut XdrCursor<'a>, _f: F) -> XdrResult<::core::option::Option<::std::boxed::Box<T>>>
where
    F: FnOnce(&mut XdrCursor<'a>) -> XdrResult<T>,
{
    match _cur.read_u32()? {
        0 => ::core::result::Result::Ok(::core::option::Option::None),
        1 => ::core::result::Result::Ok(::core::option::Option::Some(::std::boxed::Box::new(_f(_cur)?))),
        _v => ::core::result::Result::Err(XdrError::InvalidUnionDiscriminant(_v as i64)),
    }
}

/// Length of a value about to be encoded, checked against its declared bound.
pub fn check_length(_len: usize, _max: u32) -> XdrResult<u32> {
    if _len > _max as usize {
        let _actual = if _len > u32::MAX as usize { u32::MAX } else { _len as u32 };
        return ::core::result::Result::Err(XdrError::LengthExceedsBound { max: _max, actual: _actual });
    }
    ::core::result::Result::Ok(_len as u32)
}

pub fn encode_fixed_array<T, F>(_items: &[T], _out: &mut ::std::vec::Vec<u8>, mut _f: F) -> XdrResult<()>
where
    F: FnMut(&T, &mut ::std::vec::Vec<u8>) -> XdrResult<()>,
{
    for _item in _items {
        _f(_item, _out)?;
    }
    ::core::result::Result::Ok(())
}

pub fn encode_var_array<T, F>(_items: &[T], _max: u32, _out: &mut ::std::vec::Vec<u8>, mut _f: F) -> XdrResult<()>
where
    F: FnMut(&T, &mut ::std::vec::Vec<u8>) -> XdrResult<()>,
{
    check_length(_items.len(), _max)?.encode(_out)?;
    for _item in _items {
        _f(_item, _out)?;
    }
    ::core::result::Result::Ok(())
}

pub fn encode_optional<T, F>(_value: &::core::option::Option<::std::boxed::Box<T>>, _out: &mut ::std::vec::Vec<u8>, _f: F) -> XdrResult<()>
where
    F: FnOnce(&T, &mut ::std::vec::Vec<u8>) -> XdrResult<()>,
{
    match _value {
        ::core::option::Option::None => 0u32.encode(_out),
        ::core::option::Option::Some(_inner) => {
            1u32.encode(_out)?;
            _f(&**_inner, _out)
        }
    }
}

pub fn encode_opaque(_data: &[u8], _max: u32, _out: &mut ::std::vec::Vec<u8>) -> XdrResult<()> {
    check_length(_data.len(), _max)?.encode(_out)?;
    encode_fixed_opaque(_data, _out)
}

pub fn encode_fixed_opaque(_data: &[u8], _out: &mut ::std::vec::Vec<u8>) -> XdrResult<()> {
    _out.extend_from_slice(_data);
    _out.resize(_out.len() + (4 - _data.len() % 4) % 4, 0);
    ::core::result::Result::Ok(())
}
"""


def render_prelude() -> str:
    """The whole support prelude as one block of Rust source."""
    return "\n".join([ERROR_TYPE, CURSOR, TRAITS, HELPERS])

import struct

import pytest

from conftest import words
from xdrc.codec import (
    DepthLimitExceeded,
    EnumValue,
    InvalidEnumValue,
    InvalidUnionDiscriminant,
    LengthExceedsBound,
    NonZeroPadding,
    StructValue,
    TrailingBytes,
    TypedefValue,
    UnexpectedEof,
    UnionValue,
    XdrCodec,
    XdrEncodeError,
)

SPEC = """
enum Kind { CIRCLE = 0, SQUARE = 1, EMPTY = 2 };
struct Point { int x; int y; };
union Shape switch (Kind kind) {
    case CIRCLE: int radius;
    case SQUARE: Point corner;
    case EMPTY: void;
};
typedef string Name<4>;
typedef int Meters;
typedef int Seconds;
typedef opaque Hash[3];
struct Node { int value; Node *next; };
struct Wide { hyper h; unsigned hyper uh; float f; double d; bool flag; };
union Reply switch (unsigned int code) {
    case 1: int ok;
    case 2: case 3: string reason<>;
    default: void;
};
"""


@pytest.fixture
def xdr(codec):
    return codec(SPEC)


def point(x, y):
    return StructValue("Point", {"x": x, "y": y})


# --- decoding

def test_union_decode(xdr):
    value = xdr.decode("Shape", words(1, 3, 4))
    assert value == UnionValue("Shape", "SQUARE", 1, point(3, 4))
    assert xdr.decode("Shape", words(2)) == UnionValue("Shape", "EMPTY", 2, None)


def test_invalid_union_discriminant(xdr):
    with pytest.raises(InvalidUnionDiscriminant) as exc:
        xdr.decode("Shape", words(7, 0))
    assert exc.value.value == 7


def test_length_checked_before_data(xdr):
    # Only the length prefix is present: the bound check must fire first.
    with pytest.raises(LengthExceedsBound) as exc:
        xdr.decode("Name", words(5))
    assert (exc.value.max, exc.value.actual) == (4, 5)


def test_typedefs_are_nominal(xdr):
    meters = xdr.decode("Meters", words(10))
    seconds = xdr.decode("Seconds", words(10))
    assert meters == TypedefValue("Meters", 10)
    assert meters != seconds
    assert meters != 10


def test_byte_data_is_a_view_of_the_input(xdr):
    data = words(3) + b"abc\x00"
    value = xdr.decode("Name", data)
    assert isinstance(value.value, memoryview)
    assert value.value.obj is data
    assert bytes(value.value) == b"abc"


def test_fixed_opaque(xdr):
    value = xdr.decode("Hash", b"\x01\x02\x03\x00")
    assert bytes(value.value) == b"\x01\x02\x03"


def test_non_zero_padding(xdr):
    with pytest.raises(NonZeroPadding) as exc:
        xdr.decode("Name", words(2) + b"ab\x00\x01")
    assert exc.value.offset == 6


def test_short_input_fails_up_front(xdr):
    with pytest.raises(UnexpectedEof) as exc:
        xdr.decode("Point", words(1))
    assert (exc.value.needed, exc.value.available) == (8, 4)


def test_trailing_bytes(xdr):
    with pytest.raises(TrailingBytes) as exc:
        xdr.decode("Point", words(1, 2, 3))
    assert exc.value.count == 4


def test_decode_from_returns_new_offset(xdr):
    data = words(99, 1, 2, 5)
    value, offset = xdr.decode_from("Point", data, 4)
    assert value == point(1, 2)
    assert offset == 12


def test_invalid_enum_and_bool_values(xdr):
    with pytest.raises(InvalidEnumValue) as exc:
        xdr.decode("Kind", words(9))
    assert exc.value.value == 9
    with pytest.raises(InvalidEnumValue):
        xdr.decode("Wide", bytes(28) + words(2))


def test_optional_flag_must_be_zero_or_one(xdr):
    with pytest.raises(InvalidUnionDiscriminant) as exc:
        xdr.decode("Node", words(1, 2))
    assert exc.value.value == 2


def test_linked_list(xdr):
    value = xdr.decode("Node", words(1, 1, 2, 0))
    assert value == StructValue("Node", {"value": 1, "next": StructValue("Node", {"value": 2, "next": None})})


def test_multi_label_arm_keeps_discriminant(xdr):
    value = xdr.decode("Reply", words(3, 1) + b"x\x00\x00\x00")
    assert value.arm == "reason"
    assert value.discriminant == 3
    assert bytes(value.value) == b"x"
    assert xdr.decode("Reply", words(42)) == UnionValue("Reply", "Default", 42, None)


def test_unknown_type(xdr):
    with pytest.raises(KeyError):
        xdr.decode("Nope", b"")
    with pytest.raises(KeyError):
        xdr.decode("CIRCLE", words(0))


# --- encoding

def test_encode_struct_and_union(xdr):
    assert xdr.encode("Point", point(1, -2)) == words(1, -2)
    shape = UnionValue("Shape", "SQUARE", value=point(3, 4))
    assert xdr.encode("Shape", shape) == words(1, 3, 4)
    assert xdr.encode("Shape", UnionValue("Shape", "EMPTY")) == words(2)


def test_encode_enum_by_label(xdr):
    assert xdr.encode("Kind", "SQUARE") == words(1)
    assert xdr.encode("Kind", EnumValue("Kind", "EMPTY", 2)) == words(2)
    with pytest.raises(XdrEncodeError):
        xdr.encode("Kind", "TRIANGLE")


def test_encode_pads_strings(xdr):
    assert xdr.encode("Name", TypedefValue("Name", "ab")) == words(2) + b"ab\x00\x00"


def test_encode_checks_bounds(xdr):
    with pytest.raises(LengthExceedsBound) as exc:
        xdr.encode("Name", TypedefValue("Name", b"hello"))
    assert (exc.value.max, exc.value.actual) == (4, 5)
    with pytest.raises(LengthExceedsBound):
        xdr.encode("Hash", TypedefValue("Hash", b"\x01\x02"))


def test_encode_checks_fixed_array_length(codec):
    grid = codec("typedef int Row[3];")
    assert grid.encode("Row", TypedefValue("Row", [1, 2, 3])) == words(1, 2, 3)
    with pytest.raises(LengthExceedsBound) as exc:
        grid.encode("Row", TypedefValue("Row", [1, 2]))
    assert (exc.value.max, exc.value.actual) == (3, 2)


def test_encode_checks_union_discriminants(xdr):
    with pytest.raises(InvalidUnionDiscriminant):
        xdr.encode("Reply", UnionValue("Reply", "reason", 1, b"x"))
    with pytest.raises(InvalidUnionDiscriminant):
        xdr.encode("Reply", UnionValue("Reply", "Default", 2))
    with pytest.raises(XdrEncodeError):
        xdr.encode("Reply", UnionValue("Reply", "reason", None, b"x"))
    assert xdr.encode("Reply", UnionValue("Reply", "Default", 7)) == words(7)


def test_encode_rejects_wrong_shapes(xdr):
    with pytest.raises(XdrEncodeError):
        xdr.encode("Meters", 5)
    with pytest.raises(XdrEncodeError):
        xdr.encode("Meters", TypedefValue("Seconds", 5))
    with pytest.raises(XdrEncodeError):
        xdr.encode("Point", StructValue("Point", {"x": 1}))
    with pytest.raises(XdrEncodeError):
        xdr.encode("Point", point(1 << 40, 0))


def test_wide_primitives_round_trip(xdr):
    wide = StructValue("Wide", {"h": -5, "uh": (1 << 64) - 1, "f": 1.5, "d": -0.25, "flag": True})
    data = xdr.encode("Wide", wide)
    assert data == struct.pack(">qQfdI", -5, (1 << 64) - 1, 1.5, -0.25, 1)
    assert xdr.decode("Wide", data) == wide


def test_recursive_round_trip(xdr):
    chain = StructValue("Node", {"value": 1, "next": StructValue("Node", {"value": 2, "next": None})})
    data = xdr.encode("Node", chain)
    assert data == words(1, 1, 2, 0)
    assert xdr.decode("Node", data) == chain


# --- nesting and typedef elements

def linked_list(length):
    return b"".join(words(i, 1) for i in range(length - 1)) + words(length - 1, 0)


def test_nesting_within_budget_decodes(xdr):
    head = xdr.decode("Node", linked_list(128))
    assert head["value"] == 0


def test_nesting_beyond_budget_fails(xdr):
    with pytest.raises(DepthLimitExceeded) as exc:
        xdr.decode("Node", linked_list(129))
    assert exc.value.max_depth == 128


def test_hostile_nesting_is_a_decode_error(xdr):
    with pytest.raises(DepthLimitExceeded):
        xdr.decode("Node", linked_list(5000))


def test_custom_depth_budget(analyze):
    shallow = XdrCodec(analyze("struct Node { int value; Node *next; };"), max_depth=3)
    assert shallow.decode("Node", linked_list(3))["value"] == 0
    with pytest.raises(DepthLimitExceeded):
        shallow.decode("Node", linked_list(4))


def test_typedef_array_elements_keep_their_type(codec):
    xdr = codec("typedef uint32_t Inner; typedef Inner Arr<>;")
    value = xdr.decode("Arr", words(2, 7, 9))
    assert value == TypedefValue("Arr", [TypedefValue("Inner", 7), TypedefValue("Inner", 9)])
    assert value.value[0] != 7
    assert xdr.encode("Arr", value) == words(2, 7, 9)
    with pytest.raises(XdrEncodeError):
        xdr.encode("Arr", TypedefValue("Arr", [7]))


def test_opaque_bound_is_checked_before_data(codec):
    xdr = codec("typedef opaque data<4>;")
    with pytest.raises(LengthExceedsBound) as exc:
        xdr.decode("data", words(5) + b"\x01\x02\x03\x04\x05\x00\x00\x00")
    assert (exc.value.max, exc.value.actual) == (4, 5)

import pytest

from xdrc.backend.constants import pad4, padding_of
from xdrc.backend.types.sizing import RECURSIVE, SizeInfo, TypeSizing


def sizes(analysis) -> TypeSizing:
    return TypeSizing(analysis.symbols)


@pytest.mark.parametrize("n,padded,pad", [(0, 0, 0), (1, 4, 3), (4, 4, 0), (5, 8, 3), (7, 8, 1)])
def test_padding(n, padded, pad):
    assert pad4(n) == padded
    assert padding_of(n) == pad


def test_size_info_rendering():
    assert str(SizeInfo.fixed_size(12)) == "Fixed(12)"
    assert str(SizeInfo.bounded(4, 20)) == "Bounded(4, 20)"
    assert str(RECURSIVE) == "Bounded(0, unbounded)"
    assert not RECURSIVE.is_bounded


def test_fixed_sizes(analyze):
    s = sizes(analyze("""
        enum Color { RED = 0 };
        struct Point { int x; hyper y; };
        typedef Point Line[2];
        typedef opaque Hash[5];
        struct Pixel { Point at; Color color; bool on; double weight; };
    """))
    assert s.size_of_definition("Color") == SizeInfo.fixed_size(4)
    assert s.size_of_definition("Point") == SizeInfo.fixed_size(12)
    assert s.size_of_definition("Line") == SizeInfo.fixed_size(24)
    assert s.size_of_definition("Hash") == SizeInfo.fixed_size(8)
    assert s.size_of_definition("Pixel") == SizeInfo.fixed_size(28)


def test_variable_sizes(analyze):
    s = sizes(analyze("""
        const MAX = 3;
        typedef string Name<10>;
        typedef string Text<>;
        typedef int Ints<MAX>;
        typedef opaque Blob<5>;
        typedef int *MaybeInt;
        struct Labelled { Name name; int id; };
        typedef Labelled Pair[2];
    """))
    assert s.size_of_definition("Name") == SizeInfo.bounded(4, 16)
    assert s.size_of_definition("Text") == SizeInfo.bounded(4, None)
    assert s.size_of_definition("Ints") == SizeInfo.bounded(4, 16)
    assert s.size_of_definition("Blob") == SizeInfo.bounded(4, 12)
    assert s.size_of_definition("MaybeInt") == SizeInfo.bounded(4, 8)
    assert s.size_of_definition("Labelled") == SizeInfo.bounded(8, 20)
    assert s.size_of_definition("Pair") == SizeInfo.bounded(16, 40)


def test_union_sizes(analyze):
    s = sizes(analyze("""
        union Same switch (int d) { case 0: int a; case 1: float b; };
        union Mixed switch (int d) { case 0: hyper a; case 1: void; };
        union Open switch (int d) { case 0: int a; default: string s<>; };
    """))
    assert s.size_of_definition("Same") == SizeInfo.fixed_size(8)
    assert s.size_of_definition("Mixed") == SizeInfo.bounded(4, 12)
    assert s.size_of_definition("Open") == SizeInfo.bounded(8, None)


def test_recursive_types_are_unbounded(analyze):
    s = sizes(analyze("""
        struct Node { int value; Node *next; };
        struct Tree { Tree children<4>; };
    """))
    assert s.size_of_definition("Node") == SizeInfo.bounded(8, None)
    assert s.size_of_definition("Tree") == SizeInfo.bounded(4, None)


def test_sizes_are_cached(analyze):
    s = sizes(analyze("struct Point { int x; int y; };"))
    first = s.size_of_definition("Point")
    assert s.size_of_definition("Point") is first


def test_sizes_do_not_depend_on_query_order(analyze):
    src = "struct A { B *b; }; struct B { A a; int x; };"
    b_first = sizes(analyze(src))
    assert b_first.size_of_definition("B") == SizeInfo.bounded(8, None)
    assert b_first.size_of_definition("A") == SizeInfo.bounded(4, None)

    a_first = sizes(analyze(src))
    assert a_first.size_of_definition("A") == SizeInfo.bounded(4, None)
    assert a_first.size_of_definition("B") == SizeInfo.bounded(8, None)


def test_rpcgen_fixed_width_names(analyze):
    s = sizes(analyze("struct W { int32_t a; uint32_t b; int64_t c; uint64_t d; };"))
    assert s.size_of_definition("W") == SizeInfo.fixed_size(24)

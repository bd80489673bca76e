import pytest

from xdrc.internals.parser import parse_to_ast
from xdrc.semantics.ast import ConstDef, ConstName, EnumDef, IntLit, StructDef, TypedefDef, UnionDef
from xdrc.semantics.ast_builder import (
    DuplicateDefaultArmError,
    DuplicateFieldError,
    InvalidDiscriminantError,
    MalformedLiteralError,
    MisplacedVoidError,
    ParseError,
)
from xdrc.semantics.typesys import (
    BuiltinType,
    FixedArrayType,
    NamedType,
    OpaqueType,
    OptionalType,
    StringType,
    VariableArrayType,
)


def build(src: str):
    program, _ = parse_to_ast(src)
    return program


def test_definitions_keep_source_order():
    program = build("""
        const MAX = 4;
        typedef int Count;
        enum Color { RED = 0, GREEN = 1 };
        struct Point { int x; int y; };
        union Maybe switch (bool present) { case TRUE: int value; case FALSE: void; };
    """)
    kinds = [type(d) for d in program.definitions]
    assert kinds == [ConstDef, TypedefDef, EnumDef, StructDef, UnionDef]
    assert [d.name for d in program.definitions] == ["MAX", "Count", "Color", "Point", "Maybe"]


def test_integer_literal_forms():
    program = build("const A = 0x1F; const B = 017; const C = -12; const D = 0;")
    values = [d.value.value for d in program.of_kind(ConstDef)]
    assert values == [31, 15, -12, 0]
    assert program.definitions[0].value.text == "0x1F"


@pytest.mark.parametrize("literal", ["08", "1.5", "0x", "12abc"])
def test_malformed_literal(literal):
    with pytest.raises(MalformedLiteralError) as exc:
        build(f"const A = {literal};")
    assert exc.value.code == "XE1003"
    assert exc.value.literal == literal


def test_declaration_forms():
    program = build("""
        struct All {
            unsigned int u;
            unsigned plain;
            unsigned hyper uh;
            float f;
            double d;
            Point p;
            int fixed[3];
            int var<MAX>;
            int unbounded<>;
            opaque tag[6];
            opaque blob<16>;
            string name<>;
            Point *next;
        };
    """)
    struct = program.definitions[0]
    types = {f.name: f.ty for f in struct.fields}
    assert types["u"] == BuiltinType.UNSIGNED_INT
    assert types["plain"] == BuiltinType.UNSIGNED_INT
    assert types["uh"] == BuiltinType.UNSIGNED_HYPER
    assert types["f"] == BuiltinType.FLOAT
    assert types["d"] == BuiltinType.DOUBLE
    assert types["p"] == NamedType("Point")
    assert types["fixed"] == FixedArrayType(BuiltinType.INT, IntLit(3, "3"))
    assert types["var"] == VariableArrayType(BuiltinType.INT, ConstName("MAX"))
    assert types["unbounded"] == VariableArrayType(BuiltinType.INT, None)
    assert types["tag"] == OpaqueType(IntLit(6, "6"), fixed=True)
    assert types["blob"] == OpaqueType(IntLit(16, "16"), fixed=False)
    assert types["name"] == StringType(None)
    assert types["next"] == OptionalType(NamedType("Point"))


def test_rpcgen_fixed_width_type_names():
    program = build("typedef uint32_t Inner; struct W { int32_t a; int64_t b; uint64_t c; Inner i; };")
    assert program.definitions[0].ty == BuiltinType.UNSIGNED_INT
    types = [f.ty for f in program.definitions[1].fields]
    assert types == [BuiltinType.INT, BuiltinType.HYPER, BuiltinType.UNSIGNED_HYPER, NamedType("Inner")]


def test_identifiers_start_with_a_letter():
    with pytest.raises(ParseError) as exc:
        build("typedef int _hidden;")
    assert exc.value.code == "XE1001"


def test_union_arms_and_default():
    program = build("""
        union Result switch (int code) {
            case 0:
                int value;
            case 1:
            case 2:
                string message<>;
            default:
                void;
        };
    """)
    union = program.definitions[0]
    assert union.discriminant.name == "code"
    assert union.discriminant.ty == BuiltinType.INT
    assert [[lbl.value for lbl in arm.labels] for arm in union.arms] == [[0], [1, 2]]
    assert union.arms[1].decl.name == "message"
    assert union.default is not None and union.default.is_void


def test_comments_and_passthrough_lines_are_ignored():
    program = build("""
        %#include "other.h"
        /* block
           comment */
        const A = 1; // trailing
    """)
    assert [d.name for d in program.definitions] == ["A"]


def test_spans_point_at_names():
    program = build("const A = 1;\nstruct Point {\n  int x;\n};\n")
    struct = program.definitions[1]
    assert struct.name_span.line == 2
    assert struct.fields[0].name_span.line == 3


def test_void_outside_union():
    with pytest.raises(MisplacedVoidError) as exc:
        build("struct S { int a; void; };")
    assert exc.value.code == "XE1005"


def test_duplicate_struct_field():
    with pytest.raises(DuplicateFieldError) as exc:
        build("struct S { int a; hyper a; };")
    assert exc.value.field == "a"
    assert exc.value.owner == "S"


def test_duplicate_union_arm_name():
    with pytest.raises(DuplicateFieldError):
        build("union U switch (int d) { case 0: int v; case 1: hyper v; };")


def test_discriminant_must_be_plain():
    with pytest.raises(InvalidDiscriminantError) as exc:
        build("union U switch (int d[2]) { case 0: void; };")
    assert exc.value.code == "XE1006"


def test_two_default_arms():
    with pytest.raises(DuplicateDefaultArmError):
        build("union U switch (int d) { case 0: void; default: void; default: int x; };")


def test_syntax_error_is_located():
    with pytest.raises(ParseError) as exc:
        build("struct S {\n  int x\n};")
    assert exc.value.code == "XE1001"
    assert exc.value.span is not None
    assert exc.value.span.line == 3

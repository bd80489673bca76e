"""Mapping from resolved XDR types to Rust type syntax."""
from __future__ import annotations
from typing import Iterable, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from xdrc.semantics.symbols import SymbolTable

from xdrc.backend.exceptions import ReservedName
from xdrc.backend.runtime import PRELUDE_ITEMS
from xdrc.internals.errors import raise_internal_error
from xdrc.semantics.ast import StructDef
from xdrc.semantics.symbols import (
    ResolvedStruct,
    ResolvedTypedef,
    ResolvedUnion,
    SymbolKind,
)
from xdrc.semantics.typesys import (
    BuiltinType,
    FixedArrayType,
    OpaqueType,
    OptionalType,
    StringType,
    Type as Ty,
    TypeRef,
    VariableArrayType,
    is_byte_data,
)

RUST_KEYWORDS = frozenset({
    "as", "async", "await", "break", "const", "continue", "dyn", "else", "enum",
    "extern", "false", "fn", "for", "gen", "if", "impl", "in", "let", "loop", "match",
    "mod", "move", "mut", "pub", "ref", "return", "static", "struct", "trait",
    "true", "type", "unsafe", "use", "where", "while", "abstract", "become", "box",
    "do", "final", "macro", "override", "priv", "try", "typeof", "unsized",
    "virtual", "yield",
})

# Keywords that cannot be written as raw identifiers.
NON_RAW_KEYWORDS = frozenset({"self", "Self", "super", "crate", "_"})

PRIMITIVE_TYPES = frozenset({
    "i8", "i16", "i32", "i64", "i128", "isize",
    "u8", "u16", "u32", "u64", "u128", "usize",
    "f32", "f64", "bool", "char", "str",
})

BUILTIN_RUST_TYPES = {
    BuiltinType.INT: "i32",
    BuiltinType.UNSIGNED_INT: "u32",
    BuiltinType.HYPER: "i64",
    BuiltinType.UNSIGNED_HYPER: "u64",
    BuiltinType.FLOAT: "f32",
    BuiltinType.DOUBLE: "f64",
    BuiltinType.BOOL: "bool",
}

DECODED_BYTES = "&'a [u8]"
VEC = "::std::vec::Vec"
OPTION = "::core::option::Option"
BOX = "::std::boxed::Box"


def rust_ident(name: str) -> str:
    return f"r#{name}" if name in RUST_KEYWORDS else name


class RustTypeSystem:
    """Rust spellings of resolved types.

    Types that contain variable-length opaque or string data anywhere inside
    them are generic over a byte-view parameter (`B: AsRef<[u8]>`), so the
    decoder can hand out slices of the input buffer. Every other type is
    plain owned data.
    """

    def __init__(self, symbols: 'SymbolTable'):
        self.symbols = symbols
        self.byte_param = "XdrBuf" if "B" in symbols else "B"
        self.generic: Set[str] = self._byte_view_types()

    def is_generic(self, name: str) -> bool:
        return name in self.generic

    def named(self, name: str, decode: bool = False) -> str:
        ident = rust_ident(name)
        if name not in self.generic:
            return ident
        return f"{ident}<{DECODED_BYTES if decode else self.byte_param}>"

    def rust_type(self, ty: Ty, decode: bool = False) -> str:
        match ty:
            case BuiltinType():
                return BUILTIN_RUST_TYPES[ty]
            case TypeRef(name=name):
                return self.named(name, decode)
            case FixedArrayType(element=element, length=length):
                return f"[{self.rust_type(element, decode)}; {length}]"
            case VariableArrayType(element=element):
                return f"{VEC}<{self.rust_type(element, decode)}>"
            case OpaqueType(length=length, fixed=True):
                return f"[u8; {length}]"
            case OpaqueType() | StringType():
                return DECODED_BYTES if decode else self.byte_param
            case OptionalType(inner=inner):
                return f"{OPTION}<{BOX}<{self.rust_type(inner, decode)}>>"
        raise_internal_error("XE0002", node=type(ty).__name__)

    def discriminant_type(self, union: ResolvedUnion) -> str:
        return "u32" if union.is_unsigned else "i32"

    # --- byte views

    def _member_types(self, name: str) -> Iterable[Ty]:
        definition = self.symbols.definition(name)
        match definition:
            case ResolvedTypedef(target=target):
                yield target
            case ResolvedStruct(fields=fields):
                for f in fields:
                    yield f.ty
            case ResolvedUnion(arms=arms, default=default):
                for arm in (*arms, default):
                    if arm is not None and arm.field is not None:
                        yield arm.field.ty

    def _byte_view_types(self) -> Set[str]:
        generic: Set[str] = set()

        def needs(ty: Ty) -> bool:
            if is_byte_data(ty):
                return True
            match ty:
                case TypeRef(name=name):
                    return name in generic
                case FixedArrayType(element=inner) | VariableArrayType(element=inner) | OptionalType(inner=inner):
                    return needs(inner)
            return False

        names = [s.name for s in self.symbols.types() if s.kind is not SymbolKind.ENUM]
        changed = True
        while changed:
            changed = False
            for name in names:
                if name not in generic and any(needs(t) for t in self._member_types(name)):
                    generic.add(name)
                    changed = True
        return generic

    # --- naming checks

    def check_names(self) -> None:
        """Reject names the generated module cannot declare."""
        for sym in self.symbols.types():
            self._check_item(sym.name, sym.loc)
            if isinstance(sym.node, StructDef):
                for f in sym.node.fields:
                    if f.name in NON_RAW_KEYWORDS:
                        raise ReservedName(f.name, "Rust keyword", f.name_span or f.loc)
            definition = sym.resolved
            if isinstance(definition, ResolvedUnion):
                arms = [*definition.arms, definition.default]
                for arm in arms:
                    if arm is not None and arm.variant in NON_RAW_KEYWORDS:
                        raise ReservedName(arm.variant, "Rust keyword", sym.loc)
        for sym in self.symbols:
            if sym.kind is SymbolKind.ENUM_LABEL and sym.name in NON_RAW_KEYWORDS:
                raise ReservedName(sym.name, "Rust keyword", sym.loc)
            if sym.kind is SymbolKind.CONST and sym.node is not None:
                self._check_item(sym.name, sym.loc)

    def _check_item(self, name: str, loc) -> None:
        if name in PRELUDE_ITEMS:
            raise ReservedName(name, "support item", loc)
        if name in PRIMITIVE_TYPES:
            raise ReservedName(name, "Rust primitive type", loc)
        if name in NON_RAW_KEYWORDS:
            raise ReservedName(name, "Rust keyword", loc)

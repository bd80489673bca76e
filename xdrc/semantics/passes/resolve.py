# xdrc/semantics/passes/resolve.py
"""Pass 2: depth-first type resolution.

Each type definition goes UNRESOLVED -> RESOLVING -> RESOLVED. Re-entering a
definition that is still RESOLVING means it contains itself by value, which
is a cycle. References behind an optional or a variable-length array only
have to exist: the target never needs to be complete first, so those edges
are not followed and never count as cycles.
"""

from __future__ import annotations
from typing import List, Optional

from xdrc.internals.errors import ERR, raise_internal_error
from xdrc.internals.report import Reporter, Span
from xdrc.semantics.ast import ConstName, Declaration, EnumDef, StructDef, TypedefDef, UnionArm, UnionDef
from xdrc.semantics.error_reporter import PassErrorReporter
from xdrc.semantics.exceptions import (
    CyclicTypedef,
    DuplicateEnumValue,
    NonConstantBound,
    UndefinedReference,
)
from xdrc.semantics.passes.const_eval import ConstantEvaluator
from xdrc.semantics.passes.unions import (
    I32_MAX,
    I32_MIN,
    ArmDraft,
    assign_variant_names,
    check_case_set,
    check_discriminant,
    uncovered_labels,
)
from xdrc.semantics.symbols import (
    ResolutionState,
    ResolvedArm,
    ResolvedEnum,
    ResolvedField,
    ResolvedStruct,
    ResolvedTypedef,
    ResolvedUnion,
    Symbol,
    SymbolTable,
)
from xdrc.semantics.typesys import (
    BuiltinType,
    FixedArrayType,
    NamedType,
    OpaqueType,
    OptionalType,
    StringType,
    Type,
    TypeRef,
    VariableArrayType,
)


class TypeResolver:
    def __init__(self, symbols: SymbolTable, consts: ConstantEvaluator, reporter: Reporter) -> None:
        self.symbols = symbols
        self.consts = consts
        self.err = PassErrorReporter(reporter)
        self._stack: List[str] = []

    def run(self) -> None:
        for sym in self.symbols.types():
            self.resolve_name(sym.name, sym.loc)

    def resolve_name(self, name: str, span: Optional[Span] = None) -> Symbol:
        sym = self._type_symbol(name, span)

        if sym.state is ResolutionState.RESOLVED:
            return sym
        if sym.state is ResolutionState.RESOLVING:
            chain = self._stack[self._stack.index(name):] + [name]
            raise CyclicTypedef(chain, span)

        sym.state = ResolutionState.RESOLVING
        self._stack.append(name)

        node = sym.node
        match node:
            case TypedefDef():
                resolved = ResolvedTypedef(name, self.resolve_type(node.ty, node.name_span))
            case StructDef():
                resolved = ResolvedStruct(name, tuple(
                    ResolvedField(f.name, self.resolve_type(f.ty, f.name_span or f.loc))
                    for f in node.fields
                ))
            case EnumDef():
                resolved = self._resolve_enum(node)
            case UnionDef():
                resolved = self._resolve_union(node)
            case _:
                raise_internal_error("XE0001", node=type(node).__name__)

        self._stack.pop()
        sym.resolved = resolved
        sym.state = ResolutionState.RESOLVED
        return sym

    def resolve_type(self, ty: Type, span: Optional[Span], direct: bool = True) -> Type:
        """Resolve names and bounds inside a type description.

        `direct` is False once the walk has passed through an optional or a
        variable-length array.
        """
        match ty:
            case BuiltinType():
                return ty
            case NamedType(name=name) | TypeRef(name=name):
                sym = self.resolve_name(name, span) if direct else self._type_symbol(name, span)
                return TypeRef(name, sym.kind.ref_kind())
            case FixedArrayType(element=element, length=length):
                return FixedArrayType(self.resolve_type(element, span, direct), self._bound(length))
            case VariableArrayType(element=element, max_length=max_length):
                return VariableArrayType(self.resolve_type(element, span, direct=False),
                                         self._bound(max_length))
            case OpaqueType(length=length, fixed=fixed):
                return OpaqueType(self._bound(length), fixed)
            case StringType(max_length=max_length):
                return StringType(self._bound(max_length))
            case OptionalType(inner=inner):
                return OptionalType(self.resolve_type(inner, span, direct=False))
        raise_internal_error("XE0002", node=type(ty).__name__)

    def _type_symbol(self, name: str, span: Optional[Span]) -> Symbol:
        sym = self.symbols.lookup(name)
        if sym is None or not sym.kind.is_type:
            raise UndefinedReference(name, span)
        return sym

    def _bound(self, value) -> Optional[int]:
        if value is None or isinstance(value, int):
            return value
        return self.consts.bound(value)

    def _resolve_enum(self, node: EnumDef) -> ResolvedEnum:
        labels = []
        by_value = {}
        for member in node.members:
            value = self.consts.value_of(member.name, member.loc)
            if not I32_MIN <= value <= I32_MAX:
                raise NonConstantBound(member.name, "enum values must fit in a signed 32-bit int", member.loc)
            if value in by_value:
                raise DuplicateEnumValue(node.name, value, by_value[value], member.name, member.loc)
            by_value[value] = member.name
            labels.append((member.name, value))
        return ResolvedEnum(node.name, tuple(labels))

    def _resolve_union(self, node: UnionDef) -> ResolvedUnion:
        disc = node.discriminant
        disc_span = disc.name_span or disc.loc
        disc_ty = self.resolve_type(disc.ty, disc_span)
        base = self.symbols.underlying(disc_ty)
        check_discriminant(node.name, base, disc.ty, disc_span)

        enum = None
        if isinstance(base, TypeRef):
            enum = self.symbols.definition(base.name)

        drafts = [self._draft(arm) for arm in node.arms]
        check_case_set(node.name, base, enum, drafts)
        names, default_name = assign_variant_names(drafts, node.default is not None)

        arms = tuple(
            ResolvedArm(
                variant=variant,
                labels=tuple(draft.labels),
                label_names=tuple(draft.label_names),
                field=self._field_of(arm.decl),
            )
            for variant, draft, arm in zip(names, drafts, node.arms)
        )

        default = None
        if node.default is not None:
            default = ResolvedArm(
                variant=default_name,
                labels=(),
                label_names=(),
                field=self._field_of(node.default),
            )
        elif enum is not None:
            missing = uncovered_labels(enum, [v for d in drafts for v in d.labels])
            if missing:
                self.err.emit(ERR.XW2001, node.name_span or node.loc, name=node.name,
                              labels=", ".join(f"'{m}'" for m in missing))

        return ResolvedUnion(
            name=node.name,
            discriminant=ResolvedField(disc.name, disc_ty),
            discriminant_base=base,
            arms=arms,
            default=default,
        )

    def _draft(self, arm: UnionArm) -> ArmDraft:
        values, names = [], []
        for label in arm.labels:
            values.append(self.consts.evaluate(label))
            names.append(label.name if isinstance(label, ConstName) else None)
        return ArmDraft(values, names, arm.decl.name, arm.loc)

    def _field_of(self, decl: Declaration) -> Optional[ResolvedField]:
        if decl.is_void:
            return None
        return ResolvedField(decl.name, self.resolve_type(decl.ty, decl.name_span or decl.loc))

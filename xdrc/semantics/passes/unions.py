# xdrc/semantics/passes/unions.py
"""Union case-set validation and arm naming."""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from xdrc.internals.report import Span
from xdrc.semantics.exceptions import InvalidUnionCaseSet
from xdrc.semantics.symbols import ResolvedEnum
from xdrc.semantics.typesys import BuiltinType, RefKind, TypeRef

I32_MIN = -(1 << 31)
I32_MAX = (1 << 31) - 1
U32_MAX = (1 << 32) - 1

DEFAULT_VARIANT = "Default"


@dataclass
class ArmDraft:
    """A case arm with evaluated labels, before it gets its variant name."""
    labels: List[int]
    label_names: List[Optional[str]]
    field_name: Optional[str]
    loc: Optional[Span] = None


def check_discriminant(union: str, base, declared, span: Optional[Span]) -> None:
    """The discriminant must be int, unsigned int, bool or an enum, after following typedefs."""
    if base in (BuiltinType.INT, BuiltinType.UNSIGNED_INT, BuiltinType.BOOL):
        return
    if isinstance(base, TypeRef) and base.kind is RefKind.ENUM:
        return
    raise InvalidUnionCaseSet(
        union, f"discriminant type '{declared}' is not int, unsigned int, bool or an enum", span)


def check_case_set(union: str, base: Union[BuiltinType, TypeRef],
                   enum: Optional[ResolvedEnum], arms: Sequence[ArmDraft]) -> None:
    """Reject duplicate labels and labels the discriminant type cannot carry."""
    allowed = {v for _, v in enum.labels} if enum is not None else None
    seen: Dict[int, str] = {}

    for arm in arms:
        for value, text in zip(arm.labels, arm.label_names):
            shown = text or str(value)
            if value in seen:
                raise InvalidUnionCaseSet(
                    union, f"case {shown} repeats value {value} (already used by case {seen[value]})", arm.loc)
            seen[value] = shown

            if allowed is not None:
                if value not in allowed:
                    raise InvalidUnionCaseSet(
                        union, f"case {shown} is not a value of enum '{enum.name}'", arm.loc)
            elif base == BuiltinType.UNSIGNED_INT:
                if value < 0:
                    raise InvalidUnionCaseSet(
                        union, f"case {shown} is negative but the discriminant is unsigned", arm.loc)
                if value > U32_MAX:
                    raise InvalidUnionCaseSet(
                        union, f"case {shown} does not fit in an unsigned int", arm.loc)
            elif base == BuiltinType.BOOL:
                if value not in (0, 1):
                    raise InvalidUnionCaseSet(
                        union, f"case {shown} is not a bool value (TRUE or FALSE)", arm.loc)
            elif not I32_MIN <= value <= I32_MAX:
                raise InvalidUnionCaseSet(
                    union, f"case {shown} does not fit in an int", arm.loc)


def case_variant_name(labels: Sequence[int]) -> str:
    return "Case" + "_".join(str(v).replace("-", "Neg") for v in labels)


def assign_variant_names(arms: Sequence[ArmDraft], has_default: bool) -> Tuple[List[str], Optional[str]]:
    """Pick one variant name per arm, plus the default arm's name.

    An arm with a single identifier label is named after the label, otherwise
    after its field; void arms fall back to `Case<values>`, and so does any
    arm whose preferred name is shared with another arm.
    """
    preferred: List[str] = []
    for arm in arms:
        if len(arm.labels) == 1 and arm.label_names[0] is not None:
            preferred.append(arm.label_names[0])
        elif arm.field_name is not None:
            preferred.append(arm.field_name)
        else:
            preferred.append(case_variant_name(arm.labels))

    counts = Counter(preferred)
    names: List[str] = []
    taken: set[str] = set()
    for arm, name in zip(arms, preferred):
        if counts[name] > 1 or (has_default and name == DEFAULT_VARIANT):
            name = case_variant_name(arm.labels)
        names.append(_unique(name, taken))

    default = _unique(DEFAULT_VARIANT, taken) if has_default else None
    return names, default


def uncovered_labels(enum: ResolvedEnum, covered: Sequence[int]) -> List[str]:
    values = set(covered)
    return [name for name, v in enum.labels if v not in values]


def _unique(name: str, taken: set[str]) -> str:
    candidate, n = name, 2
    while candidate in taken:
        candidate = f"{name}_{n}"
        n += 1
    taken.add(candidate)
    return candidate

"""Semantic passes: symbol collection, constant evaluation, type resolution."""
from xdrc.semantics.passes.collect import BUILTIN_CONSTANTS, CollectorPass
from xdrc.semantics.passes.const_eval import ConstantEvaluator
from xdrc.semantics.passes.resolve import TypeResolver

__all__ = [
    'BUILTIN_CONSTANTS',
    'CollectorPass',
    'ConstantEvaluator',
    'TypeResolver',
]

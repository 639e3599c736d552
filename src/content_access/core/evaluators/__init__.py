"""
Capability Evaluators

One evaluator per capability. Dependencies (leaves first):
editability -> visibility/listability/publishability/sortability/deletability,
child template resolver -> addability -> moveability.
"""

from .base import AccessEnvironment, Evaluator
from .editability import EditabilityEvaluator, FieldEditabilityEvaluator
from .visibility import ProcessVisibilityEvaluator, VisibilityEvaluator, ListabilityEvaluator
from .addability import ChildTemplateAccessResolver, AddabilityEvaluator
from .structure import MoveabilityEvaluator, SortabilityEvaluator, DeletabilityEvaluator
from .publishability import PublishabilityEvaluator

__all__ = [
    "AccessEnvironment",
    "Evaluator",
    "EditabilityEvaluator",
    "FieldEditabilityEvaluator",
    "ProcessVisibilityEvaluator",
    "VisibilityEvaluator",
    "ListabilityEvaluator",
    "ChildTemplateAccessResolver",
    "AddabilityEvaluator",
    "MoveabilityEvaluator",
    "SortabilityEvaluator",
    "DeletabilityEvaluator",
    "PublishabilityEvaluator",
]

"""Trigger package -- decides which builds notify Rundeck."""

from rundeck_notifier.triggers.evaluator import TagMatch, TriggerEvaluator

__all__ = [
    "TagMatch",
    "TriggerEvaluator",
]

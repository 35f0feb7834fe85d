"""Filtering package - eligibility rules for extracted records."""

from .evaluator import FilterEvaluator, FilterVerdict

__all__ = ["FilterEvaluator", "FilterVerdict"]

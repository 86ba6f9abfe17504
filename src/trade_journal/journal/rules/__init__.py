"""Insight rule modules.

``DEFAULT_RULES`` is the full decision table in evaluation order.  The
order only matters for ties: the engine sorts by severity and keeps
emission order within a severity.
"""

from . import audit, checklist, context, performance, psychology, recent, risk, strategy
from .base import Rule, RuleContext

DEFAULT_RULES: tuple[Rule, ...] = (
    *performance.RULES,
    *strategy.RULES,
    *checklist.RULES,
    *risk.RULES,
    *psychology.RULES,
    *context.RULES,
    *recent.RULES,
    *audit.RULES,
)

__all__ = ["DEFAULT_RULES", "Rule", "RuleContext"]

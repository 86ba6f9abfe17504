"""Insight rule engine.

Runs every rule of the decision table against one immutable context
and returns the concatenated insights sorted by severity.

Usage::

    snapshot = compute(trades)
    insights = evaluate(trades, account, strategies, checklists, snapshot)
    for insight in insights:
        print(insight.severity.value, insight.title)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..core.models import Account, ChecklistTemplate, Strategy, Trade
from .insight import Insight, sort_by_severity
from .metrics import AnalyticsSnapshot
from .rules import DEFAULT_RULES, Rule, RuleContext

logger = logging.getLogger(__name__)


class InsightEngine:
    """Evaluate a rule table.

    Parameters
    ----------
    rules : Sequence[Rule] | None
        Rules in emission order.  Defaults to ``DEFAULT_RULES``.
    """

    def __init__(self, rules: Sequence[Rule] | None = None) -> None:
        self._rules = tuple(DEFAULT_RULES if rules is None else rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def evaluate(
        self,
        trades: Sequence[Trade],
        account: Account,
        strategies: Sequence[Strategy],
        checklists: Sequence[ChecklistTemplate],
        snapshot: AnalyticsSnapshot,
    ) -> list[Insight]:
        ctx = RuleContext(
            trades=tuple(trades),
            account=account,
            strategies=tuple(strategies),
            checklists=tuple(checklists),
            snapshot=snapshot,
        )

        insights: list[Insight] = []
        for rule in self._rules:
            emitted = rule.run(ctx)
            if emitted:
                logger.debug("Rule %s emitted %d insight(s)", rule.name, len(emitted))
            insights.extend(emitted)

        logger.debug(
            "Evaluated %d rules over %d trades: %d insights",
            len(self._rules),
            len(ctx.trades),
            len(insights),
        )
        return sort_by_severity(insights)


_default_engine = InsightEngine()


def evaluate(
    trades: Sequence[Trade],
    account: Account,
    strategies: Sequence[Strategy],
    checklists: Sequence[ChecklistTemplate],
    snapshot: AnalyticsSnapshot,
) -> list[Insight]:
    """Evaluate the default decision table."""
    return _default_engine.evaluate(trades, account, strategies, checklists, snapshot)

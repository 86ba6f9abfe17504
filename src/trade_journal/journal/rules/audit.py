"""Trade-level audits aggregated across the history.

Rule violations: losing trades taken against the plan.
Early exits: winners closed before reaching half their planned R:R.
"""

from __future__ import annotations

from ...core.enums import InsightType, Severity, TradeOutcome
from ...core.models import Trade
from ..insight import Insight
from .base import Rule, RuleContext, ids

MIN_AUDIT_TRADES = 3


def plan_violations(ctx: RuleContext) -> list[Trade]:
    return [
        t for t in ctx.closed
        if not t.followed_plan and t.outcome == TradeOutcome.LOSS
    ]


def early_exits(ctx: RuleContext) -> list[Trade]:
    return [
        t for t in ctx.closed
        if t.outcome == TradeOutcome.WIN and t.actual_rr < t.expected_rr * 0.5
    ]


def _missed_profit(trade: Trade) -> float:
    """Extra profit had the trade reached its expected R:R."""
    if trade.actual_rr <= 0:
        return 0.0
    potential = (trade.expected_rr / trade.actual_rr) * trade.net_pnl
    return potential - trade.net_pnl


def violation_insights(ctx: RuleContext) -> list[Insight]:
    violations = plan_violations(ctx)
    damage = sum(abs(t.net_pnl) for t in violations)
    return [Insight(
        type=InsightType.WARNING,
        category="Discipline",
        title="Rule Violations Causing Losses",
        message=(
            f"{len(violations)} losing trades where the plan was not followed. "
            f"Total damage: {ctx.money(damage)}."
        ),
        severity=Severity.HIGH,
        action="Every broken rule costs money. Keep your rules in sight and follow them.",
        related_trades=ids(violations),
        metrics={"violation_count": len(violations), "total_loss": damage},
    )]


def early_exit_insights(ctx: RuleContext) -> list[Insight]:
    exits = early_exits(ctx)
    left = sum(_missed_profit(t) for t in exits)
    return [Insight(
        type=InsightType.WARNING,
        category="Execution",
        title="Exiting Winners Too Early",
        message=(
            f"{len(exits)} winning trades closed below 50% of their target R:R. "
            f"Left {ctx.money(left)} on the table."
        ),
        severity=Severity.MEDIUM,
        action="Use trailing stops or scale out. Let winners breathe.",
        related_trades=ids(exits),
        metrics={"early_exit_count": len(exits), "lost_profit": left},
    )]


RULES = [
    Rule(
        "plan_violations",
        lambda ctx: len(plan_violations(ctx)) >= MIN_AUDIT_TRADES,
        violation_insights,
    ),
    Rule(
        "early_exits",
        lambda ctx: len(early_exits(ctx)) >= MIN_AUDIT_TRADES,
        early_exit_insights,
    ),
]

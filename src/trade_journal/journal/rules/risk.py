"""Risk management: drawdown against capital, losing streaks, recovery."""

from __future__ import annotations

from ...core.enums import InsightType, Severity
from ..insight import Insight
from .base import Rule, RuleContext, always, pct


def drawdown_insights(ctx: RuleContext) -> list[Insight]:
    dd = ctx.snapshot.max_drawdown
    dd_pct = pct(dd, ctx.account.invested_amount)
    metrics = {"max_drawdown": dd, "percent": dd_pct}

    if dd_pct > 20:
        return [Insight(
            type=InsightType.DANGER,
            category="Risk",
            title="Excessive Drawdown",
            message=(
                f"Maximum drawdown of {ctx.money(dd)} ({dd_pct:.1f}% of capital) "
                "is dangerous."
            ),
            severity=Severity.HIGH,
            action=(
                "Cut position size in half. A drawdown above 20% suggests "
                "over-leverage; capital preservation comes first."
            ),
            metrics=metrics,
        )]
    if dd_pct > 10:
        return [Insight(
            type=InsightType.WARNING,
            category="Risk",
            title="Moderate Drawdown",
            message=f"Drawdown of {dd_pct:.1f}% of capital is concerning. Aim for under 10%.",
            severity=Severity.MEDIUM,
            action="Reduce position size by 25-30% until risk control tightens.",
            metrics=metrics,
        )]
    return []


def losing_streak_insights(ctx: RuleContext) -> list[Insight]:
    streak = ctx.snapshot.max_consecutive_losses
    if streak >= 5:
        return [Insight(
            type=InsightType.DANGER,
            category="Risk",
            title="Long Losing Streak",
            message=f"{streak} consecutive losses suggests emotional trading or a broken system.",
            severity=Severity.HIGH,
            action=(
                "Stop trading and take a few days off. Work out whether it was "
                "revenge trading, market conditions or the strategy itself."
            ),
            metrics={"consecutive_losses": streak},
        )]
    if streak >= 3:
        return [Insight(
            type=InsightType.WARNING,
            category="Risk",
            title="Multiple Consecutive Losses",
            message=f"{streak} losses in a row. Time to reassess.",
            severity=Severity.MEDIUM,
            action="Step back and review: are you forcing setups in unsuitable conditions?",
            metrics={"consecutive_losses": streak},
        )]
    return []


def recovery_insights(ctx: RuleContext) -> list[Insight]:
    rf = ctx.snapshot.recovery_factor
    if rf >= 2:
        return []
    return [Insight(
        type=InsightType.WARNING,
        category="Risk",
        title="Low Recovery Factor",
        message=f"Recovery factor of {rf:.2f} means drawdowns take long to earn back.",
        severity=Severity.MEDIUM,
        action="Work on consistency: avoid large losses, favour steady smaller wins.",
        metrics={"recovery_factor": rf},
    )]


RULES = [
    Rule("drawdown", lambda ctx: ctx.account.invested_amount > 0, drawdown_insights),
    Rule("losing_streak", always, losing_streak_insights),
    Rule("recovery_factor", lambda ctx: ctx.snapshot.max_drawdown > 0, recovery_insights),
]

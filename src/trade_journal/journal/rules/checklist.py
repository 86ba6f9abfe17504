"""Checklist adherence and the impact of individual checklist items.

Two questions: does completing the checklist change the win rate, and
which required items of the active (first) template matter most?
"""

from __future__ import annotations

from ...core.enums import InsightType, Severity
from ..insight import Insight
from .base import Rule, RuleContext, win_rate

MIN_CHECKLIST_TRADES = 10
MIN_ITEM_TRADES = 5


def _with_checklist(ctx: RuleContext):
    return [t for t in ctx.closed if t.checklist_items]


def adherence_insights(ctx: RuleContext) -> list[Insight]:
    trades = _with_checklist(ctx)
    completed = [t for t in trades if t.checklist_completed]
    skipped = [t for t in trades if not t.checklist_completed]
    if not completed or not skipped:
        return []

    complete_wr = win_rate(completed)
    incomplete_wr = win_rate(skipped)
    difference = complete_wr - incomplete_wr
    metrics = {
        "complete_win_rate": complete_wr,
        "incomplete_win_rate": incomplete_wr,
        "difference": difference,
    }

    if difference > 15:
        return [Insight(
            type=InsightType.INFO,
            category="Checklist",
            title="Checklist Significantly Improves Results",
            message=(
                f"Win rate is {complete_wr:.1f}% with a completed checklist vs "
                f"{incomplete_wr:.1f}% when items are skipped, a "
                f"{difference:.1f} point improvement."
            ),
            severity=Severity.HIGH,
            action="Always complete the pre-trade checklist. Make it non-negotiable.",
            metrics=metrics,
        )]
    if difference > 5:
        return [Insight(
            type=InsightType.INFO,
            category="Checklist",
            title="Checklist Shows Positive Impact",
            message=(
                f"Completing the checklist improves win rate by {difference:.1f} points "
                f"({complete_wr:.1f}% vs {incomplete_wr:.1f}%)."
            ),
            severity=Severity.MEDIUM,
            action="Make completing the checklist a habit before every trade.",
            metrics=metrics,
        )]
    return []


def item_impact_insights(ctx: RuleContext) -> list[Insight]:
    checklist = ctx.active_checklist
    insights: list[Insight] = []

    for item in checklist.required_items:
        exercised = [t for t in ctx.closed if item.id in t.checklist_items]
        if len(exercised) < MIN_ITEM_TRADES:
            continue

        checked = [t for t in exercised if t.checklist_items[item.id]]
        unchecked = [t for t in exercised if not t.checklist_items[item.id]]
        if not checked or not unchecked:
            continue

        checked_wr = win_rate(checked)
        unchecked_wr = win_rate(unchecked)
        impact = checked_wr - unchecked_wr
        if impact > 20:
            insights.append(Insight(
                type=InsightType.INFO,
                category="Checklist",
                title=f'Critical Checklist Item: "{item.text}"',
                message=(
                    f"{checked_wr:.1f}% win rate when checked vs "
                    f"{unchecked_wr:.1f}% when skipped."
                ),
                severity=Severity.HIGH,
                action=f'Never skip "{item.text}". It is one of your strongest edge factors.',
                metrics={
                    "item_id": item.id,
                    "completed_win_rate": checked_wr,
                    "skipped_win_rate": unchecked_wr,
                    "impact": impact,
                },
            ))

    return insights


RULES = [
    Rule(
        "checklist_adherence",
        lambda ctx: len(_with_checklist(ctx)) >= MIN_CHECKLIST_TRADES,
        adherence_insights,
    ),
    Rule(
        "checklist_item_impact",
        lambda ctx: ctx.active_checklist is not None,
        item_impact_insights,
    ),
]

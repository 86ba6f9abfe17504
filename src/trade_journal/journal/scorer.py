"""Per-trade execution review.

Scores one trade from 0 to 100 and explains the score with the same
vocabulary the history-wide engine uses: R:R achievement, strategy
fit, checklist gaps, plan adherence, emotional state, stop discipline,
session quality and timing.

Scoring starts at 50 and applies additive adjustments:

    Outcome             +30 win / -30 loss
    R:R achievement     +10 at or above target / -10 below half of it
    Plan adherence      +10 followed / -15 deviated
    Checklist           +10 completed / -10 not completed
    Emotion             +5 disciplined / -10 fearful, greedy, revenge, fomo
    Session quality     (rating - 3) x 3
    Findings            -5 per danger finding, -2 per warning finding

The result is clamped to [0, 100].

Usage::

    analysis = score(trade, strategy, checklist)
    print(analysis.score, analysis.summary)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.enums import (
    NEGATIVE_EMOTIONS,
    Emotion,
    InsightType,
    Severity,
    TimeOfDay,
    TradeOutcome,
)
from ..core.models import ChecklistTemplate, Strategy, Trade
from .insight import Insight

logger = logging.getLogger(__name__)

BASELINE_SCORE = 50

_SEVERITY_FOR_TYPE = {
    InsightType.DANGER: Severity.HIGH,
    InsightType.WARNING: Severity.MEDIUM,
    InsightType.SUCCESS: Severity.LOW,
}


@dataclass(frozen=True)
class TradeAnalysis:
    """Result of reviewing a single trade."""

    # Holds insights, which are not hashable
    __hash__ = None

    insights: tuple[Insight, ...]
    score: int
    summary: str

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "summary": self.summary,
            "insights": [i.to_dict() for i in self.insights],
        }


def _finding(
    kind: InsightType,
    category: str,
    title: str,
    message: str,
    action: str,
    trade: Trade,
    **metrics,
) -> Insight:
    return Insight(
        type=kind,
        category=category,
        title=title,
        message=message,
        severity=_SEVERITY_FOR_TYPE[kind],
        action=action,
        related_trades=(trade.id,),
        metrics=metrics,
    )


class TradeScorer:
    """Review single trades against their strategy and checklist."""

    def score(
        self,
        trade: Trade,
        strategy: Strategy | None = None,
        checklist: ChecklistTemplate | None = None,
    ) -> TradeAnalysis:
        insights = self.findings(trade, strategy, checklist)
        value = self.calculate_score(trade, insights)
        logger.debug(
            "Scored trade %s: %d (%d findings)", trade.id, value, len(insights)
        )
        return TradeAnalysis(
            insights=tuple(insights),
            score=value,
            summary=self.summarise(trade, insights, value),
        )

    # ------------------------------------------------------------------ #
    # Findings                                                             #
    # ------------------------------------------------------------------ #

    def findings(
        self,
        trade: Trade,
        strategy: Strategy | None,
        checklist: ChecklistTemplate | None,
    ) -> list[Insight]:
        out: list[Insight] = []
        won = trade.outcome == TradeOutcome.WIN
        lost = trade.outcome == TradeOutcome.LOSS

        # R:R against the trade's own plan
        if trade.actual_rr and trade.expected_rr:
            gap = trade.actual_rr - trade.expected_rr
            if gap < -0.5:
                out.append(_finding(
                    InsightType.WARNING, "Risk Management", "R:R Target Missed",
                    f"Achieved R:R of {trade.actual_rr:.2f} is below the "
                    f"{trade.expected_rr:.2f} target; exited {abs(gap):.2f}R early.",
                    "Use a trailing stop or scale out partially to capture more.",
                    trade, actual_rr=trade.actual_rr, expected_rr=trade.expected_rr,
                ))
            elif gap > 0.5:
                out.append(_finding(
                    InsightType.SUCCESS, "Execution", "R:R Target Exceeded",
                    f"Achieved {trade.actual_rr:.2f} R:R, {gap:.2f}R above the "
                    f"{trade.expected_rr:.2f} target.",
                    "Note what let you hold for more: patience, conditions, management.",
                    trade, actual_rr=trade.actual_rr, expected_rr=trade.expected_rr,
                ))

        # Strategy R:R target
        if strategy is not None and trade.actual_rr < strategy.target_rr - 0.5:
            out.append(_finding(
                InsightType.WARNING, "Strategy", "Strategy R:R Not Met",
                f'"{strategy.name}" targets {strategy.target_rr:g} R:R but this '
                f"trade achieved {trade.actual_rr:.2f}.",
                f'Review the exit rules of "{strategy.name}" and apply them consistently.',
                trade, target_rr=strategy.target_rr, actual_rr=trade.actual_rr,
            ))

        if checklist is not None and trade.checklist_items:
            out.extend(self._checklist_findings(trade, checklist, won, lost))

        # Plan adherence
        if not trade.followed_plan and lost:
            out.append(_finding(
                InsightType.DANGER, "Discipline", "Plan Broken and Lost",
                "You deviated from the plan and lost money.",
                "Write the plan down before entry and follow it without exceptions.",
                trade,
            ))
        elif trade.followed_plan and won:
            out.append(_finding(
                InsightType.SUCCESS, "Discipline", "Plan Followed",
                "Followed the plan and won. The system works when you trust it.",
                "Keep following the plan.",
                trade,
            ))

        # Emotional state
        if trade.emotion in NEGATIVE_EMOTIONS:
            emotion = trade.emotion.value
            out.append(_finding(
                InsightType.DANGER if lost else InsightType.WARNING,
                "Psychology", f"Traded While {emotion.capitalize()}",
                f"Traded while feeling {emotion}. "
                + ("Emotion likely caused this loss." if lost
                   else "It worked this time, but emotion-driven trades are dangerous."),
                f"Next time you feel {emotion}, stop and come back when calm.",
                trade, emotion=emotion,
            ))
        elif trade.emotion == Emotion.DISCIPLINED and won:
            out.append(_finding(
                InsightType.SUCCESS, "Psychology", "Disciplined Win",
                "A disciplined mindset produced a winning trade.",
                "Check your emotional state before every trade.",
                trade,
            ))

        # Stop and target distances
        moved = abs(trade.exit_price - trade.entry_price) if trade.exit_price is not None else 0.0
        if lost and trade.stop_loss is not None:
            planned_risk = abs(trade.entry_price - trade.stop_loss)
            if moved > planned_risk * 1.2:
                out.append(_finding(
                    InsightType.DANGER, "Risk Management", "Stop Loss Overrun",
                    "The loss ran more than 20% past the planned stop.",
                    "Always use hard stops. Never let a loss exceed the planned risk.",
                    trade, planned_risk=planned_risk, actual_move=moved,
                ))
        if won and trade.take_profit is not None:
            target = abs(trade.take_profit - trade.entry_price)
            if moved < target * 0.5:
                out.append(_finding(
                    InsightType.WARNING, "Execution", "Winner Cut Short",
                    "Exited the winner before half the distance to target.",
                    "Use trailing stops or partial exits and let winners breathe.",
                    trade, target_distance=target, actual_move=moved,
                ))

        if trade.session_quality <= 2 and lost:
            out.append(_finding(
                InsightType.WARNING, "Preparation", "Low Session Quality",
                f"Session quality rated {trade.session_quality}/5 and the trade lost.",
                "Do not trade sessions you rate below 3.",
                trade, session_quality=trade.session_quality,
            ))

        if trade.time_of_day == TimeOfDay.AFTERHOURS and lost:
            out.append(_finding(
                InsightType.WARNING, "Timing", "After-Hours Loss",
                "After-hours trade lost. Liquidity is thin and spreads are wide.",
                "Avoid after-hours unless you have a proven edge there.",
                trade,
            ))

        if (
            strategy is not None
            and strategy.markets
            and trade.market_condition is not None
            and trade.market_condition.value not in strategy.markets
        ):
            out.append(_finding(
                InsightType.WARNING, "Strategy", "Strategy Used Out of Context",
                f'"{strategy.name}" is built for {"/".join(strategy.markets)} markets '
                f"but was traded in {trade.market_condition.value} conditions.",
                "Use strategies only in the conditions they were designed for.",
                trade, condition=trade.market_condition.value,
            ))

        issues = [i for i in out if i.type in (InsightType.DANGER, InsightType.WARNING)]
        if won and not issues:
            out.append(_finding(
                InsightType.SUCCESS, "Success", "Clean Execution",
                "Clean execution: no issues detected. This is a model trade.",
                "Document what made this trade work and repeat the process.",
                trade,
            ))

        return out

    def _checklist_findings(
        self,
        trade: Trade,
        checklist: ChecklistTemplate,
        won: bool,
        lost: bool,
    ) -> list[Insight]:
        out: list[Insight] = []
        ticked = sum(1 for done in trade.checklist_items.values() if done)
        completion = ticked / len(trade.checklist_items) * 100

        if completion < 80 and lost:
            out.append(_finding(
                InsightType.DANGER, "Discipline", "Incomplete Checklist Loss",
                f"Only {completion:.0f}% of the checklist was completed and the trade lost.",
                "Complete every checklist item before entry.",
                trade, completion_rate=completion,
            ))
        elif completion == 100 and won:
            out.append(_finding(
                InsightType.SUCCESS, "Discipline", "Full Checklist Win",
                "Full checklist completion and a winning trade.",
                "This is the process that works. Keep following it.",
                trade, completion_rate=completion,
            ))

        for item in checklist.required_items:
            if not trade.checklist_items.get(item.id, False):
                out.append(_finding(
                    InsightType.DANGER, "Checklist", "Required Item Skipped",
                    f'Required item skipped: "{item.text}".',
                    "Required checklist items are mandatory.",
                    trade, item_id=item.id,
                ))
        return out

    # ------------------------------------------------------------------ #
    # Score and summary                                                    #
    # ------------------------------------------------------------------ #

    def calculate_score(self, trade: Trade, insights: list[Insight]) -> int:
        value = BASELINE_SCORE

        if trade.outcome == TradeOutcome.WIN:
            value += 30
        elif trade.outcome == TradeOutcome.LOSS:
            value -= 30

        # Only trades with a planned R:R are judged on it
        if trade.expected_rr > 0:
            if trade.actual_rr >= trade.expected_rr:
                value += 10
            elif trade.actual_rr < trade.expected_rr * 0.5:
                value -= 10

        value += 10 if trade.followed_plan else -15
        value += 10 if trade.checklist_completed else -10

        if trade.emotion == Emotion.DISCIPLINED:
            value += 5
        elif trade.emotion in NEGATIVE_EMOTIONS:
            value -= 10

        value += (trade.session_quality - 3) * 3

        value -= 5 * sum(1 for i in insights if i.type == InsightType.DANGER)
        value -= 2 * sum(1 for i in insights if i.type == InsightType.WARNING)

        return max(0, min(100, value))

    def summarise(self, trade: Trade, insights: list[Insight], value: int) -> str:
        if value >= 80:
            verdict = (
                "Well-deserved win" if trade.outcome == TradeOutcome.WIN
                else "Even losses can be executed well"
            )
            return f"Excellent trade execution ({value}/100). {verdict}. This is the standard to maintain."
        if value >= 60:
            return (
                f"Good trade execution ({value}/100). {len(insights)} area(s) "
                "for improvement identified. Review and adjust."
            )
        if value >= 40:
            return f"Average execution ({value}/100). Multiple issues detected. This trade needs careful review."
        return f"Poor execution ({value}/100). Significant problems identified. Use this as a learning opportunity."


_default_scorer = TradeScorer()


def score(
    trade: Trade,
    strategy: Strategy | None = None,
    checklist: ChecklistTemplate | None = None,
) -> TradeAnalysis:
    """Review one trade with the default scorer."""
    return _default_scorer.score(trade, strategy, checklist)

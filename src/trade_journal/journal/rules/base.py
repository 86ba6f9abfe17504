"""Rule building blocks shared by every insight module.

A rule is a ``gate`` (is there enough data to say anything?) plus an
``evaluate`` function that turns the context into zero or more
insights.  Rules never see each other's output, so their order only
affects tie-breaking among equal severities.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import cached_property

from ...core.enums import TradeOutcome
from ...core.models import Account, ChecklistTemplate, Strategy, Trade
from ..insight import Insight, format_money
from ..metrics import AnalyticsSnapshot


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may read.  Immutable for the whole evaluation."""

    trades: tuple[Trade, ...]
    account: Account
    strategies: tuple[Strategy, ...]
    checklists: tuple[ChecklistTemplate, ...]
    snapshot: AnalyticsSnapshot

    @cached_property
    def closed(self) -> tuple[Trade, ...]:
        """Closed trades in input order."""
        return tuple(t for t in self.trades if t.is_closed)

    @property
    def active_checklist(self) -> ChecklistTemplate | None:
        """The first template; later templates are never consulted."""
        return self.checklists[0] if self.checklists else None

    def money(self, amount: float) -> str:
        return format_money(amount, self.account.currency)


@dataclass(frozen=True)
class Rule:
    name: str
    gate: Callable[[RuleContext], bool]
    evaluate: Callable[[RuleContext], list[Insight]]

    def run(self, ctx: RuleContext) -> list[Insight]:
        if not self.gate(ctx):
            return []
        return self.evaluate(ctx)


def always(ctx: RuleContext) -> bool:
    return True


def min_closed(n: int) -> Callable[[RuleContext], bool]:
    """Gate: at least ``n`` closed trades in the snapshot."""

    def gate(ctx: RuleContext) -> bool:
        return ctx.snapshot.closed_trades >= n

    gate.__name__ = f"min_closed_{n}"
    return gate


# ---------------------------------------------------------------------- #
# Small statistics over trade subsets                                      #
# ---------------------------------------------------------------------- #

def pct(part: float, whole: float) -> float:
    if whole == 0:
        return 0.0
    return part / whole * 100


def count_wins(trades: Iterable[Trade]) -> int:
    return sum(1 for t in trades if t.outcome == TradeOutcome.WIN)


def win_rate(trades: Sequence[Trade]) -> float:
    """Win percentage of a subset; 0.0 when empty."""
    return pct(count_wins(trades), len(trades))


def avg_net_pnl(trades: Sequence[Trade]) -> float:
    if not trades:
        return 0.0
    return sum(t.net_pnl for t in trades) / len(trades)


def ids(trades: Iterable[Trade]) -> tuple[str, ...]:
    return tuple(t.id for t in trades)

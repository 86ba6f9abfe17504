"""Property tests: analytics and insight invariants over arbitrary histories.

Histories are generated as integer net P&L sequences (one closed trade
per day, outcome following the sign), so sums stay exact.
"""

from datetime import datetime, timedelta, timezone

import numpy as np
from hypothesis import given, settings, strategies as st

from trade_journal.core.enums import TradeOutcome, TradeStatus
from trade_journal.core.models import Account, Trade
from trade_journal.journal.engine import evaluate
from trade_journal.journal.metrics import (
    PROFIT_FACTOR_CAP,
    compute,
    compute_streaks,
    max_drawdown,
    sort_chronologically,
)

START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

pnl_lists = st.lists(st.integers(min_value=-500, max_value=500).map(float), max_size=60)
outcome_lists = st.lists(
    st.sampled_from([TradeOutcome.WIN, TradeOutcome.LOSS, TradeOutcome.BREAKEVEN]),
    max_size=80,
)


def _outcome(pnl: float) -> TradeOutcome:
    if pnl > 0:
        return TradeOutcome.WIN
    if pnl < 0:
        return TradeOutcome.LOSS
    return TradeOutcome.BREAKEVEN


def _trades(pnls: list[float]) -> list[Trade]:
    return [
        Trade(
            id=f"t{i}",
            symbol="ETHUSD",
            entry_date=START + timedelta(days=i),
            exit_date=START + timedelta(days=i, hours=3),
            status=TradeStatus.CLOSED,
            outcome=_outcome(p),
            net_pnl=p,
            actual_rr=p / 100,
        )
        for i, p in enumerate(pnls)
    ]


@given(pnls=pnl_lists)
@settings(max_examples=50)
def test_compute_is_idempotent(pnls):
    trades = _trades(pnls)
    assert compute(trades) == compute(trades)


@given(pnls=pnl_lists)
@settings(max_examples=50)
def test_rates_and_ratios_bounded(pnls):
    snapshot = compute(_trades(pnls))
    assert 0.0 <= snapshot.win_rate <= 100.0
    assert snapshot.profit_factor >= 0.0
    assert snapshot.gross_loss >= 0.0
    assert snapshot.max_drawdown >= 0.0
    assert snapshot.wins + snapshot.losses + snapshot.breakevens == snapshot.closed_trades
    if snapshot.gross_loss == 0 and snapshot.gross_profit > 0:
        assert snapshot.profit_factor == PROFIT_FACTOR_CAP


@given(pnls=pnl_lists)
@settings(max_examples=50)
def test_total_is_profit_minus_loss(pnls):
    snapshot = compute(_trades(pnls))
    assert snapshot.total_pnl == snapshot.gross_profit - snapshot.gross_loss
    assert snapshot.total_pnl == sum(pnls)


@given(outcomes=outcome_lists)
@settings(max_examples=100)
def test_streaks_bounded_by_counts(outcomes):
    max_wins, max_losses, current = compute_streaks(outcomes)
    assert max_wins <= outcomes.count(TradeOutcome.WIN)
    assert max_losses <= outcomes.count(TradeOutcome.LOSS)
    assert -max_losses <= current <= max_wins
    if outcomes and outcomes[-1] == TradeOutcome.BREAKEVEN:
        assert current == 0


@given(steps=st.lists(st.integers(min_value=0, max_value=500).map(float), min_size=1, max_size=50))
@settings(max_examples=50)
def test_rising_curve_has_no_drawdown(steps):
    assert max_drawdown(np.cumsum(steps)) == 0.0


@given(curve=st.lists(st.integers(min_value=-1000, max_value=1000).map(float), min_size=1, max_size=50))
@settings(max_examples=50)
def test_drawdown_bounded_by_range(curve):
    dd = max_drawdown(curve)
    assert 0.0 <= dd <= max(max(curve), 0.0) - min(curve)


@given(pnls=pnl_lists, seed=st.randoms(use_true_random=False))
@settings(max_examples=50)
def test_sorting_restores_chronological_streaks(pnls, seed):
    trades = _trades(pnls)
    shuffled = list(trades)
    seed.shuffle(shuffled)
    restored = compute(sort_chronologically(shuffled))
    expected = compute(trades)
    assert restored.max_consecutive_wins == expected.max_consecutive_wins
    assert restored.max_consecutive_losses == expected.max_consecutive_losses
    assert restored.current_streak == expected.current_streak


@given(pnls=pnl_lists)
@settings(max_examples=30, deadline=None)
def test_insights_sorted_by_severity(pnls):
    trades = _trades(pnls)
    account = Account(id="a", balance=10_000.0, invested_amount=2_000.0)
    insights = evaluate(trades, account, [], [], compute(trades))
    ranks = [i.severity.rank for i in insights]
    assert ranks == sorted(ranks)

"""Tests for per-trade financial formulas."""

import pytest

from trade_journal.core.enums import Direction, TradeOutcome, TradeStatus
from trade_journal.journal.calculations import (
    account_balance,
    account_total_pnl,
    calculate_actual_rr,
    calculate_pnl,
    calculate_risk_reward,
    determine_outcome,
    outcome_is_consistent,
)

from .conftest import make_trade


class TestCalculatePnL:
    def test_long_with_costs(self):
        result = calculate_pnl(
            Direction.LONG, 100.0, 110.0, lot_size=1.0, quantity=2.0,
            fees=1.0, commissions=1.0, slippage=0.5,
        )
        assert result.gross_pnl == pytest.approx(20.0)
        # Slippage scales with units: 0.5 * 2
        assert result.total_costs == pytest.approx(3.0)
        assert result.net_pnl == pytest.approx(17.0)
        assert result.pnl_percentage == pytest.approx(10.0)

    def test_short_profit(self):
        result = calculate_pnl(Direction.SHORT, 100.0, 90.0, lot_size=1.0, quantity=1.0)
        assert result.gross_pnl == pytest.approx(10.0)
        assert result.net_pnl == pytest.approx(10.0)

    def test_lot_size_multiplies(self):
        result = calculate_pnl(Direction.LONG, 1.1000, 1.1050, lot_size=100_000, quantity=1.0)
        assert result.gross_pnl == pytest.approx(500.0)

    def test_zero_entry_price_gives_zero_percentage(self):
        result = calculate_pnl(Direction.LONG, 0.0, 5.0, lot_size=1.0, quantity=1.0)
        assert result.pnl_percentage == 0.0


class TestRiskReward:
    def test_planned_long(self):
        assert calculate_risk_reward(Direction.LONG, 100.0, 95.0, 110.0) == pytest.approx(2.0)

    def test_planned_short(self):
        assert calculate_risk_reward(Direction.SHORT, 100.0, 105.0, 90.0) == pytest.approx(2.0)

    def test_zero_risk(self):
        assert calculate_risk_reward(Direction.LONG, 100.0, 100.0, 110.0) == 0.0

    def test_actual_rr(self):
        assert calculate_actual_rr(Direction.LONG, 100.0, 107.5, 95.0) == pytest.approx(1.5)

    def test_actual_rr_losing(self):
        assert calculate_actual_rr(Direction.LONG, 100.0, 95.0, 95.0) == pytest.approx(-1.0)

    def test_actual_rr_zero_risk(self):
        assert calculate_actual_rr(Direction.SHORT, 100.0, 90.0, 100.0) == 0.0


class TestOutcome:
    @pytest.mark.parametrize(
        "net_pnl,threshold,expected",
        [
            (10.0, 0.0, TradeOutcome.WIN),
            (-10.0, 0.0, TradeOutcome.LOSS),
            (0.0, 0.0, TradeOutcome.BREAKEVEN),
            (4.0, 5.0, TradeOutcome.BREAKEVEN),
            (-5.0, 5.0, TradeOutcome.BREAKEVEN),
            (5.01, 5.0, TradeOutcome.WIN),
        ],
    )
    def test_determine_outcome(self, net_pnl, threshold, expected):
        assert determine_outcome(net_pnl, threshold) == expected

    def test_consistent_trade(self):
        assert outcome_is_consistent(make_trade(100.0))

    def test_mislabelled_trade(self):
        assert not outcome_is_consistent(make_trade(100.0, outcome=TradeOutcome.LOSS))

    def test_threshold_applies(self):
        trade = make_trade(2.0, outcome=TradeOutcome.BREAKEVEN)
        assert not outcome_is_consistent(trade)
        assert outcome_is_consistent(trade, threshold=5.0)

    def test_open_trade_always_consistent(self):
        assert outcome_is_consistent(make_trade(0, status=TradeStatus.OPEN))


class TestAccountTotals:
    def test_total_uses_net_pnl(self):
        trades = [
            make_trade(90.0, index=0, pnl=100.0, fees=10.0),
            make_trade(-60.0, index=1, pnl=-50.0, fees=10.0),
        ]
        assert account_total_pnl(trades) == pytest.approx(30.0)

    def test_balance(self):
        trades = [make_trade(90.0, index=0), make_trade(-40.0, index=1)]
        assert account_balance(1_000.0, trades) == pytest.approx(1_050.0)

    def test_empty(self):
        assert account_total_pnl([]) == 0.0
        assert account_balance(500.0, []) == 500.0

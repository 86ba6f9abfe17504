"""Tests for TradeScorer: per-trade findings and execution score."""

import pytest

from trade_journal.core.enums import Emotion, InsightType, MarketCondition, Severity, TimeOfDay
from trade_journal.journal.scorer import TradeScorer, score

from .conftest import make_checklist, make_strategy, make_trade


@pytest.fixture
def scorer():
    return TradeScorer()


def titles(analysis):
    return [i.title for i in analysis.insights]


class TestScore:
    def test_plain_win(self, scorer):
        # 50 + 30 win + 10 plan - 10 checklist
        analysis = scorer.score(make_trade(100.0))
        assert analysis.score == 80
        assert titles(analysis) == ["Plan Followed", "Clean Execution"]
        assert analysis.summary.startswith("Excellent trade execution (80/100). Well-deserved win.")

    def test_score_clamped_to_hundred(self, scorer):
        trade = make_trade(
            100.0, expected_rr=2.0, actual_rr=3.0, checklist_completed=True,
            emotion=Emotion.DISCIPLINED, session_quality=5,
        )
        assert scorer.score(trade).score == 100

    def test_score_clamped_to_zero(self, scorer):
        trade = make_trade(
            -100.0,
            followed_plan=False,
            emotion=Emotion.REVENGE,
            session_quality=1,
            stop_loss=1.0950,
            exit_price=1.0900,
            time_of_day=TimeOfDay.AFTERHOURS,
        )
        analysis = scorer.score(trade)
        assert analysis.score == 0
        assert analysis.summary.startswith("Poor execution (0/100).")
        kinds = [i.type for i in analysis.insights]
        assert kinds.count(InsightType.DANGER) == 3
        assert kinds.count(InsightType.WARNING) == 2
        assert set(titles(analysis)) == {
            "Plan Broken and Lost",
            "Traded While Revenge",
            "Stop Loss Overrun",
            "Low Session Quality",
            "After-Hours Loss",
        }

    def test_missed_rr_target(self, scorer):
        # 50 + 30 - 10 rr + 10 plan - 10 checklist - 2 warning
        analysis = scorer.score(make_trade(100.0, expected_rr=3.0, actual_rr=1.0))
        assert analysis.score == 68
        assert titles(analysis) == ["R:R Target Missed", "Plan Followed"]
        assert "2 area(s)" in analysis.summary

    def test_exceeded_rr_target(self, scorer):
        analysis = scorer.score(make_trade(100.0, expected_rr=2.0, actual_rr=3.0))
        assert analysis.score == 90
        assert "R:R Target Exceeded" in titles(analysis)
        assert "Clean Execution" in titles(analysis)

    def test_no_planned_rr_no_adjustment(self, scorer):
        assert scorer.score(make_trade(100.0, actual_rr=0.2)).score == 80

    def test_module_level_score(self):
        assert score(make_trade(100.0)).score == 80


class TestSummary:
    @pytest.mark.parametrize(
        "value, prefix",
        [
            (80, "Excellent trade execution (80/100)."),
            (79, "Good trade execution (79/100)."),
            (60, "Good trade execution (60/100)."),
            (59, "Average execution (59/100)."),
            (40, "Average execution (40/100)."),
            (39, "Poor execution (39/100)."),
        ],
    )
    def test_band_boundaries(self, scorer, value, prefix):
        assert scorer.summarise(make_trade(100.0), [], value).startswith(prefix)

    def test_excellent_loss(self, scorer):
        summary = scorer.summarise(make_trade(-50.0), [], 85)
        assert "Even losses can be executed well" in summary

    def test_good_counts_findings(self, scorer):
        trade = make_trade(100.0)
        findings = list(scorer.score(trade).insights)
        summary = scorer.summarise(trade, findings, 65)
        assert f"{len(findings)} area(s)" in summary


class TestFindings:
    def test_severity_follows_type(self, scorer):
        analysis = scorer.score(make_trade(-100.0, followed_plan=False, session_quality=2))
        by_title = {i.title: i for i in analysis.insights}
        assert by_title["Plan Broken and Lost"].severity == Severity.HIGH
        assert by_title["Low Session Quality"].severity == Severity.MEDIUM

    def test_related_trade_is_the_trade(self, scorer):
        analysis = scorer.score(make_trade(100.0, trade_id="abc"))
        assert all(i.related_trades == ("abc",) for i in analysis.insights)

    def test_strategy_target_not_met(self, scorer):
        trade = make_trade(100.0, actual_rr=1.0, strategy_id="strat_1")
        analysis = scorer.score(trade, make_strategy(target_rr=2.0))
        assert "Strategy R:R Not Met" in titles(analysis)
        assert "Clean Execution" not in titles(analysis)

    def test_strategy_out_of_context(self, scorer):
        trade = make_trade(100.0, market_condition=MarketCondition.RANGING, actual_rr=2.0)
        analysis = scorer.score(trade, make_strategy(markets=("trending",)))
        assert "Strategy Used Out of Context" in titles(analysis)

    def test_incomplete_checklist_loss(self, scorer):
        trade = make_trade(-100.0, checklist_items={"c1": False, "c2": True})
        analysis = scorer.score(trade, checklist=make_checklist(("c1", True), ("c2", False)))
        assert "Incomplete Checklist Loss" in titles(analysis)
        skipped = [i for i in analysis.insights if i.title == "Required Item Skipped"]
        assert len(skipped) == 1
        assert skipped[0].metrics["item_id"] == "c1"

    def test_full_checklist_win(self, scorer):
        trade = make_trade(100.0, checklist_items={"c1": True, "c2": True}, checklist_completed=True)
        analysis = scorer.score(trade, checklist=make_checklist(("c1", True), ("c2", False)))
        assert "Full Checklist Win" in titles(analysis)
        assert "Required Item Skipped" not in titles(analysis)

    def test_checklist_ignored_without_items(self, scorer):
        analysis = scorer.score(make_trade(-100.0), checklist=make_checklist(("c1", True)))
        assert "Required Item Skipped" not in titles(analysis)

    def test_winner_cut_short(self, scorer):
        trade = make_trade(30.0, take_profit=1.1100, exit_price=1.1030)
        analysis = scorer.score(trade)
        assert "Winner Cut Short" in titles(analysis)
        assert "Clean Execution" not in titles(analysis)

    def test_emotional_win_is_warning(self, scorer):
        analysis = scorer.score(make_trade(100.0, emotion=Emotion.FEARFUL))
        finding = next(i for i in analysis.insights if i.title == "Traded While Fearful")
        assert finding.type == InsightType.WARNING
        assert "It worked this time" in finding.message

    def test_disciplined_win(self, scorer):
        analysis = scorer.score(make_trade(100.0, emotion=Emotion.DISCIPLINED))
        assert "Disciplined Win" in titles(analysis)
        assert analysis.score == 85

    def test_to_dict(self, scorer):
        payload = scorer.score(make_trade(100.0)).to_dict()
        assert payload["score"] == 80
        assert payload["insights"][0]["type"] == "success"
        assert payload["insights"][0]["severity"] == "low"

    def test_analysis_is_not_hashable(self, scorer):
        with pytest.raises(TypeError):
            hash(scorer.score(make_trade(100.0)))

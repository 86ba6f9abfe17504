"""CLI entry point for the trade journal."""

from __future__ import annotations

import logging

import click

from .core.config import Settings, load_settings
from .core.errors import JournalError
from .core.models import Trade
from .journal.calculations import outcome_is_consistent
from .journal.engine import evaluate
from .journal.export import AnalyticsExporter
from .journal.insight import Insight
from .journal.metrics import AnalyticsSnapshot, compute
from .journal.scorer import score as score_trade
from .journal.snapshot import JournalSnapshot, load_snapshot
from .observability.logger import new_run_id, setup_logging

logger = logging.getLogger(__name__)


@click.group()
def main() -> None:
    """Trade journal analytics."""


def _prepare(config: str | None, path: str) -> tuple[Settings, JournalSnapshot, list[Trade]]:
    try:
        settings = load_settings(config_path=config)
        setup_logging(settings.observability.log_level, settings.observability.log_format)
        new_run_id()
        journal = load_snapshot(path)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    trades = journal.chronological_trades() if settings.presort_trades else list(journal.trades)
    for trade in trades:
        if trade.is_closed and not outcome_is_consistent(trade, settings.breakeven_threshold):
            logger.warning(
                "Trade %s outcome %s disagrees with net P&L %.2f",
                trade.id, trade.outcome.value, trade.net_pnl,
            )
    return settings, journal, trades


@main.command()
@click.argument("snapshot", type=click.Path(dir_okay=False))
@click.option("--config", default=None, help="Config file path")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of text")
@click.option(
    "--csv",
    "csv_period",
    type=click.Choice(["daily", "weekly", "monthly"]),
    default=None,
    help="Emit period P&L as CSV",
)
def analytics(snapshot: str, config: str | None, as_json: bool, csv_period: str | None) -> None:
    """Compute the analytics snapshot of a journal."""
    _, _, trades = _prepare(config, snapshot)
    result = compute(trades)
    exporter = AnalyticsExporter()

    if csv_period:
        click.echo(exporter.periods_to_csv(result, period=csv_period), nl=False)
    elif as_json:
        click.echo(exporter.to_json(exporter.snapshot_to_dict(result)))
    else:
        _print_analytics(result)


@main.command()
@click.argument("snapshot", type=click.Path(dir_okay=False))
@click.option("--config", default=None, help="Config file path")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of text")
def insights(snapshot: str, config: str | None, as_json: bool) -> None:
    """Generate prioritised insights for a journal."""
    _, journal, trades = _prepare(config, snapshot)
    found = evaluate(trades, journal.account, journal.strategies, journal.checklists, compute(trades))
    exporter = AnalyticsExporter()

    if as_json:
        click.echo(exporter.to_json(exporter.insights_to_dicts(found)))
        return
    if not found:
        click.echo("No insights yet. Journal more closed trades.")
        return
    for insight in found:
        _print_insight(insight)


@main.command()
@click.argument("snapshot", type=click.Path(dir_okay=False))
@click.argument("trade_id")
@click.option("--config", default=None, help="Config file path")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of text")
def score(snapshot: str, trade_id: str, config: str | None, as_json: bool) -> None:
    """Review a single trade and score its execution."""
    _, journal, _ = _prepare(config, snapshot)
    try:
        trade = journal.trade(trade_id)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    analysis = score_trade(trade, journal.strategy_for(trade), journal.active_checklist)
    exporter = AnalyticsExporter()

    if as_json:
        click.echo(exporter.to_json(exporter.analysis_to_dict(analysis)))
        return
    click.echo(f"Trade {trade.id} ({trade.symbol}): {analysis.score}/100")
    click.echo(analysis.summary)
    for insight in analysis.insights:
        _print_insight(insight)


def _print_analytics(result: AnalyticsSnapshot) -> None:
    click.echo(f"\n{'=' * 50}")
    click.echo("  Journal Analytics")
    click.echo(f"{'=' * 50}")
    click.echo(f"  Trades:         {result.total_trades} ({result.closed_trades} closed, {result.open_trades} open)")
    click.echo(f"  Wins / Losses:  {result.wins} / {result.losses} ({result.breakevens} breakeven)")
    click.echo(f"  Win rate:       {result.win_rate:.2f}%")
    click.echo(f"  Total P&L:      {result.total_pnl:,.2f}")
    click.echo(f"  Profit factor:  {result.profit_factor:.2f}")
    click.echo(f"  Expectancy:     {result.expectancy:,.2f}")
    click.echo(f"  Avg R:R:        {result.avg_rr:.2f}")
    click.echo(f"  Max drawdown:   {result.max_drawdown:,.2f}")
    click.echo(f"  Recovery:       {result.recovery_factor:.2f}")
    click.echo(f"  Sharpe:         {result.sharpe_ratio:.2f}")
    click.echo(
        f"  Streaks:        best {result.max_consecutive_wins}W, "
        f"worst {result.max_consecutive_losses}L, current {result.current_streak:+d}"
    )
    if result.by_strategy:
        click.echo("\n  By strategy:")
        for name, stats in sorted(result.by_strategy.items()):
            click.echo(
                f"    {name:<20} {stats.trades:>4} trades  "
                f"{stats.win_rate:6.2f}%  {stats.total_pnl:>12,.2f}"
            )


def _print_insight(insight: Insight) -> None:
    click.echo(f"\n[{insight.severity.value.upper()}] {insight.title} ({insight.category})")
    click.echo(f"  {insight.message}")
    if insight.action:
        click.echo(f"  -> {insight.action}")


if __name__ == "__main__":
    main()

"""Main CLI entry point for the leadscore command."""

import json
import logging
import click
from dataclasses import fields
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from typing import Optional

from ..core.config import ScoringConfigManager, ScoringWeights
from ..core.insights import generate_insights
from ..core.models import Classification, EngagementHistory, IntakeRecord
from ..core.scorer import ScoreResult
from ..storage.database import ScoreDatabase

console = Console()

TIER_STYLES = {
    Classification.HOT: "red",
    Classification.WARM: "yellow",
    Classification.COLD: "cyan",
    Classification.NURTURE: "dim",
}


def get_db(db_path: Optional[str] = None) -> ScoreDatabase:
    """Get database instance."""
    path = Path(db_path) if db_path else None
    return ScoreDatabase(path)


def get_config_manager(config_path: Optional[str] = None) -> ScoringConfigManager:
    path = Path(config_path) if config_path else None
    return ScoringConfigManager(path)


def _load_json(path: str) -> dict:
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Could not read {path}: {e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain a JSON object")
    return data


def _tier_text(classification: Classification) -> str:
    style = TIER_STYLES[classification]
    return f"[{style}]{classification.value.upper()}[/{style}]"


def _print_result(result: ScoreResult):
    """Render a score result as a panel plus factor table."""
    console.print(Panel.fit(
        f"Score: [bold]{result.total_score}[/bold]  {_tier_text(result.classification)}\n"
        f"Confidence: [cyan]{result.confidence}%[/cyan] "
        f"[dim](completeness {result.completeness:.0f}, consistency {result.consistency:.0f})[/dim]\n"
        f"Lead: [cyan]{result.lead_id or '-'}[/cyan]  Config version: {result.version}",
        title="Lead Score",
    ))

    table = Table(title="Factors")
    table.add_column("Category", style="cyan")
    table.add_column("Factor")
    table.add_column("Value", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Impact", justify="right", style="green")
    table.add_column("Reason", style="dim")

    for factor in result.factors:
        table.add_row(
            factor.category,
            factor.factor,
            f"{factor.value:.0f}",
            f"{factor.weight:.2f}",
            f"{factor.impact:.1f}",
            factor.reason,
        )

    console.print(table)

    insights = generate_insights(result)
    if insights:
        console.print("\n[bold]Insights:[/bold]")
        for insight in insights:
            console.print(f"  • {insight.title} ({insight.type.value}) - {insight.description}")


@click.group()
@click.version_option(version="1.0.0", prog_name="leadscore")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Lead Qualifier - intake scoring for sales follow-up.

    \b
    Quick Start:
      leadscore score intake.json                        # Score an intake form
      leadscore score intake.json -e engagement.json     # Include engagement
      leadscore score intake.json --lead-id L-42 --save  # Store the result
      leadscore list --classification hot                # Review hot leads
      leadscore config show                              # Inspect weights
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.argument("intake_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--engagement", "-e", "engagement_file", type=click.Path(exists=True, dir_okay=False),
              help="JSON engagement history")
@click.option("--lead-id", help="Lead identifier to attach to the result")
@click.option("--save", is_flag=True, help="Store the result (requires --lead-id)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--config", "config_path", help="Custom scoring config path")
@click.option("--db", "db_path", help="Custom database path")
def score(
    intake_file: str,
    engagement_file: Optional[str],
    lead_id: Optional[str],
    save: bool,
    as_json: bool,
    config_path: Optional[str],
    db_path: Optional[str],
):
    """Score an intake form stored as JSON."""
    if save and not lead_id:
        raise click.UsageError("--save requires --lead-id")

    intake = IntakeRecord.from_dict(_load_json(intake_file))
    engagement = EngagementHistory.from_dict(_load_json(engagement_file)) if engagement_file else None

    engine = get_config_manager(config_path).build_engine()
    result = engine.compute(intake, engagement)
    if lead_id:
        result.lead_id = lead_id

    if save:
        get_db(db_path).save_score(result)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    _print_result(result)
    if save:
        console.print(f"\n[green]✓ Saved score for {lead_id}[/green]")


@cli.command("list")
@click.option("--classification", "-c", type=click.Choice([c.value for c in Classification]),
              help="Filter by classification")
@click.option("--min-score", type=int, help="Minimum total score")
@click.option("--limit", "-n", default=20, help="Number of scores to show")
@click.option("--db", "db_path", help="Custom database path")
def list_scores(classification: Optional[str], min_score: Optional[int], limit: int, db_path: Optional[str]):
    """List stored scores, highest first."""
    db = get_db(db_path)
    results = db.list_scores(
        Classification(classification) if classification else None,
        min_score=min_score,
        limit=limit,
    )

    if not results:
        console.print("[yellow]No scores found[/yellow]")
        return

    table = Table(title=f"Scores ({len(results)})" + (f" - {classification}" if classification else ""))
    table.add_column("Lead", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Tier")
    table.add_column("Confidence", justify="right")
    table.add_column("Top Factors", style="dim")
    table.add_column("Scored", style="dim")

    for result in results:
        table.add_row(
            result.lead_id,
            str(result.total_score),
            _tier_text(result.classification),
            f"{result.confidence}%",
            result.summary,
            result.calculated_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@cli.command()
@click.argument("lead_id")
@click.option("--db", "db_path", help="Custom database path")
def show(lead_id: str, db_path: Optional[str]):
    """Show the latest stored score for a lead."""
    result = get_db(db_path).get_latest_score(lead_id)
    if result is None:
        raise click.ClickException(f"No score stored for lead {lead_id}")
    _print_result(result)


@cli.command()
@click.option("--db", "db_path", help="Custom database path")
def stats(db_path: Optional[str]):
    """Show score statistics."""
    data = get_db(db_path).get_stats()
    by_classification = data["by_classification"]

    console.print(Panel.fit(
        f"Scores: [cyan]{data['total_scores']}[/cyan] across [cyan]{data['leads']}[/cyan] leads\n"
        f"Average score: [cyan]{data['average_score'] if data['average_score'] is not None else '-'}[/cyan]\n"
        f"Average confidence: "
        f"[cyan]{data['average_confidence'] if data['average_confidence'] is not None else '-'}[/cyan]\n\n"
        + "\n".join(
            f"  {_tier_text(c)}: {by_classification.get(c.value, 0)}" for c in Classification
        ),
        title="Score Statistics",
    ))


# ============================================================================
# CONFIGURATION
# ============================================================================

@cli.group()
def config():
    """Inspect and edit scoring configuration."""
    pass


@config.command("show")
@click.option("--config", "config_path", help="Custom scoring config path")
def config_show(config_path: Optional[str]):
    """Show current weights and thresholds."""
    manager = get_config_manager(config_path)
    current = manager.config

    table = Table(title=f"Scoring Config v{current.version}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right")

    for name, value in current.to_dict()["weights"].items():
        table.add_row(f"weight.{name}", f"{value:.2f}")
    for name, value in current.to_dict()["thresholds"].items():
        table.add_row(f"threshold.{name}", f"{value:g}")

    console.print(table)

    total = current.weights.total
    if abs(total - 1.0) > 1e-6:
        console.print(f"[yellow]Warning: weights sum to {total:.3f}, not 1.0[/yellow]")
    console.print(f"[dim]{manager.config_path}[/dim]")


@config.command("set-weight")
@click.argument("factor", type=click.Choice([f.name for f in fields(ScoringWeights)]))
@click.argument("value", type=float)
@click.option("--config", "config_path", help="Custom scoring config path")
def config_set_weight(factor: str, value: float, config_path: Optional[str]):
    """Set the weight of one scoring factor."""
    manager = get_config_manager(config_path)
    updated = manager.update_weights(**{factor: value})
    console.print(f"[green]✓ {factor} weight set to {value:.2f}[/green]")
    if abs(updated.weights.total - 1.0) > 1e-6:
        console.print(f"[yellow]Weights now sum to {updated.weights.total:.3f}[/yellow]")


@config.command("set-thresholds")
@click.option("--hot", type=float, required=True)
@click.option("--warm", type=float, required=True)
@click.option("--cold", type=float, required=True)
@click.option("--config", "config_path", help="Custom scoring config path")
def config_set_thresholds(hot: float, warm: float, cold: float, config_path: Optional[str]):
    """Set classification thresholds."""
    if not hot >= warm >= cold:
        raise click.BadParameter("thresholds must satisfy hot >= warm >= cold")
    get_config_manager(config_path).update_thresholds(hot, warm, cold)
    console.print(f"[green]✓ Thresholds set: hot {hot:g} / warm {warm:g} / cold {cold:g}[/green]")


@config.command("set-version")
@click.argument("version")
@click.option("--config", "config_path", help="Custom scoring config path")
def config_set_version(version: str, config_path: Optional[str]):
    """Tag the configuration with a version string."""
    get_config_manager(config_path).set_version(version)
    console.print(f"[green]✓ Config version set to {version}[/green]")


@config.command("reset")
@click.option("--config", "config_path", help="Custom scoring config path")
@click.confirmation_option(prompt="Restore default weights and thresholds?")
def config_reset(config_path: Optional[str]):
    """Restore the default configuration."""
    get_config_manager(config_path).reset()
    console.print("[green]✓ Scoring config reset to defaults[/green]")


@cli.command()
@click.option("--host", default=None, help="Bind address (default LQ_API_HOST)")
@click.option("--port", type=int, default=None, help="Port (default LQ_API_PORT)")
def serve(host: Optional[str], port: Optional[int]):
    """Run the scoring API server."""
    import uvicorn
    from ..website_api.config import settings
    from ..website_api.main import create_app

    logging.getLogger().setLevel(logging.INFO)
    uvicorn.run(create_app(), host=host or settings.host, port=port or settings.port)


if __name__ == "__main__":
    cli()

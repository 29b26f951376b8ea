"""Presentation helpers for session metrics."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from bountyscout.console import console as default_console

if TYPE_CHECKING:
    from bountyscout.analytics.aggregator import SessionMetrics

logger = logging.getLogger(__name__)


def metrics_filename(session_id: str) -> str:
    return f"pipeline-metrics-{session_id}.json"


def save_metrics(metrics: SessionMetrics, output_dir: Path | str) -> Path:
    """Write metrics as pretty-printed JSON.

    Args:
        metrics: Snapshot from PipelineAnalytics.generate_metrics().
        output_dir: Directory to write into; created if missing.

    Returns:
        Path of the written file.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / metrics_filename(metrics.session_id)
    path.write_text(json.dumps(metrics.to_dict(), indent=2))
    logger.info("Metrics saved to %s", path)
    return path


def print_summary(metrics: SessionMetrics, console: Console | None = None) -> None:
    """Render a session summary to the console."""
    console = console or default_console
    decisions = metrics.decisions
    impl = metrics.implementations
    quality = metrics.quality_gates
    perf = metrics.performance
    value = metrics.value_analysis

    console.print("\n[bold blue]Pipeline analytics summary[/]")
    console.print(f"  Session: [cyan]{metrics.session_id}[/]")
    console.print(f"  Runtime: [cyan]{round(metrics.total_runtime / 1000)}s[/]")
    console.print(f"  Bounties processed: [cyan]{metrics.bounties_processed}[/]")

    table = Table(title="Decisions and implementations")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Evaluated", str(decisions.total_evaluated))
    table.add_row("Go", str(decisions.go_decisions))
    table.add_row("Caution", str(decisions.caution_decisions))
    table.add_row("No-go", str(decisions.no_go_decisions))
    table.add_row("Average confidence", f"{decisions.average_confidence:.1f}%")
    table.add_row("Implementations attempted", str(impl.attempted))
    table.add_row("Implementations successful", str(impl.successful))
    table.add_row("Success rate", f"{impl.success_rate:.1f}%")
    table.add_row("Average duration", f"{round(impl.average_duration / 1000)}s")
    if quality.enabled:
        table.add_row("Quality gates checked", str(quality.total_checked))
        table.add_row("Quality gates passed", str(quality.passed))
        table.add_row("Average quality score", f"{quality.average_score:.1f}/100")
    table.add_row("Evaluations/min", f"{perf.evaluations_per_minute:.1f}")
    table.add_row("Implementations/hour", f"{perf.implementations_per_hour:.1f}")
    console.print(table)

    console.print("\n[bold]Value analysis[/]")
    console.print(f"  Total bounty value: ${value.total_bounty_value / 100:,.2f}")
    console.print(
        f"  Successfully implemented: ${value.successfully_implemented_value / 100:,.2f}"
    )
    console.print(f"  Estimated cost (approx.): ~${impl.total_cost_estimate:,.2f}")
    console.print(f"  Estimated ROI (approx.): ~{value.roi_estimate:.2f}x")

    if perf.bottlenecks:
        console.print("\n[yellow]Bottlenecks[/]")
        for bottleneck in perf.bottlenecks:
            console.print(f"  [yellow]![/] {bottleneck}")

"""Rich terminal rendering for CLI output."""
from __future__ import annotations

from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from influence_engine.models.influence import InfluenceAnalytics, Strategy
from influence_engine.models.profile import SCORE_FIELDS, BehavioralProfile

console = Console()


def _score_style(value: float) -> str:
    if value > 0.7:
        return "green"
    if value < 0.3:
        return "red"
    return "white"


class Display:
    def __init__(self) -> None:
        self.console = console

    def show_profile(self, profile: BehavioralProfile) -> None:
        table = Table(title=f"Profile: {profile.uid}", box=box.ROUNDED, border_style="cyan")
        table.add_column("Score", style="bold")
        table.add_column("Value", justify="right")
        for name in SCORE_FIELDS:
            value = getattr(profile, name)
            table.add_row(name.replace("_", " ").title(), f"[{_score_style(value)}]{value:.2f}[/]")
        table.add_section()
        table.add_row("Confidence", f"{profile.confidence:.2f}")
        table.add_row("Data points", str(profile.data_points_analyzed))
        self.console.print(table)

    def show_strategy(self, strategy: Strategy) -> None:
        if strategy.mechanism == "none":
            self.show_error(strategy.reason or "No strategy available")
            return
        params = ", ".join(f"{k}={v}" for k, v in strategy.parameters.items())
        self.console.print(Panel(
            f"[bold]{strategy.mechanism}[/bold] (strength {strategy.strength:.2f})\n"
            f"{strategy.message}\n[dim]{params}[/dim]",
            title="Influence Strategy",
            border_style="magenta",
        ))

    def show_insights(self, insights: dict[str, Any]) -> None:
        lines = [f"[bold]{insights['player_type']}[/bold], {insights['play_style']}"]
        for heading, key, style in (
            ("Strengths", "strengths", "green"),
            ("Weaknesses", "weaknesses", "red"),
            ("Recommendations", "recommendations", "yellow"),
        ):
            if insights[key]:
                lines.append(f"\n[{style}]{heading}[/]")
                lines.extend(f"  • {item}" for item in insights[key])
        self.console.print(Panel("\n".join(lines), title="Insights", border_style="cyan"))

    def show_analytics(self, analytics: InfluenceAnalytics, weights: dict[str, float]) -> None:
        table = Table(title="Influence Analytics", box=box.SIMPLE_HEAVY)
        table.add_column("Mechanism")
        table.add_column("Events", justify="right")
        table.add_column("Weight", justify="right")
        for mechanism in sorted(set(analytics.influence_types) | set(weights)):
            weight = weights.get(mechanism)
            table.add_row(
                mechanism,
                str(analytics.influence_types.get(mechanism, 0)),
                f"{weight:.3f}" if weight is not None else "-",
            )
        self.console.print(table)
        self.console.print(
            f"Accepted {analytics.accepted_influences}/{analytics.total_influences} "
            f"({analytics.effectiveness_score:.0%}), susceptibility {analytics.susceptibility_trend}"
        )

    def show_info(self, message: str) -> None:
        self.console.print(f"[cyan]{message}[/cyan]")

    def show_error(self, message: str) -> None:
        self.console.print(f"[bold red]{message}[/bold red]")

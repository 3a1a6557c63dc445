"""Shared rendering helpers for CLI commands.

This module turns analysis results into console text or JSON payloads and
resolves settings that several commands share.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import click

from ncd_screen.config import Config, load_config
from ncd_screen.content import ContentResolver
from ncd_screen.engine.insights import PrimaryInsights
from ncd_screen.logging_audit.logger import console_handlers
from ncd_screen.models.analysis import AnalysisResult, RiskBand

BAND_COLORS = {RiskBand.LOW: "green", RiskBand.MEDIUM: "yellow", RiskBand.HIGH: "red"}


def get_config(ctx: click.Context) -> Config:
    """Return the configuration loaded by the root group, or load defaults."""
    if ctx.obj and "config" in ctx.obj:
        return ctx.obj["config"]
    return load_config()


def resolve_reference_year(ctx: click.Context, as_of_year: Optional[int]) -> Optional[int]:
    """CLI flag wins over configuration; None means the current year."""
    if as_of_year is not None:
        return as_of_year
    return get_config(ctx).screening.reference_year


@contextmanager
def quiet_console(enabled: bool) -> Iterator[None]:
    """Silence console log output while machine-readable output is printed."""
    silenced = [(h, h.level) for h in console_handlers()] if enabled else []
    for handler, _ in silenced:
        handler.setLevel(logging.CRITICAL + 1)
    try:
        yield
    finally:
        for handler, level in silenced:
            handler.setLevel(level)


def analysis_payload(
    result: AnalysisResult,
    insights: PrimaryInsights,
    resolver: ContentResolver,
    include_details: bool,
) -> dict[str, Any]:
    """JSON-serializable view of one analysis."""
    payload = result.to_dict()
    payload["insights"] = insights.to_dict()
    if include_details:
        payload["details"] = {
            rec.key: [
                {
                    "title": block.title,
                    "body": block.body,
                    "interactive_component": block.interactive_component,
                }
                for block in resolver.recommendation_details(rec.key)
            ]
            for rec in result.recommendations
        }
    return payload


def echo_analysis(
    result: AnalysisResult,
    insights: PrimaryInsights,
    resolver: ContentResolver,
    include_details: bool,
) -> None:
    """Print one analysis as human-readable, color-coded text."""
    band_label = resolver.text(f"cbac_{result.risk_band.value}")
    click.echo("=" * 60)
    click.secho(
        f"CBAC score: {result.cbac_score}/10 ({band_label})",
        fg=BAND_COLORS[result.risk_band],
        bold=True,
    )
    if result.has_lifestyle_risk_alert:
        click.secho("Lifestyle risk alert: early-warning factors present", fg="red")
    click.echo("=" * 60)

    bmi, waist = result.biometrics.bmi, result.biometrics.waist
    click.echo(f"BMI:   {bmi.display} ({bmi.status.value})")
    if bmi.note:
        click.echo(f"       {bmi.note}")
    click.echo(f"Waist: {waist.display} ({waist.status.value})")
    if waist.note:
        click.echo(f"       {waist.note}")

    if insights.positive:
        click.secho(f"\nStrength: {insights.positive.label}", fg="green")
    if insights.focus_areas:
        click.secho(
            "Focus:    " + ", ".join(f.label for f in insights.focus_areas), fg="yellow"
        )

    click.echo(f"\nRecommendations ({len(result.recommendations)}):")
    for rec in result.recommendations:
        marker = click.style("[HIGH]", fg="red", bold=True) if rec.is_high_priority else "      "
        frequency = f" ({rec.frequency})" if rec.frequency else ""
        click.echo(f"  {marker} {rec.category}: {rec.test}{frequency}")
        click.echo(f"         {rec.reason}")
        if include_details:
            for block in resolver.recommendation_details(rec.key):
                if block.is_interactive:
                    click.echo(f"         [visual aid: {block.interactive_component}]")
                else:
                    click.echo(f"         {block.title}: {block.body}")

    click.echo(f"\n{result.disclaimer}")

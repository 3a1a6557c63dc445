"""Built-in scenario CLI commands.

This module provides commands to list the reference scenarios and run the
screening engine on one of them.
"""

import json as json_lib
import logging
import sys
from typing import Optional

import click

from ncd_screen.cli.output import (
    analysis_payload,
    echo_analysis,
    get_config,
    quiet_console,
    resolve_reference_year,
)
from ncd_screen.content import default_resolver
from ncd_screen.engine import analyze, primary_insights
from ncd_screen.logging_audit import log_audit_event
from ncd_screen.scenarios import get_scenario, list_scenarios
from ncd_screen.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)


@click.group(name="scenarios")
def scenarios_group() -> None:
    """Reference screening scenarios."""


@scenarios_group.command(name="list")
def list_command() -> None:
    """List the built-in scenarios."""
    for scenario in list_scenarios():
        click.echo(f"{scenario.id}  {click.style(scenario.name, bold=True)}")
        click.echo(f"    {scenario.description}")


@scenarios_group.command(name="run")
@click.argument("scenario_id")
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
@click.option("--details", is_flag=True, help="Include recommendation detail content")
@click.option(
    "--as-of-year",
    type=click.IntRange(1900, 2200),
    default=None,
    help="Calendar year used for years-since-quit (default: config or current year)",
)
@click.pass_context
def run_command(
    ctx: click.Context,
    scenario_id: str,
    json_output: bool,
    details: bool,
    as_of_year: Optional[int],
) -> None:
    """Run the screening engine on a built-in scenario.

    Example:
        ncd-screen scenarios run 01 --as-of-year 2025
    """
    include_details = details or get_config(ctx).screening.include_details
    reference_year = resolve_reference_year(ctx, as_of_year)
    resolver = default_resolver()

    with quiet_console(json_output):
        try:
            scenario = get_scenario(scenario_id)
        except ValidationError as e:
            click.secho(f"Error: {e}", fg="red", err=True)
            sys.exit(1)

        logger.info(f"Running scenario {scenario.id}: {scenario.name}")
        result = analyze(scenario.profile, reference_year=reference_year, resolver=resolver)
        insights = primary_insights(scenario.profile, resolver)
        log_audit_event(
            "SCENARIO_RUN",
            {"status": "success", "scenario": scenario.id, "cbac_score": result.cbac_score},
        )

        if json_output:
            payload = analysis_payload(result, insights, resolver, include_details)
            payload["scenario"] = {"id": scenario.id, "name": scenario.name}
            click.echo(json_lib.dumps(payload, indent=2))
        else:
            click.secho(f"Scenario {scenario.id}: {scenario.name}", bold=True)
            click.echo(scenario.description)
            echo_analysis(result, insights, resolver, include_details)

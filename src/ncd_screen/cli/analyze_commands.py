"""Single-profile analysis CLI command.

This module provides the analyze command, which screens one stored patient
profile and prints the score, insights and recommendations.
"""

import json as json_lib
import logging
import sys
import time
from pathlib import Path
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
from ncd_screen.persistence import load_profile
from ncd_screen.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)


@click.command("analyze")
@click.argument("profile_file", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
@click.option("--details", is_flag=True, help="Include recommendation detail content")
@click.option(
    "--as-of-year",
    type=click.IntRange(1900, 2200),
    default=None,
    help="Calendar year used for years-since-quit (default: config or current year)",
)
@click.pass_context
def analyze_command(
    ctx: click.Context,
    profile_file: Path,
    json_output: bool,
    details: bool,
    as_of_year: Optional[int],
) -> None:
    """Screen one patient profile stored as JSON.

    Prints the CBAC score and risk band, BMI and waist status, headline
    insights and the prioritized recommendation list.

    Exits with code 0 on success, code 1 if the profile cannot be loaded.

    Examples:

        # Human-readable report
        ncd-screen analyze profile.json

        # JSON for automation, with detail content blocks
        ncd-screen analyze profile.json --json --details

        # Reproducible years-since-quit
        ncd-screen analyze profile.json --as-of-year 2025
    """
    start_time = time.time()
    config = get_config(ctx)
    include_details = details or config.screening.include_details
    reference_year = resolve_reference_year(ctx, as_of_year)
    resolver = default_resolver()

    with quiet_console(json_output):
        try:
            logger.info(f"Analyzing profile file: {profile_file}")
            profile = load_profile(profile_file)
            result = analyze(profile, reference_year=reference_year, resolver=resolver)
            insights = primary_insights(profile, resolver)
        except (ValidationError, FileNotFoundError) as e:
            log_audit_event(
                "ANALYSIS_FAILED",
                {"status": "failure", "input_file": str(profile_file), "error_message": str(e)},
            )
            click.secho(f"Error: {e}", fg="red", err=True)
            sys.exit(1)

        log_audit_event(
            "ANALYSIS_COMPLETED",
            {
                "status": "success",
                "input_file": str(profile_file),
                "cbac_score": result.cbac_score,
                "duration": time.time() - start_time,
            },
        )

        if json_output:
            payload = analysis_payload(result, insights, resolver, include_details)
            click.echo(json_lib.dumps(payload, indent=2))
        else:
            echo_analysis(result, insights, resolver, include_details)

"""CSV-related CLI commands for NCD Screen.

This module provides CLI commands for validating screening CSV files and
screening every row of a CSV in one batch.
"""

import json as json_lib
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click

from ncd_screen.cli.output import get_config, quiet_console, resolve_reference_year
from ncd_screen.content import default_resolver
from ncd_screen.csv_parser import export_results, parse_csv, rows_to_profiles
from ncd_screen.engine import analyze
from ncd_screen.logging_audit import log_audit_event
from ncd_screen.models.analysis import RiskBand
from ncd_screen.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)


@click.group()
def csv() -> None:
    """CSV file operations and batch screening commands."""
    pass


@csv.command("validate")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
def validate_csv_command(file: Path, json_output: bool) -> None:
    """Validate a screening CSV file.

    Performs comprehensive validation including:
    - Required name column and non-empty names
    - Numbers (ages, measurements, smoking history) and yes/no flags
    - Categorical values (sex, smoking status, alcohol, salt, ...)
    - Family history entries (condition:age:relationship)
    - Plausibility (ages over 120, quit years in the future)

    Exits with code 0 for success (warnings are OK), code 1 for validation errors.

    Examples:

        # Basic validation with color-coded output
        ncd-screen csv validate patients.csv

        # Output validation results in JSON format for automation
        ncd-screen csv validate patients.csv --json
    """
    with quiet_console(json_output):
        try:
            logger.info(f"Validating CSV file: {file}")
            _, result = parse_csv(file, validate=True)
        except (ValidationError, FileNotFoundError) as e:
            click.secho(f"Validation Error: {e}", fg="red", err=True)
            logger.error(f"Validation error: {e}")
            sys.exit(1)

        log_audit_event(
            "CSV_VALIDATED",
            {
                "status": "failure" if result.has_errors else "success",
                "input_file": str(file),
                "record_count": result.total_rows,
                "error_count": len(result.all_errors),
            },
        )

        if json_output:
            click.echo(json_lib.dumps(result.to_dict(), indent=2))
        elif result.has_errors:
            click.secho(result.format_report(), fg="red", err=True)
        elif result.has_warnings:
            click.secho(result.format_report(), fg="yellow")
        else:
            click.secho(result.format_report(), fg="green")

        if result.has_errors:
            sys.exit(1)
        logger.info("Validation complete. Exit code: 0")


@csv.command("screen")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    help="Results CSV path (default: <batch output_dir>/<file>-results.csv)",
)
@click.option(
    "--as-of-year",
    type=click.IntRange(1900, 2200),
    default=None,
    help="Calendar year used for years-since-quit (default: config or current year)",
)
@click.option(
    "--fail-fast/--skip-invalid",
    default=None,
    help="Stop on validation errors, or screen only the valid rows (default: config)",
)
@click.pass_context
def screen_csv_command(
    ctx: click.Context,
    file: Path,
    output: Optional[Path],
    as_of_year: Optional[int],
    fail_fast: Optional[bool],
) -> None:
    """Screen every patient in a CSV file and write a results CSV.

    Rows with validation errors are skipped (or stop the run with
    --fail-fast). Warnings never block screening.

    Exit Codes:
        0: All rows screened
        1: Nothing screened (unreadable file or every row invalid)
        2: Some rows skipped because of validation errors

    Examples:

        ncd-screen csv screen patients.csv --output results.csv

        ncd-screen csv screen patients.csv --fail-fast --as-of-year 2025
    """
    start_time = time.time()
    config = get_config(ctx)
    if fail_fast is None:
        fail_fast = config.batch.fail_fast
    reference_year = resolve_reference_year(ctx, as_of_year)
    output_path = output or config.batch.output_dir / f"{file.stem}-results.csv"
    resolver = default_resolver()

    try:
        df, result = parse_csv(file, validate=True)
        skipped_rows = result.error_row_numbers
        if skipped_rows and fail_fast:
            click.secho(result.format_report(), fg="red", err=True)
            raise ValidationError(
                f"{len(skipped_rows)} row(s) failed validation; stopping (fail-fast)"
            )
        profiles = rows_to_profiles(df, skip_rows=skipped_rows)
    except (ValidationError, FileNotFoundError) as e:
        log_audit_event(
            "BATCH_SCREENED",
            {"status": "failure", "input_file": str(file), "error_message": str(e)},
        )
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if skipped_rows:
        click.secho(
            f"Skipping {len(skipped_rows)} row(s) with validation errors: "
            f"{', '.join(str(r) for r in sorted(skipped_rows))}",
            fg="yellow",
            err=True,
        )
        click.echo("Use 'csv validate' command for detailed validation report", err=True)

    if not profiles:
        click.secho("No valid rows to screen", fg="red", err=True)
        sys.exit(1)

    results = [
        (profile.name, analyze(profile, reference_year=reference_year, resolver=resolver))
        for _, profile in profiles
    ]
    export_results(results, output_path)

    band_counts = {band: 0 for band in RiskBand}
    for _, analysis in results:
        band_counts[analysis.risk_band] += 1
    alerts = sum(1 for _, analysis in results if analysis.has_lifestyle_risk_alert)

    log_audit_event(
        "BATCH_SCREENED",
        {
            "status": "success",
            "input_file": str(file),
            "record_count": len(results),
            "error_count": len(skipped_rows),
            "duration": time.time() - start_time,
        },
    )

    click.echo(f"Screened {len(results)} patient(s)")
    click.secho(f"  - Low risk:      {band_counts[RiskBand.LOW]}", fg="green")
    click.secho(f"  - Moderate risk: {band_counts[RiskBand.MEDIUM]}", fg="yellow")
    click.secho(f"  - High risk:     {band_counts[RiskBand.HIGH]}", fg="red")
    click.echo(f"  - Lifestyle alerts: {alerts}")
    click.echo(f"\nResults written to: {output_path}")

    if skipped_rows:
        sys.exit(2)

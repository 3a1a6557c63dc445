"""Main CLI entry point for NCD Screen.

This module provides the main Click command group for the ncd-screen CLI.
"""

from pathlib import Path
from typing import Optional

import click

from ncd_screen import __version__
from ncd_screen.cli.analyze_commands import analyze_command
from ncd_screen.cli.csv_commands import csv
from ncd_screen.cli.scenario_commands import scenarios_group
from ncd_screen.config import load_config
from ncd_screen.logging_audit import configure_logging
from ncd_screen.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="ncd-screen")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-pii/--no-redact-pii",
    default=None,
    help="Redact patient names from logs (default: config, which redacts)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_pii: Optional[bool],
) -> None:
    """NCD Screen - community health screening risk engine.

    Computes the CBAC risk score and a prioritized list of screening
    recommendations for patient profiles.

    Common usage:

        # Screen one stored profile
        ncd-screen analyze profile.json

        # Validate and batch-screen a CSV of patients
        ncd-screen csv validate patients.csv
        ncd-screen csv screen patients.csv --output results.csv

        # Try the built-in reference scenarios
        ncd-screen scenarios list
        ncd-screen scenarios run 01

    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
        ctx.obj["config"] = config_obj
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)

    ctx.obj["verbose"] = verbose
    ctx.obj["log_file"] = log_file

    # Precedence: CLI flags > config file > defaults
    log_level = "DEBUG" if verbose else config_obj.logging.level
    log_file_path = log_file if log_file else config_obj.logging.log_file
    redact_pii_setting = config_obj.logging.redact_pii if redact_pii is None else redact_pii
    ctx.obj["redact_pii"] = redact_pii_setting

    configure_logging(
        level=log_level, log_file=log_file_path, redact_pii=redact_pii_setting
    )


cli.add_command(analyze_command)
cli.add_command(csv)
cli.add_command(scenarios_group)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        ncd-screen config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)

    screening = config_obj.screening
    click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
    click.echo(f"\nConfiguration file: {config_file}")

    click.echo("\nScreening:")
    click.echo(f"  Reference year:  {screening.reference_year or 'current year'}")
    click.echo(f"  Include details: {screening.include_details}")

    click.echo("\nLogging:")
    click.echo(f"  Level:       {config_obj.logging.level}")
    click.echo(f"  Log file:    {config_obj.logging.log_file}")
    click.echo(f"  Redact PII:  {config_obj.logging.redact_pii}")

    click.echo("\nBatch:")
    click.echo(f"  Fail fast:   {config_obj.batch.fail_fast}")
    click.echo(f"  Output dir:  {config_obj.batch.output_dir}")


cli.add_command(config)


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"ncd-screen version {__version__}")


if __name__ == "__main__":
    cli()

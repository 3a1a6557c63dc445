"""Entry point for running ncd_screen as a module.

This allows the package to be executed as:
    python -m ncd_screen
"""

from ncd_screen.cli.main import cli

if __name__ == "__main__":
    cli()

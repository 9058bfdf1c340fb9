#!/usr/bin/env python3
"""terrastl Command-Line Interface"""
import sys
import typer

from terrastl import __version__
from terrastl.cli.core.ui import console, setup_logging
from terrastl.cli.apps.config_app import create_config_app
from terrastl.cli.apps.model_app import create_model_app

# Create main app
app = typer.Typer(
    help="terrastl - Turn elevation grids into 3D-printable STL terrain models",
    add_completion=False
)

app.add_typer(
    create_model_app(),
    name="model",
    help="Generate STL models from elevation grids (single and batch)"
)

app.add_typer(
    create_config_app(),
    name="config",
    help="Configuration management"
)

@app.command(name="version", help="Show terrastl version")
def version_command():
    """Print the installed terrastl version."""
    console.print(f"terrastl {__version__}")

@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")
):
    """
    terrastl Command-Line Tools

    Fills gaps in elevation grids, smooths them, and writes closed solid
    terrain meshes as binary or ASCII STL.
    """
    setup_logging(verbose)

def main():
    """Run the terrastl CLI application."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)

if __name__ == "__main__":
    sys.exit(main())

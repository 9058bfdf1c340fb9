#!/usr/bin/env python3
"""
UI components for terrastl CLI tools.

This module provides functions for creating consistent user interfaces
across the terrastl command-line tools.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.theme import Theme

logger = logging.getLogger(__name__)

# Create a custom theme
terrastl_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "filename": "bold blue",
    "path": "blue",
    "value": "green",
    "key": "cyan",
    "header": "bold magenta",
})

console = Console(theme=terrastl_theme)


def setup_logging(verbose: bool = False) -> None:
    """
    Route library logging through rich.

    Args:
        verbose: Show debug messages instead of warnings only
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=verbose, show_path=False)],
        force=True
    )


def print_rich_table(data: List[Dict[str, Any]], title: str,
                     columns: Optional[List[Tuple[str, str]]] = None) -> None:
    """
    Print data as a rich table.
    
    Args:
        data: List of dictionaries with row data.
        title: Table title.
        columns: Optional list of (column_name, style) tuples.
    """
    table = Table(title=title)

    if not columns:
        # Use first row to determine columns
        columns = [(key, "cyan") for key in data[0].keys()] if data else []

    for name, style in columns:
        table.add_column(name, style=style)

    for row in data:
        table.add_row(*[str(row.get(col[0], "")) for col in columns])

    console.print(table)


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.3f}"
    if isinstance(value, int):
        return f"{value:,}"
    return str(value)


def display_model_stats(stats: Dict[str, Any], dimensions: Dict[str, Any],
                        title: str = "Terrain Model") -> None:
    """
    Display model statistics and dimensions in a table.
    
    Args:
        stats: Dictionary from ModelStats.as_dict()
        dimensions: Dictionary with width_mm, length_mm, height_mm
        title: Table title
    """
    table = Table(title=title)
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    for key in ("width_mm", "length_mm", "height_mm"):
        table.add_row(key, _format_value(dimensions[key]))
    for key, value in stats.items():
        table.add_row(key, _format_value(value))

    console.print(table)


def print_warning(message: str) -> None:
    """
    Print a warning message.
    
    Args:
        message: Warning message text
    """
    console.print(f"[warning]Warning:[/warning] {message}")

def print_error(message: str) -> None:
    """
    Print an error message.
    
    Args:
        message: Error message text
    """
    console.print(f"[error]Error:[/error] {message}")

def print_success(message: str) -> None:
    """
    Print a success message.
    
    Args:
        message: Success message text
    """
    console.print(f"[success]{message}[/success]")

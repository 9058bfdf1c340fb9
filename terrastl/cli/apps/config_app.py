#!/usr/bin/env python3
"""
Configuration app for terrastl CLI.
"""

import typer
from rich.panel import Panel

from terrastl.cli.core.ui import console, print_success, print_warning
from terrastl.cli.core.config import DEFAULT_CONFIG, load_config, reset_config, set_config_value

def create_config_app():
    """Create the configuration app with all commands."""
    config_app = typer.Typer(help="Manage terrastl configuration")
    
    config_app.command(name="show")(config_show)
    config_app.command(name="set")(config_set)
    config_app.command(name="reset")(config_reset)
    
    return config_app

def parse_config_value(value: str):
    """Convert a command-line string to bool, int, float or str."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value

def config_show():
    """Display current configuration settings."""
    config = load_config()
    
    console.print(Panel.fit("[bold]terrastl Configuration[/bold]"))
    for key, value in sorted(config.items()):
        console.print(f"[key]{key}[/key]: [value]{value}[/value]")

def config_set(
    key: str = typer.Argument(..., help="Configuration key"),
    value: str = typer.Argument(..., help="Configuration value")
):
    """Set a configuration value."""
    if key not in DEFAULT_CONFIG:
        print_warning(f"'{key}' is not a known setting; it will be stored but not used")

    typed_value = parse_config_value(value)
    set_config_value(key, typed_value)
    print_success(f"Configuration updated: {key} = {typed_value}")

def config_reset():
    """Reset configuration to default values."""
    reset_config()
    print_success("Configuration reset to default values")

"""Typer sub-applications for the terrastl CLI."""

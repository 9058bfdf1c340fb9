"""Command implementations for the terrastl CLI."""

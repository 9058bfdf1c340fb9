"""Command-line interface for terrastl."""

"""Command-line interface for pagebinder."""

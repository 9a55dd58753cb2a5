"""Command-line interface for wisshrd."""

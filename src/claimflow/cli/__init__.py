"""Command-line interface for claimflow."""

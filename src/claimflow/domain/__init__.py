"""Domain layer for claimflow application."""

"""Utility helpers for claimflow."""

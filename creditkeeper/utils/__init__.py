"""Shared helpers for date and number handling."""

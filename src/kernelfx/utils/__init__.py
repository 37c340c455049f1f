"""Shared helpers for kernelfx."""

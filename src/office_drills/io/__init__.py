"""Persistence and notification adapters."""

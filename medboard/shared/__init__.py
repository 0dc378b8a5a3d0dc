"""Shared utilities: time, identifiers, logging, background tasks."""

"""Shared building blocks: errors, settings and logging."""

"""Shared helpers: paths, configuration defaults, errors and logging."""

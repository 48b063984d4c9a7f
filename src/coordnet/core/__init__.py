"""Core module with errors, types, units, config, and logging."""

__all__ = [
    "types",
    "units",
    "errors",
    "logging",
    "config",
]

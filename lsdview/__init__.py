"""Directory listing toolkit: options, configuration, colour themes and grid/tree layout."""

__version__ = "0.1.0"

__all__ = ["cli", "flags", "color", "config", "grid", "display"]
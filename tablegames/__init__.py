"""Game-mode registry and request dispatch backbone."""

__version__ = "0.1.0"

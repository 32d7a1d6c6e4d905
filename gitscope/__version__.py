"""Version information for gitscope."""

__version__ = "0.1.0"

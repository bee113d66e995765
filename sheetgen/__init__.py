"""Music sheet and audio generation from context-sensitive stochastic L-systems."""

__version__ = "0.1.0"
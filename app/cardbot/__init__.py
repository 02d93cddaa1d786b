"""cardbot -- Bot Framework webhook that echoes text and serves an Adaptive Card."""

__version__ = "0.1.0"

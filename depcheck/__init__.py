"""depcheck — npm dependency freshness and security checker."""

__version__ = "1.0.0"

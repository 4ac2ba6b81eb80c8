"""shuffle-coalesce: size-driven coalescing of shuffle output partitions."""

__version__ = "0.1.0"

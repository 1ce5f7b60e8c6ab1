"""blockpad - block-structured document editor engine."""

__version__ = "0.1.0"

"""Approximate planar traveling-salesman tours from hierarchical nets, with a simple graph type."""

__version__ = "0.1.0"
__all__ = ["atsp", "cli", "graph"]
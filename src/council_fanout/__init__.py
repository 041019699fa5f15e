"""Parallel fan-out of one review context to several CLI agents."""

__version__ = "0.1.0"

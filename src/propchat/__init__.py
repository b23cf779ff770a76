"""Property question answering: query resolution, fuzzy fallback and aggregation."""

__version__ = "0.1.0"

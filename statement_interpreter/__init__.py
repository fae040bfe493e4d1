"""Rule-based interpretation of multi-year financial statements."""

__version__ = "1.0.0"

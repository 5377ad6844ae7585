"""smartdiff - locate function and class changes between two versions of a file."""

__version__ = "0.1.0"

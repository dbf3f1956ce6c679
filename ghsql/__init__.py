"""Query and update GitHub Projects with SQL."""

__version__ = "0.1.0"

"""Estimate time worked from a repository's commit history."""

__version__ = "1.0.0"

"""Adaptive question selection and team-fit scoring."""

__version__ = "0.1.0"

"""Declarative lifecycle management for Tableau projects."""

__version__ = "0.1.0"

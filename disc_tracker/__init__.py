"""Disc golf round tracker with UDisc scorecard import."""

__version__ = "1.0.0"

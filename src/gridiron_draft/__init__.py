"""Gridiron Draft - snake drafts and live fantasy scoring for NFL leagues."""

__version__ = "0.1.0"

"""Correct spelling, accents, encoding and timing of SRT subtitle files."""

__version__ = "0.1.0"

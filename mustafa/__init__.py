"""Mustafa: put a CDN in front of a hosted site environment."""

__version__ = "0.1.0"

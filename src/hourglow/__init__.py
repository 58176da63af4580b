"""Hourglow — consulting projects and commercial visits dashboard."""

__version__ = "0.1.0"

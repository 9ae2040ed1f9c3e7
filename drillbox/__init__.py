"""Workbenches built around classic data structures."""

__version__ = "0.1.0"
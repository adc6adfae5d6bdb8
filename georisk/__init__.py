"""Geological risk analysis for San Pedro de los Milagros."""

__version__ = "0.1.0"

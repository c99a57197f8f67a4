"""Toolkit for Qt Linguist TS translation catalogs."""

__version__ = "0.1.0"

"""Pricewise: fee and profit calculations for independent online sellers."""

__version__ = "0.1.0"

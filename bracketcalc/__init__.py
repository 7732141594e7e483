"""Bracket Calc - dated tax and contribution bracket resolution."""

__version__ = "0.3.0"

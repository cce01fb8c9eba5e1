"""Raid-zone and combat restriction tracking engine."""

__version__ = "0.1.0"

"""Ironroll: d20 combat resolution, proficiency progression and monster decisions."""

__version__ = "0.1.0"

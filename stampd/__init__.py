"""Configuration resolution for the stampd timestamp daemon."""

__version__ = "0.4.0"

"""REST API for the game top-up platform."""

__version__ = "0.1.0"

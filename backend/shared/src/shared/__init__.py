"""Shared domain models and services for the game top-up backend."""

__version__ = "0.1.0"

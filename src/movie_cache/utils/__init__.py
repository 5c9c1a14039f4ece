"""Utility modules for the movie cache API."""

from .logger import setup_logger

__all__ = ["setup_logger"]

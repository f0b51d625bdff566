"""
Logging module for procwarden.
This module provides the root logger configuration used by the console.
"""

from .setup import setup_logging, silent_logger

__all__ = ["setup_logging", "silent_logger"]

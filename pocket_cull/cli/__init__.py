"""
Command-line interface for Pocket Cull.

This module provides the main CLI entry point and command handling.
"""

from .main import PocketCLI, main

__all__ = [
    'PocketCLI',
    'main',
]

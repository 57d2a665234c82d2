"""
Utility functions and helpers for Pocket Cull.

- Console prompts and encoding setup
- Credential persistence
"""

from . import console_utils
from .credentials import CredentialStore

__all__ = [
    'CredentialStore',
    'console_utils',
]

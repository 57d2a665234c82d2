"""
Pocket Cull - a command-line client for Pocket.

Lists, adds, archives and deletes saved items, and culls dead or
duplicate links after checking that they still answer.
"""

__version__ = "0.2.0"

__all__ = ['__version__']

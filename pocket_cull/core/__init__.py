"""
Core functionality for Pocket Cull.

- URL canonicalization for duplicate detection
- Link checking
- Item output templates
- The interactive cull pipeline
"""

from .canonical import canonicalize
from .cull import CullPipeline, CullPolicy, CullReport
from .formatter import ItemFormatter
from .link_checker import LinkChecker, ProbeResult

__all__ = [
    'CullPipeline',
    'CullPolicy',
    'CullReport',
    'ItemFormatter',
    'LinkChecker',
    'ProbeResult',
    'canonicalize',
]

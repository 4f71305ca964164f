"""
User-facing interfaces: Python API and command line.
"""

from .api import RepositorySampler

__all__ = [
    "RepositorySampler",
]

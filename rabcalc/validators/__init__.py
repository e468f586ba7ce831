"""
validators/ - Final commit validation
"""

from .commit import CommitValidator

__all__ = [
    "CommitValidator",
]

"""
cost/enums.py - Cost estimation enumerations.
"""

from enum import Enum


class DurationMode(Enum):
    """How sub-work durations combine into a job duration."""
    PARALLEL = "parallel"        # stages overlap, job takes the longest
    SEQUENTIAL = "sequential"    # stages follow each other, durations add


class MaterialCategory(Enum):
    """Catalog groupings."""
    BETON = "beton"
    BESI = "besi"
    BEKISTING = "bekisting"
    PASANGAN = "pasangan"
    FINISHING = "finishing"
    UMUM = "umum"

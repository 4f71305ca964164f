"""
Core sampling logic: filtering, sampling, orchestration and statistics.
"""

from .database import merge_databases
from .filter import FilterEngine, FilterResult, is_within
from .orchestrator import DownloadOrchestrator
from .sampler import (
    Sampler,
    QuotaSampler,
    IncrementalSampler,
    create_sampler,
    fisher_yates,
)
from .stats import Counter, Stats

__all__ = [
    "merge_databases",
    "FilterEngine",
    "FilterResult",
    "is_within",
    "DownloadOrchestrator",
    "Sampler",
    "QuotaSampler",
    "IncrementalSampler",
    "create_sampler",
    "fisher_yates",
    "Counter",
    "Stats",
]

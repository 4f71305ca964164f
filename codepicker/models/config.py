"""
Configuration models for Codepicker runs.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DownloadConfig:
    """
    Unified configuration for a sampling run.

    Controls request pacing, concurrency and whether the run is allowed
    to touch the local file system.
    """

    # Request pacing
    qps: float = 20.0
    timeout: int = 30

    # Concurrency and performance settings
    max_concurrent_downloads: int = 5

    # Upper bound on downloads per run, applied even without max_items
    safety_ceiling: int = 10_000

    # Behaviour
    dry_run: bool = False
    log_skipped: bool = False

    def __post_init__(self) -> None:
        if self.qps <= 0:
            raise ValueError("qps must be positive")
        if self.max_concurrent_downloads <= 0:
            raise ValueError("max_concurrent_downloads must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.safety_ceiling <= 0:
            raise ValueError("safety_ceiling must be positive")


__all__ = [
    "DownloadConfig",
]

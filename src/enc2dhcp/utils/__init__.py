"""Utility modules for logging and retries."""
from .retry import with_retry
from .logging_config import (
    setup_logging,
    timed,
    timed_section_sync,
    perf_logger,
)

__all__ = [
    "with_retry",
    "setup_logging",
    "timed",
    "timed_section_sync",
    "perf_logger",
]

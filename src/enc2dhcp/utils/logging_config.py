"""Logging configuration for enc2dhcp.

Provides configurable logging with:
- File-based logging with rotation
- Console output for real-time debugging
- Performance timing decorators for efficiency analysis

Environment Variables:
    ENC2DHCP_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)
    ENC2DHCP_LOG_FILE: Path to log file (default: ~/.enc2dhcp/enc2dhcp.log)
    ENC2DHCP_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    ENC2DHCP_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from enc2dhcp.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("enumerate")
    def enumerate_instances(directory):
        ...

    # Or use context manager for sections:
    with timed_section_sync("hosts_write", target="/etc/dhcp/dhcpd.hosts"):
        ...
"""
import functools
import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Any

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("enc2dhcp.perf")
main_logger = logging.getLogger("enc2dhcp")


def get_log_level(override: Optional[str] = None) -> int:
    """Get log level from override or environment."""
    level_str = (override or os.environ.get("ENC2DHCP_LOG_LEVEL", "WARNING")).upper()
    return getattr(logging, level_str, logging.WARNING)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".enc2dhcp" / "enc2dhcp.log"
    path_str = os.environ.get("ENC2DHCP_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler (WARNING+ by default, respects ENC2DHCP_LOG_LEVEL)
    - File handler with rotation (DEBUG level - captures everything)
    - Performance logger for timing metrics

    Calling it again replaces the handlers installed by the previous call.
    """
    log_level = get_log_level(level)
    log_file = get_log_file()
    max_size_mb = int(os.environ.get("ENC2DHCP_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("ENC2DHCP_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-25s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    perf_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | PERF | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    perf_log_file = log_file.parent / "enc2dhcp-perf.log"
    perf_handler = RotatingFileHandler(
        perf_log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    perf_handler.setLevel(logging.DEBUG)
    perf_handler.setFormatter(perf_format)

    for handler in main_logger.handlers + perf_logger.handlers:
        handler.close()
    main_logger.handlers.clear()
    perf_logger.handlers.clear()

    main_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    main_logger.addHandler(console_handler)
    main_logger.addHandler(file_handler)

    # Timing lines go to their own file only
    perf_logger.setLevel(logging.DEBUG)
    perf_logger.addHandler(perf_handler)
    perf_logger.propagate = False

    main_logger.debug(f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}")


def _log_timing(operation: str, target: Optional[str], start: float, error: Optional[Exception] = None, extra_str: str = "") -> None:
    elapsed = (time.perf_counter() - start) * 1000  # ms
    if error is None:
        msg = f"{operation:20s} | {target or 'N/A':30s} | {elapsed:8.2f}ms | OK"
    else:
        msg = f"{operation:20s} | {target or 'N/A':30s} | {elapsed:8.2f}ms | FAIL: {error}"
    if extra_str:
        msg += f" | {extra_str}"
    if error is None:
        perf_logger.info(msg)
    else:
        perf_logger.warning(msg)


def timed(operation: str, target: Optional[str] = None):
    """Decorator to log execution time of a function.

    Args:
        operation: Name of the operation (e.g., "enumerate", "parse")
        target: Optional target label; defaults to the first positional
            argument after self when that is a str or Path

    Usage:
        @timed("parse")
        def parse(self, path):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            label = target
            if label is None:
                for arg in args[:2]:
                    if isinstance(arg, (str, Path)):
                        label = str(arg)
                        break

            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log_timing(operation, label, start, e)
                raise
            _log_timing(operation, label, start)
            return result

        return wrapper

    return decorator


@contextmanager
def timed_section_sync(operation: str, target: Optional[str] = None, **extra):
    """Context manager for timing code sections."""
    start = time.perf_counter()
    extra_str = " | ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""

    try:
        yield
    except Exception as e:
        _log_timing(operation, target, start, e, extra_str)
        raise
    _log_timing(operation, target, start, extra_str=extra_str)

"""Logging configuration for the event loop simulator.

This module provides centralised logging setup with consistent formatting
across all modules, plus the write-only sinks used for the driver's live
idle status line.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
import logging
import sys
import typing as t

# =============================================================================
# 2. CONSTANTS
# =============================================================================

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# =============================================================================
# 3. PUBLIC API
# =============================================================================


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the entire application.

    Args:
        verbose: If True, set log level to DEBUG; otherwise INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format=DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Suppress noisy third-party loggers
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__).

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)


# =============================================================================
# 4. STATUS LINE SINKS
# =============================================================================


class LogSink(t.Protocol):
    """Write-only text sink. Never read back by the scheduler."""

    def write(self, text: str) -> None: ...


class StatusLineSink:
    """Sink that rewrites a single terminal line in place."""

    def __init__(self, stream: t.TextIO | None = None) -> None:
        """Initialise sink.

        Args:
            stream: Target stream (defaults to stdout at write time).
        """
        self._stream = stream

    def write(self, text: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write("\r")
        stream.write(text)
        stream.flush()


class NullSink:
    """Sink that discards everything."""

    def write(self, text: str) -> None:
        pass

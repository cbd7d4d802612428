"""Loguru configuration with timing spans.

Provides:
- A coloured stderr sink for humans
- An optional structured JSON file sink with rotation and retention
- Component-bound loggers
- A context manager for timing operations (e.g. the GitHub request)
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "configure_loguru",
    "get_logger",
    "timing_context",
]


def configure_loguru(
    *,
    level: str = "WARNING",
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "10 days",
    enable_console: bool = True,
) -> None:
    """Configure loguru sinks.

    Parameters
    ----------
    level
        Lowest level written by every sink
    log_file
        JSON log file; parent directories are created
    rotation
        When the file sink starts a new file
    retention
        How long rotated files are kept
    enable_console
        Enable stderr output

    Example
    -------
    >>> configure_loguru(level="DEBUG", log_file=Path("logs/contrib-stats.jsonl"))
    """
    logger.remove()

    if enable_console:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[component]}</cyan> | "
            "<level>{message}</level>",
            level=level,
            colorize=None,
            backtrace=False,
            diagnose=False,
        )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{message}",
            level=level,
            rotation=rotation,
            retention=retention,
            serialize=True,
            backtrace=True,
            diagnose=False,
        )

    logger.configure(extra={"component": "contrib_stats"})
    logger.debug("Loguru configured", level=level, log_file=str(log_file) if log_file else None)


def get_logger(component: str = "contrib_stats") -> Any:
    """Get logger instance bound to a component (github, pipeline, cli)."""
    return logger.bind(component=component)


@contextmanager
def timing_context(
    operation: str,
    *,
    component: str = "contrib_stats",
    trace_id: str | None = None,
    **metadata: Any,
) -> Generator[dict[str, Any], None, None]:
    """Time a block and log START/END records with its duration.

    Yields
    ------
    dict
        Context dictionary that can be updated with data logged at END

    Example
    -------
    >>> with timing_context("fetch_contributor_stats", component="github") as ctx:
    ...     records = client.fetch_contributor_stats("golang", "go")
    ...     ctx["contributors"] = len(records)
    """
    start_ns = time.perf_counter_ns()
    context: dict[str, Any] = dict(metadata)
    bound = logger.bind(component=component, timing=True, operation=operation, trace_id=trace_id)

    bound.debug("START: " + operation, phase="start", **metadata)

    try:
        yield context
    finally:
        duration_ns = time.perf_counter_ns() - start_ns
        bound.debug(
            "END: " + operation,
            phase="end",
            duration_ms=duration_ns / 1_000_000,
            **context,
        )

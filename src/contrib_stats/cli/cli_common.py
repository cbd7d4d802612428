"""Common CLI utilities: JSON output, stable exit codes and error mapping."""

from __future__ import annotations

import functools
import json
import traceback
import uuid
from collections.abc import Callable
from enum import IntEnum
from typing import Any

import click

from ..adapters.github import StatsSourceError
from ..config.settings import ConfigError
from ..observability.loguru_config import get_logger
from ..rollups import InvalidRangeError

__all__ = [
    "CLIContext",
    "ExitCode",
    "cli_command",
    "handle_cli_error",
    "handle_cli_success",
]

log = get_logger("cli")


class ExitCode(IntEnum):
    """Stable exit codes for the CLI."""

    SUCCESS = 0  # Successful execution
    VALIDATION_ERROR = 2  # Bad arguments or invalid date range
    SOURCE_ERROR = 5  # GitHub unreachable, not ready or malformed response
    CONFIG_ERROR = 6  # Configuration error
    UNKNOWN_ERROR = 7  # Unknown/unexpected error


class CLIContext:
    """Per-invocation output settings shared by the command and its handlers.

    In JSON mode stdout carries exactly one envelope::

        {"status": "success", "trace_id": "...", "data": [...], "meta": {...}}

    with ``error`` replacing ``data`` on failure.
    """

    def __init__(
        self,
        json_output: bool = False,
        trace_id: str | None = None,
        verbose: bool = False,
    ):
        self.json_output = json_output
        self.trace_id = trace_id or f"trace-{uuid.uuid4().hex[:12]}"
        self.verbose = verbose

    def envelope(self, status: str, payload: Any, meta: dict[str, Any] | None) -> dict[str, Any]:
        key = "error" if status == "error" else "data"
        result: dict[str, Any] = {"status": status, "trace_id": self.trace_id, key: payload}
        if meta:
            result["meta"] = meta
        return result

    def output(
        self, data: Any, status: str = "success", error: str | None = None, meta: dict[str, Any] | None = None
    ) -> None:
        """Print a result as a JSON envelope or as plain lines.

        Errors go to stderr in human mode; ``data`` lists print one item per line.
        """
        if self.json_output:
            payload = error if status == "error" else data
            click.echo(json.dumps(self.envelope(status, payload, meta), ensure_ascii=False, indent=2))
        elif status == "error":
            click.echo(f"❌ {error}", err=True)
        elif isinstance(data, list):
            for item in data:
                click.echo(item)
        else:
            click.echo(data)


def cli_command(func: Callable[..., int]) -> Callable[..., int]:
    """Add ``--json``, ``--trace-id`` and ``--verbose`` to a command.

    The decorated callback receives a :class:`CLIContext` built from those
    flags as its first positional argument.
    """

    @click.option("--json", "json_output", is_flag=True, help="Print a JSON envelope instead of a table")
    @click.option("--trace-id", type=str, help="Correlation ID written to logs and JSON output")
    @click.option("--verbose", "-v", is_flag=True, help="DEBUG logs and tracebacks on errors")
    @functools.wraps(func)
    def wrapper(json_output: bool, trace_id: str | None, verbose: bool, *args: Any, **kwargs: Any) -> int:
        ctx = CLIContext(json_output=json_output, trace_id=trace_id, verbose=verbose)
        return func(ctx, *args, **kwargs)

    return wrapper


def exit_code_for(exc: Exception) -> ExitCode:
    """Map an exception to its stable exit code."""
    if isinstance(exc, InvalidRangeError):
        return ExitCode.VALIDATION_ERROR
    if isinstance(exc, StatsSourceError):
        return ExitCode.SOURCE_ERROR
    if isinstance(exc, ConfigError):
        return ExitCode.CONFIG_ERROR
    return ExitCode.UNKNOWN_ERROR


def handle_cli_error(ctx: CLIContext, exc: Exception, usage_hint: str | None = None) -> int:
    """Report an error and return the matching exit code.

    Args:
        ctx: CLI context
        exc: Exception to handle
        usage_hint: Printed after validation errors in human mode

    Returns:
        Appropriate exit code
    """
    exit_code = exit_code_for(exc)
    error_msg = str(exc)

    log.bind(trace_id=ctx.trace_id).error(
        "Command failed: {error}",
        error=error_msg,
        error_type=type(exc).__name__,
        exit_code=int(exit_code),
    )

    ctx.output(None, status="error", error=error_msg, meta={"exit_code": int(exit_code)})

    if not ctx.json_output:
        if exit_code == ExitCode.VALIDATION_ERROR and usage_hint:
            click.echo(usage_hint, err=True)
        if ctx.verbose:
            click.echo("\nTraceback:", err=True)
            click.echo(traceback.format_exc(), err=True)

    return int(exit_code)


def handle_cli_success(
    ctx: CLIContext,
    data: Any,
    meta: dict[str, Any] | None = None,
    render: Callable[[], None] | None = None,
) -> int:
    """Output a successful result and return the success code.

    Args:
        ctx: CLI context
        data: Success data (used in JSON mode)
        meta: Additional metadata (used in JSON mode)
        render: Human-readable renderer; falls back to ``ctx.output``

    Returns:
        Success exit code (0)
    """
    if ctx.json_output or render is None:
        ctx.output(data, status="success", meta=meta)
    else:
        render()

    return int(ExitCode.SUCCESS)

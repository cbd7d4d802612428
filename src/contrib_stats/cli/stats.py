#!/usr/bin/env python3
"""CLI command printing per-contributor statistics for a date range."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from ..config.settings import ConfigError, load_settings
from ..core.time import get_current_utc
from ..observability.loguru_config import configure_loguru
from ..pipelines import ContributionReport, create_report_pipeline
from ..rollups import ContributorSummary
from .cli_common import CLIContext, cli_command, handle_cli_error, handle_cli_success
from .inputs import InputError, RawInputs, process_inputs

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
HELP = """
Retrieves contributor stats for a GitHub repository for the given date range.

GitHub groups stats by week beginning, so stats for yesterday may not appear
if the beginning of that week is not within the date range. Contributors with
no commits in the date range are left out unless --all is given.
""".strip()
EPILOG = """
\b
Examples:
  contrib-stats golang/go
  contrib-stats --from 2017-09-01 --to 2018-02-01 golang/go
  contrib-stats --weeks 10 golang/go
  contrib-stats --years 1 --months 6 --all --json golang/go
""".strip()

NO_RESULTS = "No contributions found in the given date range."


@click.command(context_settings=CONTEXT_SETTINGS, help=HELP, epilog=EPILOG)
@click.argument("repository", metavar="OWNER/REPO")
@click.option(
    "--from",
    "date_from",
    metavar="YYYY-MM-DD",
    help="Lower bound (inclusive) of the date range. Can not be used with --weeks, --months or --years.",
)
@click.option(
    "--to",
    "date_to",
    metavar="YYYY-MM-DD",
    help="Upper bound (exclusive) of the date range, defaults to now. "
    "Can not be used with --weeks, --months or --years.",
)
@click.option(
    "--weeks",
    type=click.IntRange(min=0),
    default=0,
    help="Set lower bound by number of weeks back. Combines with --months and --years.",
)
@click.option(
    "--months",
    type=click.IntRange(min=0),
    default=0,
    help="Set lower bound by number of months back. Combines with --weeks and --years.",
)
@click.option(
    "--years",
    type=click.IntRange(min=0),
    default=0,
    help="Set lower bound by number of years back. Combines with --weeks and --months.",
)
@click.option(
    "--all",
    "include_all",
    is_flag=True,
    help="Show all contributors, including those without commits in the date range.",
)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file to load (default: .env in the current directory).",
)
@cli_command
def cli(
    ctx: CLIContext,
    repository: str,
    date_from: str | None,
    date_to: str | None,
    weeks: int,
    months: int,
    years: int,
    include_all: bool,
    env_file: Path | None,
) -> int:
    """Show contributor statistics for a repository."""
    try:
        settings = load_settings(env_file)
    except ConfigError as exc:
        return handle_cli_error(ctx, exc)

    configure_loguru(
        level="DEBUG" if ctx.verbose else settings.log_level,
        log_file=settings.log_file,
    )

    now = get_current_utc()
    raw = RawInputs(
        repo=repository,
        date_from=date_from,
        date_to=date_to,
        weeks=weeks,
        months=months,
        years=years,
        include_all=include_all,
    )
    try:
        inputs = process_inputs(raw, now=now, timezone_str=settings.default_timezone)
    except InputError as exc:
        raise click.UsageError(str(exc)) from exc

    usage_hint = click.get_current_context().get_usage() + "\nTry 'contrib-stats -h' for help."

    try:
        pipeline = create_report_pipeline(settings, trace_id=ctx.trace_id)
        report = pipeline.run(
            inputs.owner,
            inputs.repo,
            inputs.date_range,
            include_all=inputs.include_all,
            now=now,
        )
    except Exception as exc:
        return handle_cli_error(ctx, exc, usage_hint=usage_hint)

    return handle_cli_success(
        ctx,
        [summary.to_dict() for summary in report.summaries],
        meta=report.meta(),
        render=lambda: display_report(report),
    )


def format_summaries(summaries: list[ContributorSummary], padding: int = 2) -> list[str]:
    """Format summaries as lines with aligned columns.

    Each column is as wide as its widest cell plus ``padding`` spaces, since
    logins vary a lot in length.
    """
    rows = [
        (
            f"Contributor: {summary.identity}",
            f"Commits: {summary.commits}",
            f"Additions: {summary.additions}",
            f"Deletions: {summary.deletions}",
        )
        for summary in summaries
    ]
    if not rows:
        return []

    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    separator = " " * padding
    return [separator.join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]


def display_report(report: ContributionReport) -> None:
    """Print the report in human-readable form."""
    lines = format_summaries(report.summaries)
    if not lines:
        click.echo(NO_RESULTS)
        return

    for line in lines:
        click.echo(line)


def main(args: list[str] | None = None) -> int:
    if args is None:
        args = sys.argv[1:]

    try:
        return cli.main(args=list(args), prog_name="contrib-stats", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except SystemExit as exc:
        return int(exc.code) if exc.code is not None else 0


if __name__ == "__main__":
    sys.exit(main())

"""Integration tests for CLI output and exit codes.

Tests verify that:
- Stable exit codes (0,2,5,6,7) are returned
- Human output lists contributors with aligned columns
- --json prints a single envelope on stdout
- --trace-id allows request correlation
"""

import json
import os
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from contrib_stats.adapters.github import (
    ContributorRecord,
    GitHubStatsClient,
    SourceUnavailableError,
    StatsNotReadyError,
    WeekBucket,
)
from contrib_stats.cli.cli_common import ExitCode
from contrib_stats.cli.stats import NO_RESULTS, format_summaries, main
from contrib_stats.rollups import ContributorSummary

RECORDS = [
    ContributorRecord(
        "Luke-Davies",
        (
            WeekBucket.from_api({"w": 1529193600, "a": 55, "d": 44, "c": 3}),
            WeekBucket.from_api({"w": 1529798400, "a": 33, "d": 22, "c": 7}),
        ),
    ),
    ContributorRecord(
        "Ron-Swanson",
        (
            WeekBucket.from_api({"w": 1529193600, "a": 555, "d": 444, "c": 40}),
            WeekBucket.from_api({"w": 1529798400, "a": 333, "d": 222, "c": 10}),
        ),
    ),
    ContributorRecord("Leslie-Knope", (WeekBucket.from_api({"w": 1527379200, "a": 1, "d": 1, "c": 1}),)),
]

RANGE_ARGS = ["--from", "2018-06-18", "--to", "2018-06-25"]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch):
    """Run every command without ambient configuration."""
    for var in list(os.environ):
        if var.startswith("CONTRIB_STATS_") or var == "GITHUB_TOKEN":
            monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fetch():
    with patch.object(GitHubStatsClient, "fetch_contributor_stats") as mock_fetch:
        mock_fetch.return_value = RECORDS
        yield mock_fetch


class TestSuccess:
    def test_table_output(self, fetch, capsys):
        exit_code = main([*RANGE_ARGS, "parks/recreation"])

        assert exit_code == ExitCode.SUCCESS
        fetch.assert_called_once_with("parks", "recreation")
        assert capsys.readouterr().out.splitlines() == [
            "Contributor: Luke-Davies  Commits: 7   Additions: 33   Deletions: 22",
            "Contributor: Ron-Swanson  Commits: 10  Additions: 333  Deletions: 222",
        ]

    def test_all_includes_idle_contributors(self, fetch, capsys):
        exit_code = main([*RANGE_ARGS, "--all", "parks/recreation"])

        assert exit_code == ExitCode.SUCCESS
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3
        assert lines[2].startswith("Contributor: Leslie-Knope")
        assert "Commits: 0" in lines[2]

    def test_no_results(self, fetch, capsys):
        fetch.return_value = []

        exit_code = main(["parks/recreation"])

        assert exit_code == ExitCode.SUCCESS
        assert capsys.readouterr().out.strip() == NO_RESULTS

    def test_relative_range(self, fetch, capsys):
        exit_code = main(["--weeks", "4", "--months", "1", "parks/recreation"])

        assert exit_code == ExitCode.SUCCESS
        # Every fixture week is in 2018
        assert capsys.readouterr().out.strip() == NO_RESULTS

    @pytest.mark.parametrize(
        "args",
        [
            ["--years", "3000", "parks/recreation"],
            ["--years", "5000", "parks/recreation"],
            ["--weeks", "200000", "parks/recreation"],
        ],
    )
    def test_relative_range_before_year_one_includes_everything(self, fetch, capsys, args):
        exit_code = main(["--json", *args])

        assert exit_code == ExitCode.SUCCESS
        result = json.loads(capsys.readouterr().out)
        assert result["meta"]["from"] is None
        assert [row["commits"] for row in result["data"]] == [10, 50, 1]

    def test_json_envelope(self, fetch, capsys):
        trace_id = "custom-trace-12345"

        exit_code = main([*RANGE_ARGS, "--json", "--trace-id", trace_id, "parks/recreation"])

        assert exit_code == ExitCode.SUCCESS
        result = json.loads(capsys.readouterr().out)
        assert result["status"] == "success"
        assert result["trace_id"] == trace_id
        assert result["data"] == [
            {"identity": "Luke-Davies", "commits": 7, "additions": 33, "deletions": 22},
            {"identity": "Ron-Swanson", "commits": 10, "additions": 333, "deletions": 222},
        ]
        assert result["meta"] == {
            "repository": "parks/recreation",
            "from": "2018-06-18T00:00:00+00:00",
            "to": "2018-06-25T00:00:00+00:00",
            "include_all": False,
            "total_contributors": 3,
        }

    def test_timezone_from_config(self, fetch, capsys, monkeypatch):
        monkeypatch.setenv("CONTRIB_STATS_TZ", "America/New_York")

        main([*RANGE_ARGS, "--json", "parks/recreation"])

        meta = json.loads(capsys.readouterr().out)["meta"]
        assert meta["from"] == "2018-06-18T04:00:00+00:00"
        assert meta["to"] == "2018-06-25T04:00:00+00:00"

    def test_help(self, capsys):
        exit_code = main(["--help"])

        assert exit_code == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert "OWNER/REPO" in out
        assert "--weeks" in out


class TestValidationErrors:
    @pytest.mark.parametrize(
        "args",
        [
            ["--from", "2018-06-25", "--to", "2018-06-18", "parks/recreation"],
            ["--from", "2018-06-18", "--to", "2018-06-18", "parks/recreation"],
            ["--from", "2999-01-01", "parks/recreation"],
        ],
    )
    def test_invalid_range(self, fetch, capsys, args):
        exit_code = main(args)

        assert exit_code == ExitCode.VALIDATION_ERROR
        fetch.assert_not_called()
        err = capsys.readouterr().err
        assert "invalid date range given" in err
        assert "Usage:" in err

    def test_invalid_range_json(self, fetch, capsys):
        exit_code = main(["--from", "2018-06-25", "--to", "2018-06-18", "--json", "parks/recreation"])

        assert exit_code == ExitCode.VALIDATION_ERROR
        result = json.loads(capsys.readouterr().out)
        assert result["status"] == "error"
        assert "`from` must be before `to`" in result["error"]
        assert result["meta"] == {"exit_code": 2}

    @pytest.mark.parametrize(
        ("args", "message"),
        [
            (["--from", "2018-06-18", "--weeks", "2", "parks/recreation"], "invalid combination"),
            (["--from", "18/06/2018", "parks/recreation"], "invalid `from` value"),
            (["parks"], "invalid repository"),
            (["--weeks", "-1", "parks/recreation"], "--weeks"),
            ([], "OWNER/REPO"),
        ],
    )
    def test_usage_errors(self, fetch, capsys, args, message):
        exit_code = main(args)

        assert exit_code == ExitCode.VALIDATION_ERROR
        fetch.assert_not_called()
        assert message in capsys.readouterr().err

    def test_date_out_of_range(self, fetch, capsys, monkeypatch):
        monkeypatch.setenv("CONTRIB_STATS_TZ", "America/New_York")

        exit_code = main(["--to", "9999-12-31", "parks/recreation"])

        assert exit_code == ExitCode.VALIDATION_ERROR
        fetch.assert_not_called()
        assert "Date is out of range" in capsys.readouterr().err


class TestFailures:
    def test_source_unavailable(self, fetch, capsys):
        fetch.side_effect = SourceUnavailableError("Did not get a successful response from GitHub", status_code=404)

        exit_code = main(["parks/recreation"])

        assert exit_code == ExitCode.SOURCE_ERROR
        assert "❌ Did not get a successful response from GitHub" in capsys.readouterr().err

    def test_stats_not_ready(self, fetch, capsys):
        fetch.side_effect = StatsNotReadyError("statistics are not ready yet", status_code=202)

        exit_code = main(["--json", "parks/recreation"])

        assert exit_code == ExitCode.SOURCE_ERROR
        assert json.loads(capsys.readouterr().out)["status"] == "error"

    def test_malformed_response(self, capsys):
        response = Mock(status_code=200)
        response.json.return_value = {"unexpected": "object"}

        with patch("httpx.Client") as mock_client:
            mock_client.return_value.__enter__.return_value.get.return_value = response
            exit_code = main(["parks/recreation"])

        assert exit_code == ExitCode.SOURCE_ERROR
        assert "expected a list of contributors" in capsys.readouterr().err

    def test_bad_configuration(self, fetch, capsys, monkeypatch):
        monkeypatch.setenv("CONTRIB_STATS_TIMEOUT", "soon")

        exit_code = main(["parks/recreation"])

        assert exit_code == ExitCode.CONFIG_ERROR
        fetch.assert_not_called()
        assert "Invalid configuration" in capsys.readouterr().err

    def test_unexpected_error(self, fetch, capsys):
        fetch.side_effect = RuntimeError("kaboom")

        exit_code = main(["parks/recreation"])

        assert exit_code == ExitCode.UNKNOWN_ERROR
        assert "kaboom" in capsys.readouterr().err


def test_format_summaries_aligns_columns():
    lines = format_summaries(
        [
            ContributorSummary("a", commits=100, additions=1, deletions=1),
            ContributorSummary("longer-login", commits=1, additions=1000, deletions=10),
        ]
    )

    assert lines == [
        "Contributor: a             Commits: 100  Additions: 1     Deletions: 1",
        "Contributor: longer-login  Commits: 1    Additions: 1000  Deletions: 10",
    ]


def test_format_summaries_empty():
    assert format_summaries([]) == []

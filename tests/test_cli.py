"""Tests for argument parsing, configuration and the CLI entry point."""

import json
import logging
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

import gitlab_fingerprinter as cli
from args import parse_args
from cli_config import ConfigError, apply_cli_overrides, configure_runtime, load_config_file
from common.errors import DatasetError, TargetError
from constants import Constants, ExitCodes
from versioning.models import EolRecord, HashDictionaryEntry, TargetObservation, VersionTag


class TestArgs:
    """CLI argument parsing."""

    def test_targets_and_defaults(self):
        ns = parse_args(["gitlab.example.com", "http://git.example.bar"])
        assert ns.targets == ["gitlab.example.com", "http://git.example.bar"]
        assert ns.LOG_LEVEL is None
        assert ns.WORKERS is None
        assert ns.QUIET is False

    def test_requires_target(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_options(self):
        ns = parse_args(["-w", "4", "--freshness-hours", "12", "--timeout", "5", "-o", "out.json", "a"])
        assert (ns.WORKERS, ns.FRESHNESS_HOURS, ns.TIMEOUT, ns.OUTPUT) == (4, 12, 5, "out.json")


class TestConfig:
    """Config file loading and precedence."""

    def test_yaml_section(self, tmp_path, restore_constants):
        path = tmp_path / "config.yml"
        path.write_text(
            "fingerprinter:\n"
            "  freshness_threshold_hours: 48\n"
            "  workers: 3\n"
            "  hashes_url: https://mirror.example/hashes.json\n",
            encoding="utf-8",
        )
        ns = parse_args(["-c", str(path), "a"])
        configure_runtime(ns)
        assert Constants.FRESHNESS_THRESHOLD_HOURS == 48
        assert Constants.DEFAULT_WORKERS == 3
        assert Constants.HASHES_URL == "https://mirror.example/hashes.json"

    def test_cli_wins_over_file(self, tmp_path, restore_constants):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"workers": 3, "request_timeout": 10}), encoding="utf-8")
        ns = parse_args(["-c", str(path), "--workers", "6", "a"])
        configure_runtime(ns)
        assert Constants.DEFAULT_WORKERS == 6
        assert Constants.REQUEST_TIMEOUT == 10

    def test_invalid_values_are_ignored(self, tmp_path, restore_constants):
        path = tmp_path / "config.yml"
        path.write_text("workers: many\nbogus: 1\n", encoding="utf-8")
        configure_runtime(parse_args(["-c", str(path), "a"]))
        assert Constants.DEFAULT_WORKERS == 1

    def test_workers_are_clamped(self, restore_constants):
        apply_cli_overrides(parse_args(["--workers", "1000", "a"]))
        assert Constants.DEFAULT_WORKERS == Constants.MAX_WORKERS

    def test_missing_file(self):
        with pytest.raises(ConfigError):
            load_config_file("/nonexistent/config.yml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("workers: [1,\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config_file(str(path))


HASHES = {
    "1f2e3d": HashDictionaryEntry(build="gitlab-ee", versions=("16.8.5", "16.8.6")),
}
EOL = [EolRecord(cycle="16.8", latest="16.8.6", eol="2099-01-01")]
TAGS = [
    VersionTag(name="v16.8.5-ee", created_at=datetime(2024, 2, 1, tzinfo=timezone.utc)),
    VersionTag(name="v16.8.6-ee", created_at=datetime(2024, 2, 14, tzinfo=timezone.utc)),
]


def _observe(target):
    if target.hostname == "plain.example.com":
        raise TargetError("the outputPath has no mention of 'gitlab' in it",
                          summary="Target is not a GitLab installation")
    return TargetObservation(
        target=target.host,
        build_hash="1f2e3d",
        last_modified=datetime(2024, 2, 20, tzinfo=timezone.utc),
        output_path="gitlab",
    )


@pytest.fixture
def offline(monkeypatch, restore_constants):
    """Replace every network collaborator of the CLI."""
    monkeypatch.setattr(cli, "fetch_hash_dictionary", lambda url: HASHES)
    monkeypatch.setattr(cli, "fetch_eol_records", lambda url: EOL)
    monkeypatch.setattr(cli, "fetch_observation", _observe)
    monkeypatch.setattr(cli, "check_resolves", lambda target: None)
    with patch("repository.gitlab.GitLabClient.get_tags_for_minor", return_value=TAGS) as tags:
        yield tags


class TestMain:
    """End-to-end runs of the entry point without network access."""

    def test_report_on_stdout(self, offline, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main(["gitlab.example.com", "plain.example.com"])
        assert exc.value.code == ExitCodes.SUCCESS.value

        report = json.loads(capsys.readouterr().out)
        assert report["results"] == [{
            "target": "gitlab.example.com",
            "version": "16.8.6",
            "edition": "enterprise",
            "end_of_life": False,
            "outdated": False,
            "warnings": [],
        }]
        assert report["errors"] == [{
            "target": "plain.example.com",
            "error": "Target is not a GitLab installation",
            "details": "the outputPath has no mention of 'gitlab' in it",
        }]
        offline.assert_called_once_with("16.8")

    def test_invalid_target_is_reported(self, offline, capsys):
        with pytest.raises(SystemExit):
            cli.main(["gitlab.example.com:99999"])
        report = json.loads(capsys.readouterr().out)
        assert report["results"] == []
        assert report["errors"][0]["error"] == "The URL 'gitlab.example.com:99999' is not valid"

    def test_output_file_and_quiet(self, offline, tmp_path, capsys):
        out = tmp_path / "report.json"
        with pytest.raises(SystemExit):
            cli.main(["-q", "-o", str(out), "gitlab.example.com"])
        assert capsys.readouterr().out == ""
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["results"][0]["version"] == "16.8.6"

    def test_error_on_warnings(self, offline):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--error-on-warnings", "-q", "plain.example.com"])
        assert exc.value.code == ExitCodes.EXIT_WARNINGS.value

    def test_dataset_failure_aborts_run(self, offline, monkeypatch, capsys):
        def unavailable(url):
            raise DatasetError(f"{url} did not respond with a 200 OK (status 503)")

        observed = []
        monkeypatch.setattr(cli, "fetch_hash_dictionary", unavailable)
        monkeypatch.setattr(cli, "fetch_observation", lambda t: observed.append(t))
        with pytest.raises(SystemExit) as exc:
            cli.main(["gitlab.example.com"])
        assert exc.value.code == ExitCodes.CONNECTION_ERROR.value
        assert observed == []
        assert capsys.readouterr().out == ""

    def test_unresolvable_target_is_labelled_by_host(self, offline, monkeypatch, capsys):
        def unresolvable(target):
            raise TargetError("Name or service not known", summary=f"Could not resolve '{target.raw}'")

        monkeypatch.setattr(cli, "check_resolves", unresolvable)
        with pytest.raises(SystemExit):
            cli.main(["https://gitlab.example.com:8443/some/path"])
        report = json.loads(capsys.readouterr().out)
        assert report["errors"] == [{
            "target": "gitlab.example.com:8443",
            "error": "Could not resolve 'https://gitlab.example.com:8443/some/path'",
            "details": "Name or service not known",
        }]


@pytest.fixture
def root_level():
    """Restore the root logger level changed by main()."""
    root = logging.getLogger()
    saved = root.level
    yield root
    root.setLevel(saved)


class TestLogLevel:
    """Log level selection from the CLI and the environment."""

    def test_environment_variable_is_used(self, offline, monkeypatch, root_level):
        monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "DEBUG")
        with pytest.raises(SystemExit):
            cli.main(["-q", "gitlab.example.com"])
        assert root_level.level == logging.DEBUG

    def test_cli_flag_wins_over_environment(self, offline, monkeypatch, root_level):
        monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "DEBUG")
        with pytest.raises(SystemExit):
            cli.main(["-q", "--loglevel", "WARNING", "gitlab.example.com"])
        assert root_level.level == logging.WARNING

    def test_defaults_to_info(self, offline, monkeypatch, root_level):
        monkeypatch.delenv(Constants.ENV_LOG_LEVEL, raising=False)
        with pytest.raises(SystemExit):
            cli.main(["-q", "gitlab.example.com"])
        assert root_level.level == logging.INFO

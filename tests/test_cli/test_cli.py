"""Tests for the stylecheck CLI commands."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from stylecheck import __version__
from stylecheck.cli.main import cli
from stylecheck.config import CONFIG_FILENAME
from stylecheck.validation import RULES_BY_ID

FIXTURES = Path(__file__).parent.parent / "fixtures"
CLEAN = str(FIXTURES / "clean.scss")
MESSY = str(FIXTURES / "messy.scss")
BROKEN = str(FIXTURES / "broken.scss")


@pytest.fixture(autouse=True)
def _workdir(tmp_path, monkeypatch):
    """Run every command from an empty directory so no config file is picked up."""
    monkeypatch.chdir(tmp_path)


def _invoke(*args: str):
    return CliRunner().invoke(cli, ["check", *args])


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


class TestCLIGroup:
    def test_help(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "check" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_check_help_shows_options(self) -> None:
        result = _invoke("--help")
        assert result.exit_code == 0
        for option in ("--format", "--config", "--severity", "--tab-width", "--jobs"):
            assert option in result.output


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


class TestCheckCommand:
    def test_clean_file(self) -> None:
        result = _invoke(CLEAN)
        assert result.exit_code == 0
        assert "Summary: 0 error(s), 0 warning(s), 0 failed file(s), 1 file(s) checked" in result.output

    def test_messy_file(self) -> None:
        result = _invoke(MESSY)
        assert result.exit_code == 1
        assert f"{MESSY}:1:8: [SpaceBeforeBrace]" in result.output
        assert f"{MESSY}:6:15: [QuoteStyle]" in result.output

    def test_broken_file(self) -> None:
        result = _invoke(BROKEN)
        assert result.exit_code == 1
        assert f"{BROKEN}:1:9: FATAL [ParseError:UnbalancedBraces]" in result.output

    def test_broken_file_does_not_hide_others(self) -> None:
        result = _invoke(BROKEN, MESSY, CLEAN)
        assert result.exit_code == 1
        assert "FATAL" in result.output
        assert "[NamingConvention]" in result.output
        assert "1 failed file(s), 2 file(s) checked" in result.output

    def test_directory(self) -> None:
        result = _invoke(str(FIXTURES))
        assert result.exit_code == 1
        assert "2 file(s) checked" in result.output

    def test_missing_path_only(self, tmp_path) -> None:
        result = _invoke(str(tmp_path / "gone.scss"))
        assert result.exit_code == 2
        assert "FATAL [ReadError]" in result.output

    def test_no_paths_is_a_usage_error(self) -> None:
        result = _invoke()
        assert result.exit_code == 2
        assert "Give at least one file or directory" in result.output

    def test_list_rules(self) -> None:
        result = _invoke("--list-rules")
        assert result.exit_code == 0
        assert "ShorthandZeroUnit" in result.output
        assert len(result.output.splitlines()) == 11


class TestCheckOptions:
    def test_structured_format(self) -> None:
        result = _invoke("--format", "structured", MESSY, BROKEN)
        records = [json.loads(line) for line in result.output.splitlines()]
        assert result.exit_code == 1
        assert records[-1]["type"] == "summary"
        assert records[-1]["failures"] == 1
        assert {r["type"] for r in records} == {"violation", "failure", "summary"}

    def test_severity_override(self) -> None:
        result = _invoke("--enable", "QuoteStyle", "--severity", "QuoteStyle=warning", MESSY)
        assert result.exit_code == 0
        assert "0 error(s), 1 warning(s)" in result.output

    def test_bad_severity_syntax(self) -> None:
        result = _invoke("--severity", "QuoteStyle", CLEAN)
        assert result.exit_code == 2
        assert "RULE=LEVEL" in result.output

    def test_unknown_rule(self) -> None:
        result = _invoke("--disable", "NoSuchRule", CLEAN)
        assert result.exit_code == 2
        assert "NoSuchRule" in result.output

    def test_enable_and_disable(self) -> None:
        result = _invoke("--enable", "QuoteStyle", "--enable", "NamingConvention",
                         "--disable", "NamingConvention", MESSY)
        assert "[QuoteStyle]" in result.output
        assert "[NamingConvention]" not in result.output

    def test_config_file(self, tmp_path) -> None:
        config = tmp_path / "style.json"
        config.write_text(json.dumps({"enable": ["ColorCaseAndShorthand"]}), encoding="utf-8")
        result = _invoke("--config", str(config), MESSY)
        assert result.exit_code == 1
        assert "1 error(s)" in result.output
        assert "[ColorCaseAndShorthand]" in result.output

    def test_config_file_in_working_directory(self, tmp_path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(
            json.dumps({"severity": {rule: "warning" for rule in RULES_BY_ID}}),
            encoding="utf-8",
        )
        result = _invoke(MESSY)
        assert result.exit_code == 0
        assert "0 error(s)" in result.output

    def test_invalid_config_file(self, tmp_path) -> None:
        config = tmp_path / "style.json"
        config.write_text("{", encoding="utf-8")
        result = _invoke("--config", str(config), CLEAN)
        assert result.exit_code == 2
        assert "Cannot read configuration" in result.output

    def test_show_source(self) -> None:
        result = _invoke("--enable", "QuoteStyle", "--show-source", "--tab-width", "2", MESSY)
        lines = result.output.splitlines()
        assert lines[1] == "      font-family: 'Arial'"
        assert lines[2] == " " * 19 + "^"

    def test_jobs(self) -> None:
        assert _invoke("--jobs", "1", MESSY).output == _invoke("-j", "4", MESSY).output

    def test_verbose_logs_progress(self, caplog) -> None:
        with caplog.at_level("DEBUG", logger="stylecheck"):
            result = _invoke("-v", CLEAN)
        assert result.exit_code == 0
        assert any("Checking" in r.getMessage() for r in caplog.records)

"""
Integration tests for the evsifter CLI.

Tests cover:
- check command exit codes (accept, reject, error)
- JSON and table output
- Load failures
- --version
"""

import json
import time
from pathlib import Path

import pytest
from typer.testing import CliRunner

from evsifter import __version__
from evsifter.cli import EXIT_ACCEPTED, EXIT_ERROR, EXIT_REJECTED, app


runner = CliRunner()


@pytest.fixture
def rules_file(tmp_path: Path, sample_rules_yaml: str) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(sample_rules_yaml)
    return path


def write_event(tmp_path: Path, **fields) -> Path:
    data = {
        "id": "e" * 64,
        "pubkey": "a" * 64,
        "created_at": int(time.time()),
        "kind": 1,
        "tags": [],
        "content": "hello",
        "sig": "f" * 128,
    }
    data.update(fields)
    path = tmp_path / "event.json"
    path.write_text(json.dumps(data))
    return path


class TestCheckCommand:
    """Tests for `evsifter check`."""

    def test_all_accept(self, tmp_path: Path, rules_file: Path) -> None:
        event = write_event(tmp_path)
        result = runner.invoke(app, ["check", str(rules_file), str(event)])
        assert result.exit_code == EXIT_ACCEPTED
        assert "accept" in result.stdout

    def test_reject_exit_code(self, tmp_path: Path, rules_file: Path) -> None:
        event = write_event(tmp_path, pubkey="bad")
        result = runner.invoke(app, ["check", str(rules_file), str(event)])
        assert result.exit_code == EXIT_REJECTED
        assert "reject" in result.stdout

    def test_json_output(self, tmp_path: Path, rules_file: Path) -> None:
        event = write_event(tmp_path, kind=1, tags=[["t", "spam"]])
        result = runner.invoke(app, ["check", str(rules_file), str(event), "--json"])
        assert result.exit_code == EXIT_REJECTED

        data = json.loads(result.stdout)
        assert len(data) == 5
        assert [d["action"] for d in data] == ["accept", "accept", "accept", "reject", "accept"]
        assert data[3]["sifter"] == "matches_filters"
        assert data[3]["mode"] == "deny"
        assert data[3]["message"] == "blocked: event is denied by filters"

    def test_old_event_rejected_by_window(self, tmp_path: Path, rules_file: Path) -> None:
        event = write_event(tmp_path, created_at=int(time.time()) - 7200)
        result = runner.invoke(app, ["check", str(rules_file), str(event), "--json"])
        data = json.loads(result.stdout)
        assert data[4]["action"] == "reject"
        assert data[4]["message"].startswith("invalid: event timestamp is out of the range")

    def test_bracketed_message_shown_verbatim(self, tmp_path: Path) -> None:
        """Rejection reasons are printed as text, not rich markup."""
        rules = tmp_path / "rules.yaml"
        rules.write_text(
            "rules:\n"
            "  - type: kind_list\n"
            "    mode: deny\n"
            "    kinds: [1]\n"
            "    reject_message: '[spam] kind one blocked'\n"
        )
        event = write_event(tmp_path, kind=1)
        result = runner.invoke(app, ["check", str(rules), str(event)])
        assert result.exit_code == EXIT_REJECTED
        assert "[spam] kind one blocked" in result.stdout

    def test_invalid_rules(self, tmp_path: Path) -> None:
        rules = tmp_path / "rules.yaml"
        rules.write_text("rules: []")
        event = write_event(tmp_path)
        result = runner.invoke(app, ["check", str(rules), str(event), "--json"])
        assert result.exit_code == EXIT_ERROR
        data = json.loads(result.stdout)
        assert data["error"]["error_type"] == "RuleConfigError"

    def test_invalid_event(self, tmp_path: Path, rules_file: Path) -> None:
        event = tmp_path / "event.json"
        event.write_text("{}")
        result = runner.invoke(app, ["check", str(rules_file), str(event)])
        assert result.exit_code == EXIT_ERROR

    def test_missing_file(self, tmp_path: Path, rules_file: Path) -> None:
        result = runner.invoke(app, ["check", str(rules_file), str(tmp_path / "missing.json")])
        assert result.exit_code != 0


class TestVersion:
    """Tests for --version."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

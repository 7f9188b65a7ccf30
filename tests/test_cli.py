"""Tests for the meeting-tasks command-line entry point."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from meeting_tasks.cli import main


def test_extracts_from_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("Priya to send the deck by Friday.\n", encoding="utf-8")

    assert main([str(notes), "--provider", "heuristic", "--today", "2025-03-12"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["metadata"]["path"] == "heuristic"
    [task] = data["tasks"]
    assert task["title"] == "Send the deck"
    assert task["assignee"] == "Priya"
    assert task["due_date"] == "2025-03-14"


def test_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("@john review the PR"))

    assert main(["-", "--provider", "heuristic"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["tasks"][0]["assignee"] == "john"


def test_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path / "missing.txt")]) == 1
    assert "Could not read" in capsys.readouterr().err


def test_invalid_today_rejected() -> None:
    with pytest.raises(SystemExit):
        main(["-", "--today", "next week"])

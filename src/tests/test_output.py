from __future__ import annotations

import json

import pytest

from apimbackup.output import print_json_document, print_status


def test_info__goes_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    print_status("Authenticating...")
    captured = capsys.readouterr()
    assert "• Authenticating..." in captured.out
    assert captured.err == ""


def test_error__goes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    print_status("boom", "error")
    captured = capsys.readouterr()
    assert "✖ boom" in captured.err
    assert captured.out == ""


def test_stderr_flag__redirects_progress(capsys: pytest.CaptureFixture[str]) -> None:
    print_status("done", "success", stderr=True)
    captured = capsys.readouterr()
    assert "✔ done" in captured.err


def test_brackets_and_long_lines__printed_verbatim(
    capsys: pytest.CaptureFixture[str],
) -> None:
    message = "[bold]not markup[/bold] :x: " + "y" * 200
    print_status(message, "warning")
    assert message in capsys.readouterr().out


def test_json_document__parses(capsys: pytest.CaptureFixture[str]) -> None:
    print_json_document({"status": "InProgress", "operationId": None})
    assert json.loads(capsys.readouterr().out) == {
        "status": "InProgress",
        "operationId": None,
    }

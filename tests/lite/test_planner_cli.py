"""Tests for the planner_lite command-line entry point."""

import json

import pytest

from planner_lite.__main__ import main


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every CLI test from an empty directory (no planner.yaml)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_expand_weekdays_prints_occurrences(capsys):
    code = main(
        [
            "expand",
            "--title",
            "Standup",
            "--date",
            "2024-01-01",
            "--start",
            "09:00",
            "--end",
            "09:15",
            "--repeat",
            "weekdays",
        ]
    )

    assert code == 0
    occurrences = json.loads(capsys.readouterr().out)
    assert len(occurrences) == 22
    assert occurrences[0]["start"] == "2024-01-01T09:00:00"
    assert occurrences[0]["end"] == "2024-01-01T09:15:00"


def test_expand_blank_title_is_rejected(capsys):
    code = main(["expand", "--title", "   ", "--date", "2024-01-01"])

    assert code == 2
    assert "required" in capsys.readouterr().err


def test_expand_rejects_unknown_rule():
    with pytest.raises(SystemExit):
        main(["expand", "--title", "x", "--repeat", "fortnightly"])


def test_add_uses_in_memory_store_without_project(capsys):
    code = main(["add", "--user", "u1", "--title", "Review", "--date", "2024-06-01", "--repeat", "biweekly"])

    assert code == 0
    events = json.loads(capsys.readouterr().out)
    assert [e["start"][:10] for e in events][:3] == ["2024-06-01", "2024-06-15", "2024-06-29"]
    assert len(events) == 8
    assert all(e["id"] for e in events)


def test_navigate_prints_title_after_each_step(capsys):
    code = main(["navigate", "--view", "month", "--start-date", "2024-01-15", "next", "2024-03", "prev", "day"])

    assert code == 0
    assert capsys.readouterr().out.splitlines() == [
        "January 2024",
        "February 2024",
        "March 2024",
        "February 2024",
        "February 2024",
    ]


def test_navigate_rejects_bad_month(capsys):
    code = main(["navigate", "--start-date", "2024-01-15", "march"])

    assert code == 2
    assert "YYYY-MM" in capsys.readouterr().err


def test_bad_config_file_is_reported(isolated_cwd, capsys):
    (isolated_cwd / "bad.yaml").write_text("- not\n- a mapping\n", encoding="utf-8")

    code = main(["--config", str(isolated_cwd / "bad.yaml"), "navigate"])

    assert code == 2
    assert "mapping" in capsys.readouterr().err


def test_dotenv_in_working_directory_is_applied(isolated_cwd, capsys):
    (isolated_cwd / ".env").write_text("export PLANNER_DEFAULT_VIEW='month'\n", encoding="utf-8")

    code = main(["navigate", "--start-date", "2024-01-15", "next"])

    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["January 2024", "February 2024"]

"""Tests for the command line entry point."""

import json
import sys

import pytest

from gavel.__main__ import main


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["gavel", *args])
    main()


class TestSimulate:
    """Tests for headless simulation runs."""

    def test_prints_results(self, monkeypatch, capsys):
        run(monkeypatch, "--simulate", "--players", "6", "--seed", "3", "--team", "mi")
        out = capsys.readouterr().out
        assert "Players auctioned: 6" in out
        assert "Mumbai Indians" in out

    def test_exports(self, monkeypatch, tmp_path):
        json_path = tmp_path / "log.json"
        csv_path = tmp_path / "log.csv"
        run(
            monkeypatch, "--simulate", "--players", "4", "--seed", "8",
            "--export-json", str(json_path), "--export-csv", str(csv_path),
        )
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["total_players"] == 4
        assert csv_path.read_text(encoding="utf-8").startswith("Player Name")

    def test_unknown_team(self, monkeypatch):
        with pytest.raises(SystemExit) as exc:
            run(monkeypatch, "--simulate", "--team", "xyz")
        assert exc.value.code == 2

    def test_no_mode_prints_help(self, monkeypatch, capsys):
        run(monkeypatch)
        assert "usage: gavel" in capsys.readouterr().out

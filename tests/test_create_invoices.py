"""Tests for the invoicing CLI entry point."""

import json

import pytest

from conftest import FIXTURES_DIR
from scripts import create_invoices


def test_no_mode_prints_help(capsys):
    assert create_invoices.main([]) == 0
    assert "--create-invoice" in capsys.readouterr().out


def test_month_and_year_are_exclusive():
    with pytest.raises(SystemExit):
        create_invoices.main(["--status", "--month", "2024-01", "--year", "2024"])


def test_invalid_month_is_reported(tmp_path, monkeypatch, capsys):
    path = tmp_path / "config.json"
    path.write_text("{}", encoding="utf-8")
    monkeypatch.setattr(create_invoices, "APP_CONFIG_FILE", path)

    assert create_invoices.main(["--status", "--test", "--month", "2024-13"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_status_from_local_file(tmp_path, monkeypatch, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"defaultFee": 50}), encoding="utf-8")
    monkeypatch.setattr(create_invoices, "APP_CONFIG_FILE", path)

    assert create_invoices.main(["--status", "--test", str(FIXTURES_DIR / "timesheet.csv")]) == 0
    out = capsys.readouterr().out
    assert out.startswith("test   - Total: €")
    assert "##########" in out


def test_missing_config_is_reported(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(create_invoices, "APP_CONFIG_FILE", tmp_path / "config.json")
    assert create_invoices.main(["--status", "--test"]) == 1
    assert "Config file not found" in capsys.readouterr().err


def test_year_out_of_range_is_reported(tmp_path, monkeypatch, capsys):
    path = tmp_path / "config.json"
    path.write_text("{}", encoding="utf-8")
    monkeypatch.setattr(create_invoices, "APP_CONFIG_FILE", path)

    assert create_invoices.main(["--status", "--test", "--year", "9999"]) == 1
    assert "Invalid year 9999" in capsys.readouterr().err

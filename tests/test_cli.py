from __future__ import annotations

import json

import pytest

from finance_importer import cli

CSV = "Date,Desc,Amount\n2024-01-15,Salary,3000.00\n2024-01-20,Grocery Store,-45.50\n"

BACKUP = {
    "version": 1,
    "categories": [{"id": "c1", "name": "Food", "type": "EXPENSE", "subcategories": []}],
    "transactions": [
        {
            "id": "t1",
            "date": "2024-01-01T12:00:00.000Z",
            "amount": 5,
            "description": "Bread",
            "type": "EXPENSE",
            "categoryId": "c1",
        }
    ],
}


@pytest.fixture(autouse=True)
def _no_logging_config(monkeypatch):
    """Keep the CLI from installing file handlers during tests."""
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **k: None)


def _read_ledger(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_csv_import_writes_ledger(tmp_path, capsys):
    # Arrange
    src = tmp_path / "bank.csv"
    src.write_text(CSV, encoding="utf-8")
    ledger = tmp_path / "ledger.json"

    # Act
    rc = cli.main([str(src), "--ledger", str(ledger)])

    # Assert
    out = capsys.readouterr().out
    assert rc == cli.EXIT_OK
    assert "Imported 2 transactions" in out
    data = _read_ledger(ledger)
    assert [t["description"] for t in data["transactions"]] == ["Salary", "Grocery Store"]
    assert {c["name"] for c in data["categories"]} == {"Salary", "Food"}


def test_second_append_run_does_not_duplicate(tmp_path):
    """Re-importing the same statement into a populated ledger adds nothing."""
    src = tmp_path / "bank.csv"
    src.write_text(CSV, encoding="utf-8")
    ledger = tmp_path / "ledger.json"

    assert cli.main([str(src), "--ledger", str(ledger)]) == cli.EXIT_OK
    assert cli.main([str(src), "--ledger", str(ledger), "--mode", "append"]) == cli.EXIT_OK

    assert len(_read_ledger(ledger)["transactions"]) == 2


def test_output_flag_leaves_ledger_untouched(tmp_path):
    src = tmp_path / "bank.csv"
    src.write_text(CSV, encoding="utf-8")
    out = tmp_path / "out" / "new.json"

    rc = cli.main([str(src), "--output", str(out)])

    assert rc == cli.EXIT_OK
    assert len(_read_ledger(out)["transactions"]) == 2


def test_unsupported_extension_is_a_file_error(tmp_path, capsys):
    src = tmp_path / "notes.txt"
    src.write_text("hello", encoding="utf-8")

    rc = cli.main([str(src)])

    assert rc == cli.EXIT_FILE_ERROR
    assert "Import failed" in capsys.readouterr().out


def test_backup_requires_confirmation(tmp_path, capsys):
    """A backup is never restored without --yes."""
    src = tmp_path / "backup.json"
    src.write_text(json.dumps(BACKUP), encoding="utf-8")
    ledger = tmp_path / "ledger.json"

    rc = cli.main([str(src), "--ledger", str(ledger)])

    assert rc == cli.EXIT_NOT_APPLIED
    assert "--yes" in capsys.readouterr().out
    assert not ledger.exists()


def test_backup_with_yes_replaces_ledger(tmp_path):
    # Arrange
    csv_src = tmp_path / "bank.csv"
    csv_src.write_text(CSV, encoding="utf-8")
    ledger = tmp_path / "ledger.json"
    cli.main([str(csv_src), "--ledger", str(ledger)])
    src = tmp_path / "backup.json"
    src.write_text(json.dumps(BACKUP), encoding="utf-8")

    # Act
    rc = cli.main([str(src), "--ledger", str(ledger), "--yes"])

    # Assert
    data = _read_ledger(ledger)
    assert rc == cli.EXIT_OK
    assert [t["id"] for t in data["transactions"]] == ["t1"]
    assert [c["id"] for c in data["categories"]] == ["c1"]


def test_missing_input_exits(tmp_path):
    with pytest.raises(SystemExit):
        cli.main([str(tmp_path / "nope.csv")])


@pytest.mark.parametrize("bad", ["0", "0=bogus", "x=date"])
def test_bad_map_flag_is_a_usage_error(tmp_path, bad):
    src = tmp_path / "bank.csv"
    src.write_text(CSV, encoding="utf-8")

    with pytest.raises(SystemExit) as ei:
        cli.main([str(src), "--map", bad])

    assert ei.value.code == 2


def test_parse_mapping():
    from finance_importer.data_model import ColumnRole

    assert cli.parse_mapping(["0=Date", "2= amount"]) == {0: ColumnRole.DATE, 2: ColumnRole.AMOUNT}
    assert cli.parse_mapping(None) == {}

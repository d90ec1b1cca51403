"""Tests for the backup command line tool."""

import json

import backup_manager


def _run(tmp_path, *argv):
    return backup_manager.main(["--db-path", str(tmp_path / "cli.sqlite"), *argv])


def test_no_command_prints_help(tmp_path, capsys):
    assert _run(tmp_path) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_snapshot_then_list(tmp_path, capsys):
    assert _run(tmp_path, "snapshot") == 0
    assert _run(tmp_path, "snapshot") == 0
    capsys.readouterr()

    assert _run(tmp_path, "list") == 0
    out = capsys.readouterr().out
    assert "2 snapshot(s)" in out
    assert out.index("#2") < out.index("#1")


def test_history_size_option(tmp_path, capsys):
    for _ in range(4):
        _run(tmp_path, "--history-size", "2", "snapshot")
    capsys.readouterr()

    _run(tmp_path, "list")
    assert "2 snapshot(s)" in capsys.readouterr().out


def test_show_snapshot(tmp_path, capsys):
    _run(tmp_path, "snapshot")
    capsys.readouterr()

    assert _run(tmp_path, "show", "1") == 0
    snapshot = json.loads(capsys.readouterr().out)
    assert snapshot["reason"] == "manual"
    assert snapshot["data"]["orders"] == []

    assert _run(tmp_path, "show", "99") == 1


def test_export_writes_document(tmp_path, capsys):
    output = tmp_path / "export.json"
    assert _run(tmp_path, "export", str(output)) == 0

    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["stats"]["totalOrders"] == 0
    assert document["config"]["prizeDigits"] == "4"
    assert "exported" in capsys.readouterr().out.lower()

"""Tests for utils/output.py: JSON/CSV output and result flattening."""
import json

from finnotech.utils.output import OutputFormat, print_csv, print_json, print_output, result_rows


# ── result_rows ──────────────────────────────────────────────────────

def test_result_rows_object():
    body = {"trackId": "t1", "status": "DONE", "result": {"IBAN": "IR01", "bankName": "X"}}
    assert result_rows(body) == [{"trackId": "t1", "status": "DONE", "IBAN": "IR01", "bankName": "X"}]


def test_result_rows_list():
    body = {"trackId": "t1", "result": [{"amount": 1}, {"amount": 2}]}
    rows = result_rows(body)
    assert [r["amount"] for r in rows] == [1, 2]
    assert all(r["trackId"] == "t1" for r in rows)


def test_result_rows_scalar_result():
    assert result_rows({"result": 42}) == [{"value": 42}]


def test_result_rows_no_envelope():
    assert result_rows({"a": 1}) == [{"a": 1}]


def test_result_rows_non_dict():
    assert result_rows("csv text") == [{"value": "csv text"}]


# ── print_json ───────────────────────────────────────────────────────

def test_print_json_keeps_unicode(capsys):
    print_json({"name": "علی"})
    out = capsys.readouterr().out
    assert "علی" in out
    assert json.loads(out) == {"name": "علی"}


def test_print_output_json(capsys):
    print_output([{"id": "1"}], OutputFormat.JSON)
    assert json.loads(capsys.readouterr().out) == [{"id": "1"}]


# ── print_csv ────────────────────────────────────────────────────────

def test_print_csv_columns(capsys):
    print_csv([{"a": 1, "b": 2, "c": 3}], columns=["a", "c"])
    assert capsys.readouterr().out == "a,c\n1,3\n"


def test_print_csv_dict(capsys):
    print_csv({"a": 1})
    assert capsys.readouterr().out == "a\n1\n"


def test_print_csv_empty(capsys):
    print_csv([])
    assert capsys.readouterr().out == ""

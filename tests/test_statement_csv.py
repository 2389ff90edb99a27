from __future__ import annotations

from pathlib import Path

import pytest

from ledger_inbox.backend.statement_csv import parse_amount, parse_statement
from ledger_inbox.errors import StatementParseError

DATA_DIR = Path(__file__).parent / "data"


def test_single_amount_column_export():
    rows = parse_statement((DATA_DIR / "checking_export.csv").read_bytes())

    assert rows == [
        {"date": "2025-01-04", "description": "BLUE BOTTLE COFFEE #12", "amount": -8.5},
        {"date": "2025-01-04", "description": "AMAZON WEB SERVICES", "amount": -32.25},
        {"date": "2025-01-05", "description": "PAYROLL ACME CORP", "amount": 2500.0},
        {"date": "2025-01-06", "description": "WHOLE FOODS MARKET", "amount": -61.1},
    ]


def test_debit_credit_columns_and_dateless_rows_skipped():
    rows = parse_statement((DATA_DIR / "card_debit_credit.csv").read_bytes())

    assert [(r["description"], r["amount"]) for r in rows] == [
        ("UNITED AIRLINES", -412.33),
        ("REFUND UNITED AIRLINES", 100.0),
        ("BLUE BOTTLE COFFEE", -4.25),
    ]


def test_bom_and_header_case_are_tolerated():
    data = "\ufeffTRANSACTION DATE,Memo,Transaction Amount\n2025-03-01,  Rent   March ,-1800\n"
    rows = parse_statement(data.encode("utf-8"))
    assert rows == [{"date": "2025-03-01", "description": "Rent March", "amount": -1800.0}]


def test_blank_description_and_bad_amount():
    rows = parse_statement(b"date,description,amount\n2025-03-02,,abc\n")
    assert rows == [{"date": "2025-03-02", "description": "Transaction", "amount": 0.0}]


def test_unknown_date_format_passes_through():
    rows = parse_statement(b"date,description,amount\nMar 3 2025,Coffee,-3\n")
    assert rows[0]["date"] == "Mar 3 2025"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", 0.0),
        ("12.50", 12.5),
        ("-12.50", -12.5),
        ("(12.50)", -12.5),
        ("$1,234.56", 1234.56),
        ("($1,234.56)", -1234.56),
    ],
)
def test_parse_amount(raw: str, expected: float):
    assert parse_amount(raw) == pytest.approx(expected)


def test_parse_amount_rejects_garbage():
    with pytest.raises(ValueError, match="Failed to parse amount"):
        parse_amount("twelve")


@pytest.mark.parametrize(
    ("data", "message"),
    [
        (b"", "missing header"),
        (b"description,amount\nCoffee,-3\n", "missing date"),
        (b"date,amount\n2025-01-01,-3\n", "missing description"),
        (b"date,description,amount\n", "zero rows"),
        (b"\xff\xfe\x00", "not UTF-8"),
    ],
)
def test_unusable_statements_raise(data: bytes, message: str):
    with pytest.raises(StatementParseError, match=message):
        parse_statement(data)

"""Read generic bank-statement CSV bytes into staged rows.

Header names are matched case-insensitively against small alias lists:

- date: ``date``, ``transaction date``, ``posted date``
- description: ``description``, ``memo``, ``details``, ``name``,
  ``transaction description``
- amount: ``amount``, ``transaction amount``; when absent, ``credit - debit``
  from separate ``debit``/``credit`` columns.

Output rows are plain dicts with keys ``date``, ``description``, ``amount``.
Rows without a date are skipped. Amount cells accept ``$``, thousands
separators and accounting parentheses (``(12.50)`` is ``-12.50``).
"""

from __future__ import annotations

import csv
import io
import re
from collections.abc import Iterator, Sequence
from datetime import datetime
from typing import Any

from ..errors import StatementParseError
from ..logging_setup import get_logger

_logger = get_logger("ledger_inbox.backend.statement_csv")

DATE_HEADERS = ("date", "transaction date", "posted date")
DESCRIPTION_HEADERS = ("description", "memo", "details", "name", "transaction description")
AMOUNT_HEADERS = ("amount", "transaction amount")

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y")


def _find_index(headers: Sequence[str], candidates: Sequence[str]) -> int | None:
    for candidate in candidates:
        if candidate in headers:
            return headers.index(candidate)
    return None


def _cell(row: Sequence[str], idx: int | None) -> str:
    if idx is None or idx >= len(row):
        return ""
    return row[idx].strip()


def _clean_text(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def _normalize_date(value: str) -> str:
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    # Unknown formats pass through unchanged; the inbox treats dates as opaque strings.
    return value


def parse_amount(raw: str) -> float:
    """Parse a statement amount cell. Empty cells are ``0.0``."""

    s = raw.strip()
    if not s:
        return 0.0
    cleaned = s.replace(",", "").replace("$", "").strip()
    negative = (cleaned.startswith("(") and cleaned.endswith(")")) or cleaned.startswith("-")
    cleaned = cleaned.strip("()").lstrip("-").strip()
    try:
        value = float(cleaned)
    except ValueError as e:
        raise ValueError(f"Failed to parse amount: {s}") from e
    return -value if negative else value


def _amount_or_zero(raw: str, line_no: int) -> float:
    try:
        return parse_amount(raw)
    except ValueError as e:
        _logger.warning("line %d: %s; using 0", line_no, e)
        return 0.0


def iter_rows(text: str) -> Iterator[dict[str, Any]]:
    reader = csv.reader(io.StringIO(text))
    try:
        header_row = next(reader)
    except StopIteration:
        raise StatementParseError("CSV missing header row") from None

    headers = [h.strip().lower() for h in header_row]
    date_idx = _find_index(headers, DATE_HEADERS)
    if date_idx is None:
        raise StatementParseError("CSV missing date column")
    desc_idx = _find_index(headers, DESCRIPTION_HEADERS)
    if desc_idx is None:
        raise StatementParseError("CSV missing description column")
    amount_idx = _find_index(headers, AMOUNT_HEADERS)
    debit_idx = _find_index(headers, ("debit",))
    credit_idx = _find_index(headers, ("credit",))

    for line_no, row in enumerate(reader, start=2):
        date_raw = _cell(row, date_idx)
        if not date_raw:
            continue
        if amount_idx is not None:
            amount = _amount_or_zero(_cell(row, amount_idx), line_no)
        else:
            debit = _amount_or_zero(_cell(row, debit_idx), line_no)
            credit = _amount_or_zero(_cell(row, credit_idx), line_no)
            amount = credit - debit
        yield {
            "date": _normalize_date(date_raw),
            "description": _clean_text(_cell(row, desc_idx)) or "Transaction",
            "amount": amount,
        }


def parse_statement(data: bytes) -> list[dict[str, Any]]:
    """Decode ``data`` (UTF-8, BOM tolerated) and return its rows.

    Raises :class:`~ledger_inbox.errors.StatementParseError` when the header is
    unusable or no rows remain.
    """

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise StatementParseError(f"statement is not UTF-8 text: {e}") from e
    try:
        rows = list(iter_rows(text))
    except csv.Error as e:
        raise StatementParseError(f"Failed to parse CSV: {e}") from e
    if not rows:
        raise StatementParseError("CSV produced zero rows")
    return rows


__all__ = ["parse_amount", "parse_statement"]

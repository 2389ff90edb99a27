# ruff: noqa: I001
"""Reference local backend: staged inbox and permanent ledger in SQL.

``LedgerBackend`` answers the six backend operations consumed by the bridge
(``get_inbox``, ``import_csv``, ``set_inbox_category``, ``commit_inbox``,
``get_summary``, ``get_networth_curve``). Each operation runs in its own
transaction via :func:`db.client.session_scope`; results are plain
JSON-serializable values in the camelCase wire shape.

Failures raise :class:`~ledger_inbox.errors.BackendCallError` (or
:class:`~ledger_inbox.errors.StatementParseError` for unreadable uploads);
the bridge turns either into a ``BackendError`` result.
"""

from __future__ import annotations

import re
import threading
import uuid
from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from db.client import session_scope
from db.models.ledger import Budget, InboxRow, LedgerTransaction
from ..errors import BackendCallError
from ..logging_setup import get_logger
from ..models import (
    BudgetUsage,
    CategoryAmount,
    CommitResult,
    Flow,
    InboxItem,
    NetWorthPoint,
    SetCategoryAck,
    SummaryResponse,
)
from . import categorization
from .statement_csv import parse_statement

_logger = get_logger("ledger_inbox.backend.service")

_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")

DEFAULT_BUDGETS: tuple[tuple[str, float], ...] = (
    ("Housing", 1800.0),
    ("Groceries", 700.0),
    ("Dining", 350.0),
    ("Transportation", 250.0),
    ("Discretionary", 500.0),
)


def _to_item(row: InboxRow) -> InboxItem:
    return InboxItem(
        temp_id=row.temp_id,
        date=row.date,
        description=row.description,
        amount=row.amount,
        flow=Flow(row.flow),
        suggested_category=row.suggested_category,
    )


def _month_starts(today: date, count: int = 12) -> list[date]:
    """First day of the ``count`` months ending with ``today``'s month, oldest first."""

    year, month = today.year, today.month
    out: list[date] = []
    for _ in range(count):
        out.append(date(year, month, 1))
        month -= 1
        if month == 0:
            month, year = 12, year - 1
    out.reverse()
    return out


class LedgerBackend:
    """Synchronous backend over the database at ``database_url``.

    Nothing touches the database until the first operation, which creates the
    schema and seeds default budgets. Connection or driver problems therefore
    surface from that call (and through the bridge as a backend error), not
    from construction.
    """

    def __init__(
        self,
        *,
        database_url: str,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._database_url = database_url
        self._today = today
        self._ready = False
        self._ready_lock = threading.Lock()

    # -- plumbing -----------------------------------------------------------

    def _session(self):
        if not self._ready:
            with self._ready_lock:
                if not self._ready:
                    self._seed_budgets()
                    self._ready = True
        return session_scope(database_url=self._database_url)

    def _seed_budgets(self) -> None:
        with session_scope(database_url=self._database_url) as session:
            existing = session.scalar(select(func.count()).select_from(Budget))
            if existing:
                return
            session.add_all(Budget(category=c, cap=cap) for c, cap in DEFAULT_BUDGETS)

    def dispatch(self, command: str, payload: Mapping[str, Any] | None) -> Any:
        """Route a bridge command to its handler."""

        handlers: dict[str, Callable[[Mapping[str, Any]], Any]] = {
            "get_inbox": lambda _p: [i.to_wire() for i in self.get_inbox()],
            "import_csv": lambda p: [
                i.to_wire() for i in self.import_csv(_require_bytes(p), str(p.get("name") or ""))
            ],
            "set_inbox_category": lambda p: self.set_inbox_category(
                _require_str(p, "tempId"), _require_str(p, "category")
            ).to_wire(),
            "commit_inbox": lambda _p: self.commit_inbox().to_wire(),
            "get_summary": lambda p: self.get_summary(_require_str(p, "month")).to_wire(),
            "get_networth_curve": lambda _p: [p.to_wire() for p in self.get_networth_curve()],
        }
        handler = handlers.get(command)
        if handler is None:
            raise BackendCallError(command, "unknown command")
        return handler(payload or {})

    # -- inbox --------------------------------------------------------------

    @staticmethod
    def _batch(session: Session) -> list[InboxItem]:
        rows = session.scalars(select(InboxRow).order_by(InboxRow.seq)).all()
        return [_to_item(r) for r in rows]

    def get_inbox(self) -> list[InboxItem]:
        with self._session() as session:
            return self._batch(session)

    def import_csv(self, data: bytes, name: str = "") -> list[InboxItem]:
        """Stage every row of ``data`` and return the whole batch (old rows first)."""

        parsed = parse_statement(data)
        with self._session() as session:
            for row in parsed:
                session.add(
                    InboxRow(
                        temp_id=str(uuid.uuid4()),
                        date=row["date"],
                        description=row["description"],
                        amount=row["amount"],
                        flow=Flow.from_amount(row["amount"]).value,
                        suggested_category=categorization.suggest(session, row["description"]),
                    )
                )
            session.flush()
            batch = self._batch(session)
        _logger.info("staged %d row(s) from %s", len(parsed), name or "<upload>")
        return batch

    def set_inbox_category(self, temp_id: str, category: str) -> SetCategoryAck:
        with self._session() as session:
            row = session.scalar(select(InboxRow).where(InboxRow.temp_id == temp_id))
            if row is None:
                return SetCategoryAck(ok=False)
            row.suggested_category = category
            categorization.learn(session, row.description, category)
        return SetCategoryAck(ok=True)

    def commit_inbox(self) -> CommitResult:
        """Move every staged row into the ledger in one transaction."""

        with self._session() as session:
            rows = session.scalars(select(InboxRow).order_by(InboxRow.seq)).all()
            for r in rows:
                session.add(
                    LedgerTransaction(
                        date=r.date,
                        description=r.description,
                        amount=r.amount,
                        flow=r.flow,
                        category=r.suggested_category,
                    )
                )
                if r.suggested_category:
                    categorization.learn(session, r.description, r.suggested_category)
            session.execute(delete(InboxRow))
            committed = len(rows)
        _logger.info("committed %d inbox row(s) to the ledger", committed)
        return CommitResult(committed_count=committed)

    # -- read models ----------------------------------------------------------

    def get_summary(self, month: str) -> SummaryResponse:
        if not _MONTH_RE.match(month):
            raise BackendCallError("get_summary", f"month must be YYYY-MM, got {month!r}")

        like = f"{month}-%"
        outflow = func.abs(LedgerTransaction.amount)
        in_month = (LedgerTransaction.amount < 0) & LedgerTransaction.date.like(like)
        with self._session() as session:
            total = session.scalar(select(func.coalesce(func.sum(outflow), 0.0)).where(in_month))

            cat = func.coalesce(LedgerTransaction.category, "Uncategorized").label("cat")
            by_category = [
                CategoryAmount(category=c, amount=float(a))
                for c, a in session.execute(
                    select(cat, func.sum(outflow))
                    .where(in_month)
                    .group_by(cat)
                    .order_by(func.sum(outflow).desc())
                ).all()
            ]

            spent_by_cat = dict(
                session.execute(
                    select(LedgerTransaction.category, func.sum(outflow))
                    .where(in_month)
                    .group_by(LedgerTransaction.category)
                ).all()
            )
            budgets = [
                BudgetUsage(
                    category=b.category,
                    cap=b.cap,
                    spent=float(spent_by_cat.get(b.category) or 0.0),
                )
                for b in session.scalars(select(Budget).order_by(Budget.category)).all()
            ]

        return SummaryResponse(
            month=month,
            total_spend=float(total or 0.0),
            by_category=by_category,
            budgets=budgets,
        )

    def get_networth_curve(self) -> list[NetWorthPoint]:
        """Running ledger balance for the last 12 months (current month last).

        Only activity inside the window contributes; cash/invested/debt are
        fixed shares of the running balance, floored at zero.
        """

        months = _month_starts(self._today())
        bucket = func.substr(LedgerTransaction.date, 1, 7)
        with self._session() as session:
            totals = dict(
                session.execute(
                    select(bucket, func.sum(LedgerTransaction.amount)).group_by(bucket)
                ).all()
            )

        curve: list[NetWorthPoint] = []
        cumulative = 0.0
        for start in months:
            cumulative += float(totals.get(start.strftime("%Y-%m")) or 0.0)
            curve.append(
                NetWorthPoint(
                    date=start.isoformat(),
                    net_worth=cumulative,
                    cash=max(cumulative * 0.4, 0.0),
                    invested=max(cumulative * 0.55, 0.0),
                    debt=max(-cumulative * 0.2, 0.0),
                )
            )
        return curve


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------


def _require_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise BackendCallError("payload", f"{key!r} must be a string")
    return value


def _require_bytes(payload: Mapping[str, Any]) -> bytes:
    raw = payload.get("bytes")
    if not isinstance(raw, list):
        raise BackendCallError("import_csv", "'bytes' must be a list of byte values")
    try:
        return bytes(raw)
    except (TypeError, ValueError) as e:
        raise BackendCallError("import_csv", f"invalid byte values: {e}") from e


__all__ = ["DEFAULT_BUDGETS", "LedgerBackend"]

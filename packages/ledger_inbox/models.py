"""Data models for ``ledger_inbox``.

Every model here mirrors a JSON shape exchanged with the backend. Field names
are snake_case in Python and camelCase on the wire (``tempId``,
``suggestedCategory``, ``committedCount``); models accept either spelling on
input and emit camelCase with ``to_wire()``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Flow(StrEnum):
    """Direction of money for an inbox row."""

    DEBIT = "debit"
    CREDIT = "credit"

    @classmethod
    def from_amount(cls, amount: float) -> Flow:
        # Zero counts as an inflow, matching the backend's classification.
        return cls.CREDIT if amount >= 0 else cls.DEBIT


class TransportMode(StrEnum):
    """Which adapter backs the pipeline."""

    LOCAL = "local"
    REMOTE = "remote"


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class InboxItem(_WireModel):
    """A provisional transaction awaiting confirmation.

    ``temp_id`` is only unique inside the current batch. ``flow`` is carried
    as provided by the parser and is not reconciled with the sign of
    ``amount``.
    """

    temp_id: str
    date: str
    description: str
    amount: float
    flow: Flow
    suggested_category: str | None = None


class CommitResult(_WireModel):
    committed_count: int


class SetCategoryAck(_WireModel):
    ok: bool = True


class CategoryAmount(_WireModel):
    category: str
    amount: float


class BudgetUsage(_WireModel):
    category: str
    cap: float
    spent: float


class SummaryResponse(_WireModel):
    """Monthly spend overview: totals, per-category outflow and budget usage."""

    month: str
    total_spend: float
    by_category: list[CategoryAmount]
    budgets: list[BudgetUsage]


class NetWorthPoint(_WireModel):
    date: str
    net_worth: float
    cash: float
    invested: float
    debt: float


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


_BATCH = TypeAdapter(list[InboxItem])
_CURVE = TypeAdapter(list[NetWorthPoint])


def parse_batch(raw: Any) -> list[InboxItem]:
    """Validate a backend batch (list of dicts or models) into ``InboxItem`` s.

    Any other shape, scalars included, raises ``pydantic.ValidationError``.
    """

    return _BATCH.validate_python(raw)


def parse_curve(raw: Any) -> list[NetWorthPoint]:
    return _CURVE.validate_python(raw)


__all__ = [
    "BudgetUsage",
    "CategoryAmount",
    "CommitResult",
    "Flow",
    "InboxItem",
    "NetWorthPoint",
    "SetCategoryAck",
    "SummaryResponse",
    "TransportMode",
    "parse_batch",
    "parse_curve",
]

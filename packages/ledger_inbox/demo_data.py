"""Deterministic fallback data served when no backend answers.

Values are fixed so that disconnected sessions (and tests) see the same
dashboard every time.
"""

from __future__ import annotations

from .models import (
    BudgetUsage,
    CategoryAmount,
    Flow,
    InboxItem,
    NetWorthPoint,
    SummaryResponse,
)

DEMO_MONTH = "2025-01"

# (category, spent, cap)
_DEMO_SPEND: tuple[tuple[str, float, float], ...] = (
    ("Housing", 1800.0, 1800.0),
    ("Groceries", 620.0, 700.0),
    ("Dining", 280.0, 350.0),
    ("Transportation", 220.0, 250.0),
    ("Discretionary", 400.0, 500.0),
)


def demo_summary(month: str | None = None) -> SummaryResponse:
    """Fixed monthly summary; ``month`` is echoed back when given."""

    return SummaryResponse(
        month=month or DEMO_MONTH,
        total_spend=sum(spent for _, spent, _ in _DEMO_SPEND),
        by_category=[CategoryAmount(category=c, amount=spent) for c, spent, _ in _DEMO_SPEND],
        budgets=[BudgetUsage(category=c, cap=cap, spent=spent) for c, spent, cap in _DEMO_SPEND],
    )


def demo_networth_curve() -> list[NetWorthPoint]:
    points: list[NetWorthPoint] = []
    for idx in range(12):
        base = 50_000 + idx * 1_250
        points.append(
            NetWorthPoint(
                date=f"2024-{idx + 1:02d}-01",
                net_worth=base,
                cash=base * 0.4,
                invested=base * 0.7,
                debt=base * 0.3,
            )
        )
    return points


def demo_inbox() -> list[InboxItem]:
    """Three staged rows used when ``LEDGER_INBOX_DEMO_SEED`` is enabled."""

    rows = (
        ("2025-01-04", "Blue Bottle Coffee", -8.5, "Dining"),
        ("2025-01-04", "Amazon Web Services", -32.25, "Software"),
        ("2025-01-03", "United Airlines", -412.33, "Travel"),
    )
    return [
        InboxItem(
            temp_id=str(i),
            date=d,
            description=desc,
            amount=amt,
            flow=Flow.DEBIT,
            suggested_category=cat,
        )
        for i, (d, desc, amt, cat) in enumerate(rows, start=1)
    ]


__all__ = ["DEMO_MONTH", "demo_inbox", "demo_networth_curve", "demo_summary"]

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Staging: inbox
# ---------------------------


class InboxRow(Base):
    """A parsed-but-unconfirmed transaction awaiting commit."""

    __tablename__ = "inbox"

    # Surrogate key only used to keep insertion order stable; ``temp_id`` is the
    # identifier exposed to callers.
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    temp_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    # ISO date string as produced by the statement reader (not a DATE column:
    # the raw value is preserved even when it is not a valid calendar date).
    date: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    flow: Mapped[str] = mapped_column(String, nullable=False)
    suggested_category: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )

    __table_args__ = (CheckConstraint("flow in ('debit','credit')", name="ck_inbox_flow"),)


# ---------------------------
# Permanent: ledger_transactions
# ---------------------------


class LedgerTransaction(Base):
    __tablename__ = "ledger_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    flow: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )

    __table_args__ = (
        CheckConstraint("flow in ('debit','credit')", name="ck_ledger_tx_flow"),
    )


# ---------------------------
# Learned description tokens → category
# ---------------------------


class CategorizationToken(Base):
    __tablename__ = "categorization_memory"

    token: Mapped[str] = mapped_column(String, primary_key=True)
    category: Mapped[str] = mapped_column(String, nullable=False)
    hit_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("1"))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )


# ---------------------------
# Reference: budgets (read-only for the inbox core)
# ---------------------------


class Budget(Base):
    __tablename__ = "budgets"

    category: Mapped[str] = mapped_column(String, primary_key=True)
    cap: Mapped[float] = mapped_column(Float, nullable=False)


__all__ = [
    "Base",
    "Budget",
    "CategorizationToken",
    "InboxRow",
    "LedgerTransaction",
]

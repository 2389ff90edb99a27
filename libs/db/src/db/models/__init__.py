"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the staging/ledger models used by ``ledger_inbox``.
"""

from .ledger import Base, Budget, CategorizationToken, InboxRow, LedgerTransaction

__all__ = [
    "Base",
    "Budget",
    "CategorizationToken",
    "InboxRow",
    "LedgerTransaction",
]

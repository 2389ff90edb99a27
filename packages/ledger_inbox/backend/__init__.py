"""Reference local backend for the inbox bridge.

Implements the backend call surface over SQLAlchemy models from ``db``.
Served in-process through :class:`~ledger_inbox.hosts.InProcessHost` or as a
one-shot subprocess (``python -m ledger_inbox.backend``) through
:class:`~ledger_inbox.hosts.SubprocessHost`.
"""

from __future__ import annotations

from .service import DEFAULT_BUDGETS, LedgerBackend

__all__ = ["DEFAULT_BUDGETS", "LedgerBackend"]

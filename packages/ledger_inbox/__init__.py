"""ledger_inbox: stage bank-statement rows, categorize them, commit them to a ledger.

Public surface
--------------
- :class:`InboxPipeline` / :func:`build_pipeline`: the four inbox operations.
- :class:`Settings`: configuration (environment-backed).
- :class:`TransportBridge` and its result types ``Ok``, ``Unavailable``,
  ``BackendError``.
- Adapters (:class:`LocalAdapter`, :class:`RemoteAdapter`) and the
  :class:`TransportSelector` that chooses between them.
- Wire models (:class:`InboxItem`, :class:`CommitResult`, ...).

The reference SQL backend lives in ``ledger_inbox.backend`` and is imported
lazily so that the core has no database dependency at import time.
"""

from __future__ import annotations

from .adapters import BackendAdapter, InMemoryInbox, LocalAdapter, RemoteAdapter
from .bridge import BackendError, BridgeResult, Ok, TransportBridge, Unavailable
from .config import Settings
from .errors import BackendCallError, ConfigError, LedgerInboxError, StatementParseError
from .hosts import BackendHost, InProcessHost, SubprocessHost, discover_host
from .models import (
    BudgetUsage,
    CategoryAmount,
    CommitResult,
    Flow,
    InboxItem,
    NetWorthPoint,
    SetCategoryAck,
    SummaryResponse,
    TransportMode,
)
from .pipeline import InboxPipeline, build_pipeline
from .transport import TransportSelector, build_selector

__all__ = [
    "BackendAdapter",
    "BackendCallError",
    "BackendError",
    "BackendHost",
    "BridgeResult",
    "BudgetUsage",
    "CategoryAmount",
    "CommitResult",
    "ConfigError",
    "Flow",
    "InMemoryInbox",
    "InProcessHost",
    "InboxItem",
    "InboxPipeline",
    "LedgerInboxError",
    "LocalAdapter",
    "NetWorthPoint",
    "Ok",
    "RemoteAdapter",
    "SetCategoryAck",
    "Settings",
    "StatementParseError",
    "SubprocessHost",
    "SummaryResponse",
    "TransportBridge",
    "TransportMode",
    "TransportSelector",
    "Unavailable",
    "build_pipeline",
    "build_selector",
    "discover_host",
]

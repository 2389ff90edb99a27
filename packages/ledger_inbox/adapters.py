"""Backend adapters: inbox operations over a bridge, with in-memory fallback.

Every adapter implements the same capability set (:class:`BackendAdapter`).
:class:`LocalAdapter` first asks the :class:`~ledger_inbox.bridge.TransportBridge`;
whenever the bridge does not produce a value it serves the call from its own
:class:`InMemoryInbox`, so callers never need to know which path ran.
:class:`RemoteAdapter` is a placeholder for a networked transport that
currently serves everything from memory.

Mutating operations run under the owning store's ``asyncio.Lock`` (bridge call
and fallback alike), so an import and a commit issued concurrently are applied
one after the other rather than interleaved.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from typing import Any, TypeVar

from pydantic import ValidationError

from .bridge import BackendError, Ok, TransportBridge
from .demo_data import demo_networth_curve, demo_summary
from .errors import BackendCallError
from .logging_setup import get_logger
from .models import (
    CommitResult,
    Flow,
    InboxItem,
    NetWorthPoint,
    SetCategoryAck,
    SummaryResponse,
    parse_batch,
    parse_curve,
)

_logger = get_logger("ledger_inbox.adapters")

T = TypeVar("T")

PLACEHOLDER_AMOUNT = -45.67
PLACEHOLDER_CATEGORY = "Misc"


# ---------------------------------------------------------------------------
# In-memory batch
# ---------------------------------------------------------------------------


class InMemoryInbox:
    """The fallback copy of the inbox batch.

    Items are kept in insertion order. ``InboxItem`` is immutable, so category
    changes swap in an updated copy at the same position.
    """

    def __init__(
        self,
        items: Iterable[InboxItem] | None = None,
        *,
        rows_per_import: int = 1,
        today: Callable[[], date] = date.today,
    ) -> None:
        if rows_per_import < 1:
            raise ValueError("rows_per_import must be at least 1")
        self._items: list[InboxItem] = list(items or [])
        self._rows_per_import = rows_per_import
        self._today = today
        self.lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._items)

    def snapshot(self) -> list[InboxItem]:
        return list(self._items)

    def replace(self, items: Iterable[InboxItem]) -> None:
        self._items = list(items)

    def append_placeholders(self, file_name: str) -> list[InboxItem]:
        """Append deterministic rows standing in for a parsed ``file_name``.

        Each row's ``temp_id`` is the batch length plus one at the moment it
        is created. This is not unique across commits; no removal primitive
        exists within a batch, so it is unique inside one.
        """

        today = self._today().isoformat()
        for _ in range(self._rows_per_import):
            temp_id = str(len(self._items) + 1)
            self._items.append(
                InboxItem(
                    temp_id=temp_id,
                    date=today,
                    description=f"{file_name} Row {temp_id}",
                    amount=PLACEHOLDER_AMOUNT,
                    flow=Flow.DEBIT,
                    suggested_category=PLACEHOLDER_CATEGORY,
                )
            )
        return self.snapshot()

    def set_category(self, temp_id: str, category: str) -> bool:
        """Update the matching item; return ``False`` (and change nothing) when absent."""

        for i, item in enumerate(self._items):
            if item.temp_id == temp_id:
                self._items[i] = item.model_copy(update={"suggested_category": category})
                return True
        return False

    def drain(self) -> int:
        count = len(self._items)
        self._items = []
        return count


# ---------------------------------------------------------------------------
# Adapter interface
# ---------------------------------------------------------------------------


class BackendAdapter(ABC):
    """Capability set backing :class:`~ledger_inbox.pipeline.InboxPipeline`."""

    @abstractmethod
    async def get_inbox(self) -> list[InboxItem]: ...

    @abstractmethod
    async def import_batch(self, data: bytes, name: str) -> list[InboxItem]: ...

    @abstractmethod
    async def set_category(self, temp_id: str, category: str) -> SetCategoryAck: ...

    @abstractmethod
    async def commit_batch(self) -> CommitResult: ...

    @abstractmethod
    async def get_summary(self, month: str) -> SummaryResponse: ...

    @abstractmethod
    async def get_networth_curve(self) -> list[NetWorthPoint]: ...


# ---------------------------------------------------------------------------
# Local
# ---------------------------------------------------------------------------


class LocalAdapter(BackendAdapter):
    """Bridge-first adapter with a private in-memory fallback.

    Parameters
    ----------
    bridge:
        Bridge to the local backend. A bridge without a host is valid and
        makes every call take the fallback path.
    store:
        Fallback batch. Each adapter gets its own unless one is passed in.
    strict:
        When ``True``, a backend-side failure (``BackendError``) raises
        :class:`~ledger_inbox.errors.BackendCallError` instead of falling back.
        Unavailability always falls back.
    """

    def __init__(
        self,
        bridge: TransportBridge,
        *,
        store: InMemoryInbox | None = None,
        strict: bool = False,
    ) -> None:
        self._bridge = bridge
        self._store = store if store is not None else InMemoryInbox()
        self._strict = strict

    @property
    def store(self) -> InMemoryInbox:
        return self._store

    async def _request(
        self,
        operation: str,
        parse: Callable[[Any], T],
        payload: Mapping[str, Any] | None = None,
    ) -> T | None:
        """Run ``operation`` on the bridge; ``None`` means "use the fallback"."""

        result = await self._bridge.call(operation, payload)
        if isinstance(result, BackendError):
            if self._strict:
                raise BackendCallError(result.operation, result.detail)
            return None
        if not isinstance(result, Ok) or result.value is None:
            return None
        try:
            return parse(result.value)
        except ValidationError as e:
            if self._strict:
                raise BackendCallError(operation, f"unexpected response shape: {e}") from e
            _logger.warning("discarding malformed %s response: %s", operation, e)
            return None

    async def get_inbox(self) -> list[InboxItem]:
        batch = await self._request("get_inbox", parse_batch)
        if batch is None:
            return self._store.snapshot()
        return batch

    async def import_batch(self, data: bytes, name: str) -> list[InboxItem]:
        payload = {"bytes": list(data), "name": name}
        async with self._store.lock:
            batch = await self._request("import_csv", parse_batch, payload)
            if batch is None:
                return self._store.append_placeholders(name)
            self._store.replace(batch)
            return batch

    async def set_category(self, temp_id: str, category: str) -> SetCategoryAck:
        payload = {"tempId": temp_id, "category": category}
        async with self._store.lock:
            ack = await self._request(
                "set_inbox_category", SetCategoryAck.model_validate, payload
            )
            if ack is None:
                if not self._store.set_category(temp_id, category):
                    _logger.debug("set_category: no inbox item with tempId=%s", temp_id)
                return SetCategoryAck(ok=True)
            return ack

    async def commit_batch(self) -> CommitResult:
        async with self._store.lock:
            result = await self._request("commit_inbox", CommitResult.model_validate)
            committed = self._store.drain()
            if result is None:
                return CommitResult(committed_count=committed)
            return result

    async def get_summary(self, month: str) -> SummaryResponse:
        summary = await self._request(
            "get_summary", SummaryResponse.model_validate, {"month": month}
        )
        return summary if summary is not None else demo_summary(month)

    async def get_networth_curve(self) -> list[NetWorthPoint]:
        curve = await self._request("get_networth_curve", parse_curve)
        return curve if curve is not None else demo_networth_curve()


# ---------------------------------------------------------------------------
# Remote
# ---------------------------------------------------------------------------


class RemoteAdapter(BackendAdapter):
    """Placeholder for a networked transport.

    Serves every call with the local fallback behavior over a store that
    belongs to this adapter alone, so nothing is shared with
    :class:`LocalAdapter`.
    """

    def __init__(self, *, store: InMemoryInbox | None = None) -> None:
        self._memory = LocalAdapter(TransportBridge(None), store=store)

    @property
    def store(self) -> InMemoryInbox:
        return self._memory.store

    @staticmethod
    def _warn(operation: str) -> None:
        _logger.warning("remote transport not implemented for %s; using in-memory data", operation)

    async def get_inbox(self) -> list[InboxItem]:
        self._warn("get_inbox")
        return await self._memory.get_inbox()

    async def import_batch(self, data: bytes, name: str) -> list[InboxItem]:
        self._warn("import_csv")
        return await self._memory.import_batch(data, name)

    async def set_category(self, temp_id: str, category: str) -> SetCategoryAck:
        self._warn("set_inbox_category")
        return await self._memory.set_category(temp_id, category)

    async def commit_batch(self) -> CommitResult:
        self._warn("commit_inbox")
        return await self._memory.commit_batch()

    async def get_summary(self, month: str) -> SummaryResponse:
        self._warn("get_summary")
        return await self._memory.get_summary(month)

    async def get_networth_curve(self) -> list[NetWorthPoint]:
        self._warn("get_networth_curve")
        return await self._memory.get_networth_curve()


__all__ = [
    "BackendAdapter",
    "InMemoryInbox",
    "LocalAdapter",
    "PLACEHOLDER_AMOUNT",
    "PLACEHOLDER_CATEGORY",
    "RemoteAdapter",
]

"""The inbox pipeline: stage, categorize and commit statement rows.

Four operations, each a thin await on whichever adapter the selector points
at when the call starts:

- ``get_inbox()``: the current batch in insertion order.
- ``import_batch(data, name)``: stage rows parsed from a statement file; the
  returned batch (and any later read) already contains them.
- ``set_category(temp_id, category)``: change one row's suggested category.
  Unknown ids are ignored.
- ``commit_batch()``: move the whole batch into the ledger and empty the
  inbox. An empty batch commits zero rows.

The pipeline keeps no copy of the batch between calls; the adapter (or the
backend behind it) owns it.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .config import Settings
from .hosts import BackendHost
from .models import CommitResult, InboxItem, SetCategoryAck
from .transport import TransportSelector, build_selector


class InboxPipeline:
    def __init__(self, selector: TransportSelector) -> None:
        self._selector = selector

    @property
    def selector(self) -> TransportSelector:
        return self._selector

    async def get_inbox(self) -> list[InboxItem]:
        return await self._selector.current.get_inbox()

    async def import_batch(self, data: bytes, name: str) -> list[InboxItem]:
        return await self._selector.current.import_batch(bytes(data), name)

    async def import_file(self, path: str | PathLike[str]) -> list[InboxItem]:
        """Read ``path`` fully into memory and stage it under its file name."""

        p = Path(path)
        return await self.import_batch(p.read_bytes(), p.name)

    async def set_category(self, temp_id: str, category: str) -> SetCategoryAck:
        return await self._selector.current.set_category(temp_id, category)

    async def commit_batch(self) -> CommitResult:
        return await self._selector.current.commit_batch()


def build_pipeline(
    settings: Settings | None = None,
    *,
    host: BackendHost | None = None,
) -> InboxPipeline:
    """Create a pipeline from ``settings`` (environment when omitted)."""

    resolved = settings if settings is not None else Settings.from_env()
    return InboxPipeline(build_selector(resolved, host=host))


__all__ = ["InboxPipeline", "build_pipeline"]

"""Backend hosts: the concrete processes a :class:`TransportBridge` talks to.

A host exposes ``async invoke(command, payload) -> Any`` and raises on
failure; the bridge turns exceptions into results. Two hosts ship here:

- :class:`InProcessHost` wraps a Python backend object (the reference
  :class:`~ledger_inbox.backend.service.LedgerBackend`) and runs its blocking
  database work in a worker thread.
- :class:`SubprocessHost` runs an external backend command once per call
  and speaks one JSON request/response over stdin/stdout::

      -> {"command": "import_csv", "payload": {"bytes": [...], "name": "a.csv"}}
      <- {"ok": true, "result": [...]}        or {"ok": false, "error": "..."}

:func:`discover_host` is the handshake: it returns ``None`` when no backend is
configured, which the bridge reports as unavailable.
"""

from __future__ import annotations

import asyncio
import json
import shlex
import shutil
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from .config import Settings
from .errors import BackendCallError
from .logging_setup import get_logger

_logger = get_logger("ledger_inbox.hosts")


@runtime_checkable
class BackendHost(Protocol):
    async def invoke(self, command: str, payload: Mapping[str, Any] | None) -> Any: ...


class SyncBackend(Protocol):
    def dispatch(self, command: str, payload: Mapping[str, Any] | None) -> Any: ...


class InProcessHost:
    """Host backed by a synchronous Python backend object."""

    def __init__(self, backend: SyncBackend) -> None:
        self._backend = backend

    async def invoke(self, command: str, payload: Mapping[str, Any] | None) -> Any:
        return await asyncio.to_thread(self._backend.dispatch, command, payload)


class SubprocessHost:
    """Host that spawns ``argv`` for every call (one JSON request per process)."""

    def __init__(self, argv: Sequence[str]) -> None:
        if not argv:
            raise ValueError("argv must not be empty")
        self._argv = list(argv)

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    async def invoke(self, command: str, payload: Mapping[str, Any] | None) -> Any:
        request = json.dumps({"command": command, "payload": payload}).encode("utf-8")
        proc = await asyncio.create_subprocess_exec(
            *self._argv,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await proc.communicate(request)
        except asyncio.CancelledError:
            # Bridge timeout cancels us; do not leave the child running.
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise

        if proc.returncode != 0:
            detail = f"backend exited with {proc.returncode}"
            lines = stderr.decode("utf-8", errors="replace").strip().splitlines()
            if lines:
                detail = f"{detail}: {lines[-1]}"
            raise BackendCallError(command, detail)
        try:
            response = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise BackendCallError(command, f"malformed backend response: {e}") from e
        if not isinstance(response, dict) or "ok" not in response:
            raise BackendCallError(command, "backend response is missing 'ok'")
        if not response["ok"]:
            raise BackendCallError(command, str(response.get("error") or "unknown error"))
        return response.get("result")


def discover_host(settings: Settings) -> BackendHost | None:
    """Resolve the backend host described by ``settings``.

    Preference order: external command, then the in-process reference backend
    when a database URL is configured. Returns ``None`` when neither is
    present or the command cannot be found on ``PATH``.
    """

    if settings.backend_command:
        argv = shlex.split(settings.backend_command)
        if argv and shutil.which(argv[0]):
            return SubprocessHost(argv)
        _logger.warning(
            "backend command %r not found; running without a backend",
            settings.backend_command,
        )
        return None

    if settings.database_url:
        # Deferred import: the DB stack is only needed when a database is configured.
        from .backend.service import LedgerBackend

        return InProcessHost(LedgerBackend(database_url=settings.database_url))

    return None


__all__ = [
    "BackendHost",
    "InProcessHost",
    "SubprocessHost",
    "SyncBackend",
    "discover_host",
]

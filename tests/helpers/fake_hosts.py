"""Fake backend hosts and sinks for bridge/adapter tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any


class RecordingSink:
    """Observability sink that remembers every ``(operation, detail)`` pair."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def __call__(self, operation: str, detail: str) -> None:
        self.events.append((operation, detail))


class ScriptedHost:
    """Host answering from a ``{command: value | callable(payload)}`` table.

    Commands missing from the table raise ``RuntimeError`` (a backend-side
    failure). Every call is recorded in ``calls``.
    """

    def __init__(self, responses: Mapping[str, Any] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, dict[str, Any] | None]] = []

    async def invoke(self, command: str, payload: Mapping[str, Any] | None) -> Any:
        self.calls.append((command, dict(payload) if payload is not None else None))
        if command not in self.responses:
            raise RuntimeError(f"no scripted response for {command}")
        value = self.responses[command]
        if callable(value):
            return value(payload)
        return value


class FailingHost:
    def __init__(self, exc: BaseException) -> None:
        self.exc = exc
        self.calls = 0

    async def invoke(self, command: str, payload: Mapping[str, Any] | None) -> Any:
        self.calls += 1
        raise self.exc


class SlowHost:
    """Sleeps ``delay`` seconds, then answers with ``result``."""

    def __init__(self, delay: float, result: Any = None) -> None:
        self.delay = delay
        self.result = result

    async def invoke(self, command: str, payload: Mapping[str, Any] | None) -> Any:
        await asyncio.sleep(self.delay)
        return self.result


class GatedHost:
    """Unavailable-style host whose calls block until ``release()``.

    Every call raises after the gate opens, so adapters fall back to memory;
    ``started`` records operation names in the order calls began.
    """

    def __init__(self, on_call: Callable[[str], None] | None = None) -> None:
        self._gate = asyncio.Event()
        self.started: list[str] = []
        self._on_call = on_call

    def release(self) -> None:
        self._gate.set()

    async def invoke(self, command: str, payload: Mapping[str, Any] | None) -> Any:
        self.started.append(command)
        if self._on_call is not None:
            self._on_call(command)
        await self._gate.wait()
        raise ConnectionError("backend went away")

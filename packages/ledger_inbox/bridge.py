"""Transport bridge: the single async call surface to the backend.

``TransportBridge.call(operation, payload)`` dispatches a named operation to
the configured :class:`~ledger_inbox.hosts.BackendHost` and always returns a
:data:`BridgeResult` instead of raising:

- ``Ok(value)``: the host answered.
- ``Unavailable(reason)``: no host is embedded, or the call exceeded the
  configured timeout.
- ``BackendError(operation, detail)``: the host was reached but the call
  failed.

Failures and timeouts are reported to an observability sink before the
result is returned. ``invoke`` is the collapsed form used by callers that only
care whether a value came back.

One attempt per call; there are no retries.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .logging_setup import get_logger

if TYPE_CHECKING:
    from .hosts import BackendHost

_logger = get_logger("ledger_inbox.bridge")

type ObservabilitySink = Callable[[str, str], None]
"""Receives ``(operation, detail)`` for every failed or timed-out call."""


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Ok:
    value: Any


@dataclass(frozen=True, slots=True)
class Unavailable:
    reason: str


@dataclass(frozen=True, slots=True)
class BackendError:
    operation: str
    detail: str


type BridgeResult = Ok | Unavailable | BackendError


def log_sink(operation: str, detail: str) -> None:
    """Default sink: one WARNING line per failure."""

    _logger.warning("bridge call %s failed: %s", operation, detail)


# ---------------------------------------------------------------------------
# Bridge
# ---------------------------------------------------------------------------


class TransportBridge:
    """Dispatch named operations to an optional backend host."""

    def __init__(
        self,
        host: BackendHost | None,
        *,
        timeout_seconds: float = 10.0,
        sink: ObservabilitySink = log_sink,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._host = host
        self._timeout = timeout_seconds
        self._sink = sink

    @property
    def available(self) -> bool:
        return self._host is not None

    async def call(
        self, operation: str, payload: Mapping[str, Any] | None = None
    ) -> BridgeResult:
        if self._host is None:
            return Unavailable("no backend host")

        try:
            value = await asyncio.wait_for(
                self._host.invoke(operation, dict(payload) if payload else None),
                timeout=self._timeout,
            )
        except TimeoutError:
            self._report(operation, f"timed out after {self._timeout:g}s")
            return Unavailable("timeout")
        except Exception as e:  # noqa: BLE001 - every host failure becomes a result
            detail = str(e) or type(e).__name__
            self._report(operation, detail)
            return BackendError(operation, detail)
        return Ok(value)

    async def invoke(self, operation: str, payload: Mapping[str, Any] | None = None) -> Any:
        """Return the host's value, or ``None`` for any non-``Ok`` outcome."""

        result = await self.call(operation, payload)
        return result.value if isinstance(result, Ok) else None

    def _report(self, operation: str, detail: str) -> None:
        # Fire-and-forget: a broken sink must not change the call's outcome.
        try:
            self._sink(operation, detail)
        except Exception:  # noqa: BLE001
            _logger.debug("observability sink raised for %s", operation, exc_info=True)


__all__ = [
    "BackendError",
    "BridgeResult",
    "ObservabilitySink",
    "Ok",
    "TransportBridge",
    "Unavailable",
    "log_sink",
]

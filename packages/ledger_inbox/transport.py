"""Transport selection and pipeline wiring.

:class:`TransportSelector` holds the current :class:`TransportMode` and one
adapter per mode. It is an ordinary object handed to the pipeline, so two
pipelines never share a mode by accident. Switching modes never copies or
merges batches between adapters.
"""

from __future__ import annotations

from collections.abc import Mapping

from .adapters import BackendAdapter, InMemoryInbox, LocalAdapter, RemoteAdapter
from .bridge import ObservabilitySink, TransportBridge, log_sink
from .config import Settings
from .demo_data import demo_inbox
from .hosts import BackendHost, discover_host
from .logging_setup import get_logger
from .models import TransportMode

_logger = get_logger("ledger_inbox.transport")


class TransportSelector:
    def __init__(
        self,
        adapters: Mapping[TransportMode, BackendAdapter],
        *,
        mode: TransportMode = TransportMode.LOCAL,
    ) -> None:
        missing = [m.value for m in TransportMode if m not in adapters]
        if missing:
            raise ValueError(f"no adapter registered for: {', '.join(missing)}")
        self._adapters = dict(adapters)
        self._mode = mode

    @property
    def mode(self) -> TransportMode:
        return self._mode

    def select(self, mode: TransportMode) -> None:
        if mode is not self._mode:
            _logger.info("transport switched %s -> %s", self._mode.value, mode.value)
        self._mode = mode

    @property
    def current(self) -> BackendAdapter:
        return self._adapters[self._mode]

    def adapter(self, mode: TransportMode) -> BackendAdapter:
        return self._adapters[mode]


def build_selector(
    settings: Settings,
    *,
    host: BackendHost | None = None,
    sink: ObservabilitySink = log_sink,
) -> TransportSelector:
    """Wire bridge and adapters from ``settings``.

    ``host`` overrides discovery (tests pass fakes here). Each adapter gets a
    fresh in-memory store.
    """

    resolved_host = host if host is not None else discover_host(settings)
    bridge = TransportBridge(
        resolved_host, timeout_seconds=settings.bridge_timeout_seconds, sink=sink
    )

    def _store() -> InMemoryInbox:
        seed = demo_inbox() if settings.demo_seed else None
        return InMemoryInbox(seed, rows_per_import=settings.fallback_rows_per_import)

    adapters: dict[TransportMode, BackendAdapter] = {
        TransportMode.LOCAL: LocalAdapter(bridge, store=_store()),
        TransportMode.REMOTE: RemoteAdapter(store=_store()),
    }
    return TransportSelector(adapters, mode=settings.transport)


__all__ = ["TransportSelector", "build_selector"]

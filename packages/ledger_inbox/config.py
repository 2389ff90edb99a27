"""Runtime settings for ``ledger_inbox``.

Settings are an explicit value passed to :func:`ledger_inbox.transport.build_pipeline`
rather than module-level state, so several pipelines (e.g. in tests) can live
in one process without sharing a transport mode.

Environment variables
---------------------
- ``LEDGER_INBOX_TRANSPORT``: ``local`` (default) or ``remote``.
- ``LEDGER_INBOX_BRIDGE_TIMEOUT``: seconds allowed per bridge call (default 10).
- ``LEDGER_INBOX_BACKEND_CMD``: command line of an external backend process.
- ``DATABASE_URL``: database of the in-process reference backend.
- ``LEDGER_INBOX_FALLBACK_ROWS``: placeholder rows per fallback import (default 1).
- ``LEDGER_INBOX_DEMO_SEED``: ``1``/``true`` to start the fallback inbox with demo rows.

``.env`` loading is the CLI's job; this module only reads ``os.environ``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigError
from .models import TransportMode

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {raw!r}")
    return value


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ConfigError(f"{key} must be at least 1, got {raw!r}")
    return value


def _env_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"{key} must be a boolean flag, got {raw!r}")


def parse_transport_mode(raw: str | TransportMode) -> TransportMode:
    try:
        return TransportMode(str(raw).strip().lower())
    except ValueError as e:
        allowed = ", ".join(m.value for m in TransportMode)
        raise ConfigError(f"unknown transport mode {raw!r} (expected one of: {allowed})") from e


@dataclass(frozen=True, slots=True)
class Settings:
    transport: TransportMode = TransportMode.LOCAL
    bridge_timeout_seconds: float = 10.0
    backend_command: str | None = None
    database_url: str | None = None
    fallback_rows_per_import: int = 1
    demo_seed: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``env`` (defaults to ``os.environ``).

        Raises :class:`~ledger_inbox.errors.ConfigError` on malformed values
        instead of silently substituting defaults.
        """

        env = os.environ if env is None else env
        raw_mode = env.get("LEDGER_INBOX_TRANSPORT")
        command = (env.get("LEDGER_INBOX_BACKEND_CMD") or "").strip()
        db_url = (env.get("DATABASE_URL") or "").strip()
        return cls(
            transport=parse_transport_mode(raw_mode) if raw_mode else TransportMode.LOCAL,
            bridge_timeout_seconds=_env_float(env, "LEDGER_INBOX_BRIDGE_TIMEOUT", 10.0),
            backend_command=command or None,
            database_url=db_url or None,
            fallback_rows_per_import=_env_int(env, "LEDGER_INBOX_FALLBACK_ROWS", 1),
            demo_seed=_env_bool(env, "LEDGER_INBOX_DEMO_SEED", False),
        )


__all__ = ["Settings", "parse_transport_mode"]

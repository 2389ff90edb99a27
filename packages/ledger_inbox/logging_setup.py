"""Process-wide logging for ``ledger_inbox``.

Modules obtain loggers through :func:`get_logger` and emit records; they never
decide where records go. That is settled once, by whichever entry point runs
first (``ledger-inbox`` or ``python -m ledger_inbox.backend``), through
:func:`configure_logging`. Until then the ``ledger_inbox`` logger carries a
``NullHandler`` and embedding applications hear nothing unless they opt in.

The level comes from the ``level`` argument, else ``LEDGER_INBOX_LOG_LEVEL``
(a name such as ``debug`` or a number), else ``INFO``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_ROOT_NAME = "ledger_inbox"
_LEVEL_ENV = "LEDGER_INBOX_LOG_LEVEL"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    text = level.strip()
    if text.isdigit():
        return int(text)
    return logging.getLevelNamesMapping().get(text.upper(), logging.INFO)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Route ``ledger_inbox`` records to ``stream``; later calls are no-ops.

    Records stop propagating to the root logger so that a host application's
    own handlers do not print them twice.
    """

    global _configured
    if _configured:
        return

    root = logging.getLogger(_ROOT_NAME)
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.NullHandler)]

    resolved = _resolve_level(level)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or _FORMAT))
    handler.setLevel(resolved)
    root.addHandler(handler)
    root.setLevel(resolved)
    root.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger(_ROOT_NAME)
    if not _configured and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]

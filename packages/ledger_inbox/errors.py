"""Exception types raised inside ``ledger_inbox``.

The inbox core itself has no fatal errors: adapters always resolve to a value.
These classes exist for the layers around it (hosts, the reference backend,
configuration) and for callers that opt into strict adapters.
"""

from __future__ import annotations


class LedgerInboxError(Exception):
    """Base class for package errors."""


class BackendCallError(LedgerInboxError):
    """A backend host was reached but the named operation failed."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"{operation}: {detail}")
        self.operation = operation
        self.detail = detail


class StatementParseError(LedgerInboxError):
    """The reference backend could not read rows from an uploaded statement."""


class ConfigError(LedgerInboxError):
    """Invalid configuration value read from the environment."""


__all__ = [
    "BackendCallError",
    "ConfigError",
    "LedgerInboxError",
    "StatementParseError",
]

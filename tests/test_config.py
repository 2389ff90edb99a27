from __future__ import annotations

import pytest

from ledger_inbox.config import Settings, parse_transport_mode
from ledger_inbox.errors import ConfigError
from ledger_inbox.models import TransportMode


def test_defaults_from_empty_env():
    assert Settings.from_env({}) == Settings()
    assert Settings().bridge_timeout_seconds == 10.0
    assert Settings().fallback_rows_per_import == 1


def test_reads_process_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LEDGER_INBOX_TRANSPORT", "Remote")
    monkeypatch.setenv("DATABASE_URL", "  sqlite:///x.db ")
    settings = Settings.from_env()
    assert settings.transport is TransportMode.REMOTE
    assert settings.database_url == "sqlite:///x.db"


def test_all_keys():
    settings = Settings.from_env(
        {
            "LEDGER_INBOX_TRANSPORT": "local",
            "LEDGER_INBOX_BRIDGE_TIMEOUT": "2.5",
            "LEDGER_INBOX_BACKEND_CMD": "ledger-backend --json",
            "LEDGER_INBOX_FALLBACK_ROWS": "2",
            "LEDGER_INBOX_DEMO_SEED": "yes",
        }
    )
    assert settings.bridge_timeout_seconds == 2.5
    assert settings.backend_command == "ledger-backend --json"
    assert settings.database_url is None
    assert settings.fallback_rows_per_import == 2
    assert settings.demo_seed is True


def test_blank_values_mean_unset():
    settings = Settings.from_env(
        {"LEDGER_INBOX_BACKEND_CMD": "  ", "LEDGER_INBOX_BRIDGE_TIMEOUT": "", "DATABASE_URL": ""}
    )
    assert settings.backend_command is None
    assert settings.database_url is None
    assert settings.bridge_timeout_seconds == 10.0


@pytest.mark.parametrize(
    "env",
    [
        {"LEDGER_INBOX_TRANSPORT": "carrier-pigeon"},
        {"LEDGER_INBOX_BRIDGE_TIMEOUT": "soon"},
        {"LEDGER_INBOX_BRIDGE_TIMEOUT": "-1"},
        {"LEDGER_INBOX_FALLBACK_ROWS": "0"},
        {"LEDGER_INBOX_FALLBACK_ROWS": "1.5"},
        {"LEDGER_INBOX_DEMO_SEED": "maybe"},
    ],
)
def test_malformed_values_raise(env: dict[str, str]):
    with pytest.raises(ConfigError):
        Settings.from_env(env)


def test_parse_transport_mode_accepts_enum():
    assert parse_transport_mode(TransportMode.REMOTE) is TransportMode.REMOTE

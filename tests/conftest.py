"""Pytest configuration: import paths and per-test isolation.

The workspace keeps the package under ``packages/`` and the shared DB library
under ``libs/db/src``; both are put on ``sys.path`` so tests run from a plain
checkout as well as from an editable install.

Environment variables read by :meth:`ledger_inbox.config.Settings.from_env`
are cleared for every test, and cached SQLAlchemy engines are disposed
afterwards so one test's SQLite file never leaks into the next.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [
    p
    for p in (str(_ROOT / "packages"), str(_ROOT / "libs/db/src"), str(_ROOT))
    if p not in sys.path
]

_ENV_KEYS = (
    "DATABASE_URL",
    "LEDGER_INBOX_TRANSPORT",
    "LEDGER_INBOX_BRIDGE_TIMEOUT",
    "LEDGER_INBOX_BACKEND_CMD",
    "LEDGER_INBOX_FALLBACK_ROWS",
    "LEDGER_INBOX_DEMO_SEED",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # Keep the CLI's ``.env`` lookup away from any developer file in the repo.
    monkeypatch.chdir(tmp_path)
    yield
    # ``load_dotenv`` writes straight into os.environ; monkeypatch restores originals after this.
    for key in _ENV_KEYS:
        os.environ.pop(key, None)
    from db.client import dispose_engines

    dispose_engines()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+pysqlite:///{tmp_path / 'ledger.db'}"


@pytest.fixture
def repo_root() -> Path:
    return _ROOT

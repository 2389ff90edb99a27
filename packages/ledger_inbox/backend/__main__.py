"""One-shot JSON entry point: ``python -m ledger_inbox.backend``.

Reads ``{"command": ..., "payload": ...}`` from stdin, writes
``{"ok": true, "result": ...}`` or ``{"ok": false, "error": "..."}`` to stdout.
The database comes from ``DATABASE_URL`` (a ``.env`` in the working directory
is honored). Exit status is 0 whenever a response was written; 2 when the
request itself could not be read.
"""

from __future__ import annotations

import json
import os
import sys

from dotenv import load_dotenv

from ..errors import LedgerInboxError
from ..logging_setup import configure_logging, get_logger


def main() -> int:
    load_dotenv(override=False)
    configure_logging()
    logger = get_logger("ledger_inbox.backend.main")

    try:
        request = json.load(sys.stdin)
        command = request["command"]
        payload = request.get("payload")
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        print(f"invalid request: {e}", file=sys.stderr)
        return 2

    # Deferred so that a malformed request does not pay for DB setup.
    from .service import LedgerBackend

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        json.dump({"ok": False, "error": "DATABASE_URL is not set"}, sys.stdout)
        return 0

    try:
        result = LedgerBackend(database_url=database_url).dispatch(command, payload)
    except LedgerInboxError as e:
        json.dump({"ok": False, "error": str(e)}, sys.stdout)
        return 0
    except Exception as e:  # noqa: BLE001 - report every failure on the wire
        logger.exception("backend command %s failed", command)
        json.dump({"ok": False, "error": f"{type(e).__name__}: {e}"}, sys.stdout)
        return 0

    json.dump({"ok": True, "result": result}, sys.stdout)
    return 0


if __name__ == "__main__":  # pragma: no cover - exercised via subprocess
    sys.exit(main())

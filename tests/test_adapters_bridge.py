from __future__ import annotations

import asyncio

import pytest

from ledger_inbox import (
    BackendCallError,
    CommitResult,
    InMemoryInbox,
    LocalAdapter,
    RemoteAdapter,
    TransportBridge,
)
from ledger_inbox.demo_data import demo_networth_curve, demo_summary
from tests.helpers.fake_hosts import FailingHost, RecordingSink, ScriptedHost

BACKEND_ROW = {
    "tempId": "9f1c",
    "date": "2025-01-04",
    "description": "BLUE BOTTLE COFFEE",
    "amount": -8.5,
    "flow": "debit",
    "suggestedCategory": "Dining",
}


def _adapter(host, *, strict: bool = False, store: InMemoryInbox | None = None) -> LocalAdapter:
    return LocalAdapter(TransportBridge(host, sink=RecordingSink()), store=store, strict=strict)


def test_backend_batch_is_returned_and_mirrored():
    host = ScriptedHost({"import_csv": [BACKEND_ROW]})
    adapter = _adapter(host)

    batch = asyncio.run(adapter.import_batch(b"a,b\n", "bank.csv"))

    assert [it.temp_id for it in batch] == ["9f1c"]
    assert adapter.store.snapshot() == batch
    command, payload = host.calls[0]
    assert command == "import_csv"
    assert payload == {"bytes": [97, 44, 98, 10], "name": "bank.csv"}


def test_backend_get_inbox_wins_over_store():
    store = InMemoryInbox()
    store.append_placeholders("local.csv")
    adapter = _adapter(ScriptedHost({"get_inbox": [BACKEND_ROW]}), store=store)

    batch = asyncio.run(adapter.get_inbox())

    assert [it.description for it in batch] == ["BLUE BOTTLE COFFEE"]


def test_backend_commit_count_is_authoritative_and_store_cleared():
    store = InMemoryInbox(rows_per_import=2)
    store.append_placeholders("x.csv")
    adapter = _adapter(ScriptedHost({"commit_inbox": {"committedCount": 7}}), store=store)

    result = asyncio.run(adapter.commit_batch())

    assert result == CommitResult(committed_count=7)
    assert len(store) == 0


def test_backend_set_category_ack_passes_through():
    host = ScriptedHost({"set_inbox_category": {"ok": False}})
    ack = asyncio.run(_adapter(host).set_category("nope", "Dining"))
    assert ack.ok is False
    assert host.calls == [("set_inbox_category", {"tempId": "nope", "category": "Dining"})]


def test_backend_error_falls_back_by_default():
    adapter = _adapter(FailingHost(BackendCallError("import_csv", "database is locked")))

    batch = asyncio.run(adapter.import_batch(b"", "s.csv"))

    assert [it.temp_id for it in batch] == ["1"]


def test_backend_error_raises_in_strict_mode():
    adapter = _adapter(FailingHost(RuntimeError("database is locked")), strict=True)

    with pytest.raises(BackendCallError) as exc_info:
        asyncio.run(adapter.commit_batch())

    assert exc_info.value.operation == "commit_inbox"
    assert "database is locked" in str(exc_info.value)


def test_unavailable_still_falls_back_in_strict_mode():
    adapter = LocalAdapter(TransportBridge(None), strict=True)
    batch = asyncio.run(adapter.import_batch(b"", "s.csv"))
    assert len(batch) == 1


def test_malformed_response_falls_back():
    adapter = _adapter(ScriptedHost({"import_csv": [{"tempId": "1"}]}))

    batch = asyncio.run(adapter.import_batch(b"", "s.csv"))

    assert [it.description for it in batch] == ["s.csv Row 1"]


def test_scalar_responses_fall_back():
    adapter = _adapter(
        ScriptedHost({"get_inbox": 42, "import_csv": True, "get_networth_curve": True})
    )

    async def scenario():
        inbox = await adapter.get_inbox()
        staged = await adapter.import_batch(b"", "s.csv")
        curve = await adapter.get_networth_curve()
        return inbox, staged, curve

    inbox, staged, curve = asyncio.run(scenario())

    assert inbox == []
    assert [it.temp_id for it in staged] == ["1"]
    assert curve == demo_networth_curve()


def test_scalar_response_raises_in_strict_mode():
    adapter = _adapter(ScriptedHost({"get_inbox": 42}), strict=True)
    with pytest.raises(BackendCallError, match="unexpected response shape"):
        asyncio.run(adapter.get_inbox())


def test_malformed_response_raises_in_strict_mode():
    adapter = _adapter(ScriptedHost({"commit_inbox": {"count": 1}}), strict=True)
    with pytest.raises(BackendCallError):
        asyncio.run(adapter.commit_batch())


def test_null_value_is_treated_as_unavailable():
    adapter = _adapter(ScriptedHost({"get_inbox": None}))
    assert asyncio.run(adapter.get_inbox()) == []


def test_dashboard_reads_fall_back_to_demo_data():
    adapter = LocalAdapter(TransportBridge(None))

    async def scenario():
        return await adapter.get_summary("2025-03"), await adapter.get_networth_curve()

    summary, curve = asyncio.run(scenario())

    assert summary == demo_summary("2025-03")
    assert summary.total_spend == pytest.approx(3320.0)
    assert curve == demo_networth_curve()
    assert len(curve) == 12


def test_dashboard_reads_prefer_backend():
    host = ScriptedHost(
        {
            "get_summary": lambda payload: {
                "month": payload["month"],
                "totalSpend": 12.5,
                "byCategory": [{"category": "Dining", "amount": 12.5}],
                "budgets": [],
            },
            "get_networth_curve": [
                {"date": "2025-01-01", "netWorth": 1.0, "cash": 0.4, "invested": 0.55, "debt": 0.2}
            ],
        }
    )
    adapter = _adapter(host)

    async def scenario():
        return await adapter.get_summary("2025-01"), await adapter.get_networth_curve()

    summary, curve = asyncio.run(scenario())
    assert summary.total_spend == 12.5
    assert summary.by_category[0].category == "Dining"
    assert curve[0].net_worth == 1.0


def test_remote_adapter_serves_from_its_own_store():
    remote = RemoteAdapter()

    async def scenario():
        await remote.import_batch(b"", "r.csv")
        await remote.set_category("1", "Travel")
        batch = await remote.get_inbox()
        result = await remote.commit_batch()
        return batch, result

    batch, result = asyncio.run(scenario())
    assert batch[0].suggested_category == "Travel"
    assert result.committed_count == 1
    assert len(remote.store) == 0


def test_store_rejects_zero_rows_per_import():
    with pytest.raises(ValueError):
        InMemoryInbox(rows_per_import=0)

"""Transaction Store — keyed access and the store-level duplicate guarantee."""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select, text

from rfid_ledger.core import messages
from rfid_ledger.core.domain_types import ScanWindow, TransactionKey
from rfid_ledger.core.errors import DataConflictError, ResourceNotFoundError
from rfid_ledger.models import RfidTransaction
from rfid_ledger.services.transaction_store import SqlTransactionStore

KEY = TransactionKey("TAG1", "EPC001", datetime(2024, 1, 1, 10, 0, 0))


async def test_insert_then_find(test_db, seed_references):
    store = SqlTransactionStore(test_db)
    await store.insert(KEY, seed_references["dock_a"], Decimal("42.5"))

    tx = await store.find_by_key(KEY)
    assert tx is not None
    assert tx.rssi == Decimal("42.5")
    assert await store.exists_by_key(KEY)


async def test_duplicate_insert_from_other_session_is_conflict(
    test_db, test_session_factory, seed_references,
):
    """Two writers that both passed the existence check: the second gets a conflict."""
    dock_a = seed_references["dock_a"]
    await SqlTransactionStore(test_db).insert(KEY, dock_a, Decimal("10"))

    async with test_session_factory() as other:
        with pytest.raises(DataConflictError) as exc:
            await SqlTransactionStore(other).insert(KEY, dock_a, Decimal("20"))
    assert exc.value.message == messages.RFIDTX_ADD_FAILURE

    async with test_session_factory() as fresh:
        count = await fresh.scalar(select(func.count()).select_from(RfidTransaction))
        rssi = await fresh.scalar(select(RfidTransaction.rssi))
    assert count == 1
    assert rssi == Decimal("10")


async def test_delete_by_key(test_db, seed_references):
    store = SqlTransactionStore(test_db)
    await store.insert(KEY, seed_references["dock_a"], Decimal("10"))
    await store.delete_by_key(KEY)
    assert not await store.exists_by_key(KEY)


async def test_scans_in_window_keep_storage_names(test_db, add_scan, seed_references):
    await add_scan("TAG1", "EPC001", "2024-01-01 10:00:00", "10", seed_references["dock_a"])
    rows = await SqlTransactionStore(test_db).scans_in_window(
        ScanWindow(datetime(2024, 1, 1), datetime(2024, 1, 2)), None, None,
    )
    assert [(r.site_name, r.location_name) for r in rows] == [("MAIN..SITE", "DOCK..A")]


async def test_window_bounds_are_inclusive(test_db, add_scan, seed_references):
    dock_a = seed_references["dock_a"]
    await add_scan("TAG1", "EPC001", "2024-01-01 00:00:00", "10", dock_a)
    await add_scan("TAG1", "EPC001", "2024-01-02 00:00:00", "10", dock_a)
    await add_scan("TAG1", "EPC001", "2024-01-03 00:00:00", "10", dock_a)
    counts = await SqlTransactionStore(test_db).read_counts_in_window(
        ScanWindow(datetime(2024, 1, 1), datetime(2024, 1, 2)),
    )
    assert counts == [("EPC001", 2)]


async def test_views_are_display_form_and_ordered(test_db, add_scan, seed_references):
    await add_scan("TAG2", "EPC002", "2024-01-01 10:00:00", "5", seed_references["gate_1"])
    await add_scan("TAG1", "EPC001", "2024-01-01 10:00:00", "5", seed_references["dock_b"])
    await add_scan("TAG1", "EPC001", "2024-01-01 09:00:00", "5", seed_references["dock_a"])
    views = await SqlTransactionStore(test_db).find_by_criteria(None, None, None, None)
    assert [(v.tag_id, v.scan_date.hour) for v in views] == [
        ("TAG1", 9), ("TAG1", 10), ("TAG2", 10),
    ]
    assert views[0].site_name == "MAIN SITE"
    assert views[0].location_name == "DOCK A"
    assert views[2].site_name == "NORTH SITE"


async def test_insert_rejected_by_foreign_key_is_generic_conflict(test_db, seed_references):
    """A non-key integrity failure must not be reported as a duplicate."""
    await test_db.execute(text("PRAGMA foreign_keys=ON"))
    with pytest.raises(DataConflictError) as exc:
        await SqlTransactionStore(test_db).insert(KEY, 999, Decimal("10"))
    assert exc.value.message == messages.DATA_CONFLICT


async def test_delete_of_absent_key_is_conflict(test_db, seed_references):
    with pytest.raises(DataConflictError) as exc:
        await SqlTransactionStore(test_db).delete_by_key(KEY)
    assert exc.value.message == messages.RFIDTX_DELETE_FAILURE


async def test_update_of_row_deleted_elsewhere_is_not_found(
    test_db, test_session_factory, seed_references,
):
    store = SqlTransactionStore(test_db)
    tx = await store.insert(KEY, seed_references["dock_a"], Decimal("10"))

    async with test_session_factory() as other:
        await SqlTransactionStore(other).delete_by_key(KEY)

    tx.rssi = Decimal("20")
    with pytest.raises(ResourceNotFoundError) as exc:
        await store.update(tx)
    assert exc.value.message == messages.RFIDTX_NOT_FOUND
    assert exc.value.context.tag_id == "TAG1"

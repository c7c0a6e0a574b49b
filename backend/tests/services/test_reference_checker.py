"""Reference Checker — fail-fast precedence of cross-entity checks.

Invariants:
    - When several checks would fail, only the earliest in the sequence is reported
    - Steps 1-5 raise InvalidInput (400), step 6 raises DataConflict (409)
"""

from datetime import datetime
from decimal import Decimal

import pytest

from rfid_ledger.core import messages
from rfid_ledger.core.domain_types import NewTransaction, TransactionKey
from rfid_ledger.core.errors import DataConflictError, InvalidInputError
from rfid_ledger.services.reference_checker import ReferenceChecker
from rfid_ledger.services.reference_lookups import (
    SqlLocationLookup, SqlRfidBindingLookup, SqlSiteLookup,
)
from rfid_ledger.services.transaction_store import SqlTransactionStore

SCAN_DATE = datetime(2024, 1, 1, 10, 0, 0)


@pytest.fixture
def checker(test_db, seed_references):
    return ReferenceChecker(
        SqlSiteLookup(test_db),
        SqlLocationLookup(test_db),
        SqlRfidBindingLookup(test_db),
        SqlTransactionStore(test_db),
    )


def _tx(
    site="MAIN..SITE", location="DOCK..A", tag_id="TAG1", epc="EPC001", ref_code=12345,
):
    return NewTransaction(
        key=TransactionKey(tag_id, epc, SCAN_DATE),
        ref_code=ref_code,
        site_name=site,
        location_name=location,
        rssi=Decimal("42"),
    )


async def test_consistent_transaction_resolves_location(checker, seed_references):
    location = await checker.check_new_transaction(_tx())
    assert location.location_id == seed_references["dock_a"]


async def test_missing_location_reported_before_missing_site(checker):
    with pytest.raises(InvalidInputError) as exc:
        await checker.check_new_transaction(_tx(site="NOWHERE", location="NOWHERE"))
    assert exc.value.message == messages.LOCATION_NAME_DOESNT_EXIST


async def test_missing_site(checker):
    with pytest.raises(InvalidInputError) as exc:
        await checker.check_new_transaction(_tx(site="NOWHERE", tag_id="TAG9"))
    assert exc.value.message == messages.SITE_NAME_DOESNT_EXIST


async def test_location_in_other_site_reported_before_binding(checker):
    with pytest.raises(InvalidInputError) as exc:
        await checker.check_new_transaction(
            _tx(location="GATE..1", tag_id="TAG9", ref_code=99999),
        )
    assert exc.value.message == messages.LOCATION_NOT_IN_SITE


async def test_unbound_tag_reported_before_refcode(checker):
    with pytest.raises(InvalidInputError) as exc:
        await checker.check_new_transaction(_tx(epc="EPC002", ref_code=99999))
    assert exc.value.message == messages.TAG_ID_EPC_NO_MATCH
    assert exc.value.context.tag_id == "TAG1"


async def test_refcode_mismatch(checker):
    with pytest.raises(InvalidInputError) as exc:
        await checker.check_new_transaction(_tx(ref_code=54321))
    assert exc.value.message == messages.REFCODE_TAG_ID_EPC_NO_MATCH


async def test_existing_key_is_conflict(checker, add_scan, seed_references):
    await add_scan("TAG1", "EPC001", "2024-01-01 10:00:00", "10", seed_references["dock_a"])
    with pytest.raises(DataConflictError) as exc:
        await checker.check_new_transaction(_tx())
    assert exc.value.message == messages.RFIDTX_ADD_FAILURE
    assert exc.value.http_status == 409


async def test_resolve_location_unknown_site(checker):
    with pytest.raises(InvalidInputError) as exc:
        await checker.resolve_location("NOWHERE", "DOCK..A")
    assert exc.value.message == messages.SITE_NAME_DOESNT_EXIST


async def test_resolve_location_outside_site(checker):
    with pytest.raises(InvalidInputError) as exc:
        await checker.resolve_location("NORTH..SITE", "DOCK..A")
    assert exc.value.message == messages.LOCATION_NOT_IN_SITE


async def test_resolve_location(checker, seed_references):
    location = await checker.resolve_location("NORTH..SITE", "GATE..1")
    assert location.location_id == seed_references["gate_1"]

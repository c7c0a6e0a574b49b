"""Transaction Request Parsing — presence, format and key checks for lifecycle input.

Invariants:
    - Presence runs first and names EVERY missing field, in API order
    - Format runs only when presence passed and reports EVERY violation
    - Parsed names are in storage form, tag_id/epc upper-cased
"""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from rfid_ledger.core import messages
from rfid_ledger.core.errors import InvalidInputError
from rfid_ledger.core.parse_requests import (
    parse_create_request, parse_transaction_key, parse_update_request,
)


def _create(**overrides):
    fields = dict(
        site_name="Main Site",
        epc="epc001",
        ref_code="12345",
        tag_id="tag1",
        location_name="Dock A",
        rssi=Decimal("42.0"),
        scan_date="2024-01-01 10:00:00",
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


# ─── Create ──────────────────────────────────────────────────────

def test_valid_create_is_parsed():
    tx = parse_create_request(_create())
    assert tx.key.tag_id == "TAG1"
    assert tx.key.epc == "EPC001"
    assert tx.key.scan_date == datetime(2024, 1, 1, 10, 0, 0)
    assert tx.ref_code == 12345
    assert tx.site_name == "MAIN..SITE"
    assert tx.location_name == "DOCK..A"
    assert tx.rssi == Decimal("42.0")


def test_all_missing_fields_reported_together():
    request = SimpleNamespace(
        site_name=None, epc="", ref_code=None, tag_id="  ",
        location_name=None, rssi=None, scan_date=None,
    )
    with pytest.raises(InvalidInputError) as exc:
        parse_create_request(request)
    assert exc.value.message == messages.EMPTY_FIELDS.format(
        fields="siteName, epc, refCode, tagId, locationName, rssi, scanDate",
    )
    assert exc.value.context.fields == [
        "siteName", "epc", "refCode", "tagId", "locationName", "rssi", "scanDate",
    ]


def test_zero_rssi_counts_as_missing():
    with pytest.raises(InvalidInputError) as exc:
        parse_create_request(_create(rssi=Decimal("0")))
    assert exc.value.context.fields == ["rssi"]


def test_presence_checked_before_format():
    """A bad EPC is not reported while another field is missing."""
    with pytest.raises(InvalidInputError) as exc:
        parse_create_request(_create(epc="bogus", site_name=None))
    assert exc.value.context.fields == ["siteName"]
    assert "EPC" not in exc.value.message


def test_every_format_violation_reported_together():
    with pytest.raises(InvalidInputError) as exc:
        parse_create_request(_create(
            scan_date="2024/01/01", epc="EPC1", ref_code="12", tag_id="TG1",
        ))
    parts = exc.value.message.split("; ")
    assert parts == [
        messages.DATE_FORMAT.format(value="2024/01/01"),
        messages.EPC_FORMAT.format(digits=3),
        messages.REFCODE_FORMAT.format(digits=5),
        messages.TAG_ID_FORMAT.format(min_digits=1, max_digits=10),
    ]


def test_single_format_violation():
    with pytest.raises(InvalidInputError) as exc:
        parse_create_request(_create(epc="EPC12"))
    assert exc.value.message == messages.EPC_FORMAT.format(digits=3)
    assert exc.value.http_status == 400


# ─── Key ─────────────────────────────────────────────────────────

def test_key_is_upper_cased_and_parsed():
    key = parse_transaction_key(" tag1 ", "epc001", "2024-01-01 10:00:00")
    assert key.tag_id == "TAG1"
    assert key.epc == "EPC001"
    assert key.scan_date == datetime(2024, 1, 1, 10, 0, 0)


@pytest.mark.parametrize("tag_id,epc,scan_date", [
    (None, "EPC001", "2024-01-01 10:00:00"),
    ("TAG1", " ", "2024-01-01 10:00:00"),
    ("TAG1", "EPC001", ""),
])
def test_key_requires_all_three_fields(tag_id, epc, scan_date):
    with pytest.raises(InvalidInputError) as exc:
        parse_transaction_key(tag_id, epc, scan_date)
    assert exc.value.message == messages.EMPTY_KEY_FIELDS


def test_key_rejects_malformed_scan_date():
    with pytest.raises(InvalidInputError) as exc:
        parse_transaction_key("TAG1", "EPC001", "01-01-2024")
    assert exc.value.message == messages.DATE_FORMAT.format(value="01-01-2024")


# ─── Update ──────────────────────────────────────────────────────

def test_update_with_only_rssi():
    patch = parse_update_request(
        SimpleNamespace(rssi=Decimal("-50"), site_name=None, location_name=None),
    )
    assert patch.rssi == Decimal("-50")
    assert not patch.moves_location


def test_update_ignores_zero_rssi_and_blank_names():
    patch = parse_update_request(
        SimpleNamespace(rssi=Decimal("0"), site_name=" ", location_name=""),
    )
    assert patch.rssi is None
    assert patch.site_name is None
    assert patch.location_name is None


def test_update_normalizes_names():
    patch = parse_update_request(
        SimpleNamespace(rssi=None, site_name="north site", location_name=None),
    )
    assert patch.site_name == "NORTH..SITE"
    assert patch.moves_location


def test_create_trims_tag_id_and_epc_like_keyed_requests():
    tx = parse_create_request(_create(tag_id=" tag1 ", epc=" epc001"))
    key = parse_transaction_key(" tag1 ", " epc001", "2024-01-01 10:00:00")
    assert tx.key == key
    assert tx.key.tag_id == "TAG1"
    assert tx.key.epc == "EPC001"

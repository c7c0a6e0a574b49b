"""Error Hierarchy — status codes, error codes and the REST envelope."""

from rfid_ledger.core.errors import (
    DataConflictError, DatabaseError, ErrorCategory, ErrorContext,
    InvalidInputError, ResourceNotFoundError, RfidLedgerError,
)
from rfid_ledger.core.messages import ErrorCode


def test_invalid_input_is_400():
    err = InvalidInputError("bad")
    assert err.http_status == 400
    assert err.code == ErrorCode.INVALID_INPUT.value == "ERR-RFIDTX-IN-001"
    assert err.category == ErrorCategory.VALIDATION


def test_resource_not_found_is_404():
    err = ResourceNotFoundError("missing")
    assert err.http_status == 404
    assert err.code == "ERR-RFIDTX-RES-002"


def test_data_conflict_is_409():
    err = DataConflictError("dup")
    assert err.http_status == 409
    assert err.code == "ERR-RFIDTX-ID-003"
    assert err.category == ErrorCategory.CONFLICT


def test_database_error_is_503():
    err = DatabaseError("down", "execute")
    assert err.http_status == 503
    assert err.message == "Database execute failed: down"
    assert err.operation == "execute"


def test_all_errors_share_base():
    for err in (
        InvalidInputError("a"), ResourceNotFoundError("b"),
        DataConflictError("c"), DatabaseError("d", "e"),
    ):
        assert isinstance(err, RfidLedgerError)


def test_to_response_envelope():
    ctx = ErrorContext(tag_id="TAG1", epc="EPC001", fields=["rssi"])
    body = InvalidInputError("The following fields are empty: rssi", ctx).to_response()
    error = body["error"]
    assert error["code"] == "ERR-RFIDTX-IN-001"
    assert error["message"] == "The following fields are empty: rssi"
    assert error["category"] == "validation"
    assert error["severity"] == "error"
    assert error["context"] == {
        "tag_id": "TAG1", "epc": "EPC001", "scan_date": None, "fields": ["rssi"],
    }
    assert "timestamp" in error

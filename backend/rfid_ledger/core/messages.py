"""User-facing messages and error codes for transaction operations.

Invariants:
    - Every message a caller can see is defined here (no inline literals in services)
    - Templates use str.format placeholders; fixed messages have none
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Codes attached to log lines and error envelopes."""
    INVALID_INPUT = "ERR-RFIDTX-IN-001"
    NOT_FOUND = "ERR-RFIDTX-RES-002"
    DATA_INTEGRITY = "ERR-RFIDTX-ID-003"


# ─── Format ──────────────────────────────────────────────────────

DATE_FORMAT = "Date should look like yyyy-MM-dd HH:mm:ss: {value}"
EPC_FORMAT = "EPC should look like 'EPC' followed by {digits} digits"
TAG_ID_FORMAT = "Tag Id should look like 'TAG' followed by {min_digits} to {max_digits} digits"
REFCODE_FORMAT = "RefCode should be {digits} digits long"
N_FORMAT = "N should be a positive integer greater than 0"
DATE_ORDER_ERROR = "Start Date should occur before End date"
EMPTY_FIELDS = "The following fields are empty: {fields}"
EMPTY_KEY_FIELDS = "The following fields cannot be empty: tagId, epc, scanDate"

# ─── Referential ─────────────────────────────────────────────────

LOCATION_NAME_DOESNT_EXIST = "Location Name doesn't exist"
SITE_NAME_DOESNT_EXIST = "Site Name doesn't exist"
LOCATION_NOT_IN_SITE = "Location Name doesn't belong in the site"
TAG_ID_EPC_NO_MATCH = "The provided tag id and epc do not match"
REFCODE_TAG_ID_EPC_NO_MATCH = "The provided refcode does not belong to the tag id and epc"

# ─── Existence ───────────────────────────────────────────────────

NO_TRANSACTIONS = "There are no transactions that match your filter"
RFIDTX_EPC_NOT_FOUND = "RFID transactions with epc {epc} not found"
RFIDTX_TAG_ID_NOT_FOUND = "RFID transactions with tagId {tag_id} not found"
RFIDTX_TAG_ID_EPC_NOT_FOUND = "RFID transactions not found with tagId: {tag_id} and epc: {epc}"
RFIDTX_DATE_NOT_FOUND = "RFID transactions not found between: {start} and {end}"
RFIDTX_NOT_FOUND = "RfidTx not found"
RFIDTX_ADD_FAILURE = "Cannot add Transaction because it already exists"
RFIDTX_DELETE_FAILURE = "Cannot delete Transaction because it does not exist"
DATA_CONFLICT = "The request conflicts with data already stored"

"""Transaction Request Parsing — presence and format checks for create/update/delete input.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Create: presence is checked first and reports EVERY missing field in one error,
      then format is checked and reports EVERY format violation in one error
    - Names leave this module in storage form; tag_id and epc leave trimmed and
      upper-cased, on create and on keyed update/delete alike
    - Field names in messages are the API names (siteName, refCode, ...)

Design Decisions:
    - Explicit ordered (field, is_empty) lists instead of attribute introspection:
      the order of reported fields is stable and reviewable
    - Requests are duck-typed (schema objects or any attribute holder) so the core
      does not import pydantic models
"""

from typing import Any, Callable

from rfid_ledger.core import messages
from rfid_ledger.core.domain_types import (
    DEFAULT_RULES, FormatRules, NewTransaction, TransactionKey, TransactionPatch,
)
from rfid_ledger.core.errors import ErrorContext, InvalidInputError
from rfid_ledger.core.normalize_names import normalize
from rfid_ledger.core.validate_formats import (
    is_blank, is_null_or_zero, is_valid_date, is_valid_epc,
    is_valid_refcode, is_valid_tag, parse_date,
)

FieldCheck = tuple[str, Callable[[Any], bool]]

CREATE_REQUIRED_FIELDS: tuple[FieldCheck, ...] = (
    ("siteName", lambda r: is_blank(r.site_name)),
    ("epc", lambda r: is_blank(r.epc)),
    ("refCode", lambda r: is_blank(r.ref_code)),
    ("tagId", lambda r: is_blank(r.tag_id)),
    ("locationName", lambda r: is_blank(r.location_name)),
    ("rssi", lambda r: is_null_or_zero(r.rssi)),
    ("scanDate", lambda r: is_blank(r.scan_date)),
)


def find_empty_fields(request: Any, checks: tuple[FieldCheck, ...]) -> list[str]:
    """Names of every field whose emptiness predicate holds, in declaration order."""
    return [name for name, is_empty in checks if is_empty(request)]


def parse_create_request(
    request: Any, rules: FormatRules = DEFAULT_RULES,
) -> NewTransaction:
    """Validate a create request exhaustively and return its parsed form."""
    missing = find_empty_fields(request, CREATE_REQUIRED_FIELDS)
    if missing:
        raise InvalidInputError(
            messages.EMPTY_FIELDS.format(fields=", ".join(missing)),
            ErrorContext(fields=missing),
        )

    tag_id = request.tag_id.strip()
    epc = request.epc.strip()
    problems: list[str] = []
    if not is_valid_date(request.scan_date):
        problems.append(messages.DATE_FORMAT.format(value=request.scan_date))
    if not is_valid_epc(epc, rules):
        problems.append(messages.EPC_FORMAT.format(digits=rules.epc_digits))
    if not is_valid_refcode(request.ref_code, rules):
        problems.append(messages.REFCODE_FORMAT.format(digits=rules.refcode_digits))
    if not is_valid_tag(tag_id, rules):
        problems.append(messages.TAG_ID_FORMAT.format(
            min_digits=rules.tag_min_digits, max_digits=rules.tag_max_digits,
        ))
    if problems:
        raise InvalidInputError("; ".join(problems))

    key = TransactionKey(
        tag_id=tag_id.upper(),
        epc=epc.upper(),
        scan_date=parse_date(request.scan_date),
    )
    return NewTransaction(
        key=key,
        ref_code=int(request.ref_code),
        site_name=normalize(request.site_name),
        location_name=normalize(request.location_name),
        rssi=request.rssi,
    )


def parse_transaction_key(
    tag_id: str | None, epc: str | None, scan_date: str | None,
) -> TransactionKey:
    """Key of an existing transaction, as addressed by update and delete."""
    if is_blank(tag_id) or is_blank(epc) or is_blank(scan_date):
        raise InvalidInputError(messages.EMPTY_KEY_FIELDS)
    if not is_valid_date(scan_date):
        raise InvalidInputError(messages.DATE_FORMAT.format(value=scan_date))
    return TransactionKey(
        tag_id=tag_id.strip().upper(),
        epc=epc.strip().upper(),
        scan_date=parse_date(scan_date),
    )


def parse_update_request(request: Any) -> TransactionPatch:
    """Keep only the fields an update actually supplies."""
    return TransactionPatch(
        rssi=None if is_null_or_zero(request.rssi) else request.rssi,
        site_name=None if is_blank(request.site_name) else normalize(request.site_name),
        location_name=(
            None if is_blank(request.location_name)
            else normalize(request.location_name)
        ),
    )

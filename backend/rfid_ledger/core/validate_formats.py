"""Format Validation — pure predicates for the string shapes accepted at the boundary.

Invariants:
    - All functions are PURE: no IO, no side effects, never raise
    - Every predicate returns bool; callers decide how to aggregate messages
    - EPC and tag checks are case-insensitive; digit bounds come from FormatRules

Design Decisions:
    - [0-9] over \\d: \\d accepts non-ASCII digits that the store would later reject
    - Date check is regex shape AND strptime: strptime alone accepts "2024-1-1 1:0:0"
"""

import re
from datetime import datetime
from decimal import Decimal

from rfid_ledger.core.domain_types import DATETIME_FORMAT, DEFAULT_RULES, FormatRules

_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")


def is_blank(value: str | None) -> bool:
    """True for None or a string that is empty after trimming."""
    return value is None or not value.strip()


def is_null_or_zero(value: Decimal | None) -> bool:
    """True for None or a decimal numerically equal to zero."""
    return value is None or value == 0


def is_valid_epc(value: str | None, rules: FormatRules = DEFAULT_RULES) -> bool:
    if value is None:
        return False
    pattern = rf"EPC[0-9]{{{rules.epc_digits}}}"
    return re.fullmatch(pattern, value, re.IGNORECASE) is not None


def is_valid_tag(value: str | None, rules: FormatRules = DEFAULT_RULES) -> bool:
    if value is None:
        return False
    pattern = rf"TAG[0-9]{{{rules.tag_min_digits},{rules.tag_max_digits}}}"
    return re.fullmatch(pattern, value, re.IGNORECASE) is not None


def is_valid_refcode(value: str | None, rules: FormatRules = DEFAULT_RULES) -> bool:
    if value is None:
        return False
    return re.fullmatch(rf"[0-9]{{{rules.refcode_digits}}}", value) is not None


def is_valid_date(value: str | None) -> bool:
    """Fixed yyyy-MM-dd HH:mm:ss shape that also parses to a real instant."""
    if is_blank(value) or _DATE_SHAPE.fullmatch(value) is None:
        return False
    try:
        datetime.strptime(value, DATETIME_FORMAT)
    except ValueError:
        return False
    return True


def is_positive_integer(value: int | None) -> bool:
    return value is not None and value > 0


def dates_in_order(start: datetime, end: datetime) -> bool:
    """Start may equal end; the window is inclusive."""
    return start <= end


def parse_date(value: str) -> datetime:
    """Parse a string already accepted by is_valid_date."""
    return datetime.strptime(value, DATETIME_FORMAT)

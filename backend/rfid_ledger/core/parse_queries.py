"""Query Parameter Parsing — validates literal parameters of the analytic and lookup queries.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Windowed queries require start <= end, else "date order error"
    - Format problems within one call are reported together in one InvalidInputError
    - Optional filters that are blank are treated as omitted (None)
"""

from dataclasses import dataclass
from datetime import datetime

from rfid_ledger.core import messages
from rfid_ledger.core.domain_types import DEFAULT_RULES, FormatRules, ScanWindow
from rfid_ledger.core.errors import InvalidInputError
from rfid_ledger.core.normalize_names import normalize
from rfid_ledger.core.validate_formats import (
    dates_in_order, is_blank, is_positive_integer, is_valid_date,
    is_valid_epc, is_valid_tag, parse_date,
)


@dataclass(frozen=True)
class LatestScansQuery:
    window: ScanWindow
    epc: str | None = None
    site_name: str | None = None


@dataclass(frozen=True)
class TopReadsQuery:
    window: ScanWindow
    limit: int


@dataclass(frozen=True)
class CriteriaQuery:
    epc: str | None = None
    tag_id: str | None = None
    start: datetime | None = None
    end: datetime | None = None


def _raise_if_any(problems: list[str]) -> None:
    if problems:
        raise InvalidInputError("; ".join(problems))


def _window_problems(start: str | None, end: str | None) -> tuple[list[str], ScanWindow | None]:
    problems: list[str] = []
    start_at = parse_date(start) if is_valid_date(start) else None
    end_at = parse_date(end) if is_valid_date(end) else None
    if start_at is None:
        problems.append(messages.DATE_FORMAT.format(value=start))
    if end_at is None:
        problems.append(messages.DATE_FORMAT.format(value=end))
    if start_at is not None and end_at is not None:
        if not dates_in_order(start_at, end_at):
            problems.append(messages.DATE_ORDER_ERROR)
            return problems, None
        return problems, ScanWindow(start_at, end_at)
    return problems, None


def parse_latest_scans_query(
    start: str | None,
    end: str | None,
    epc: str | None = None,
    site_name: str | None = None,
    rules: FormatRules = DEFAULT_RULES,
) -> LatestScansQuery:
    problems, window = _window_problems(start, end)
    if not is_blank(epc) and not is_valid_epc(epc, rules):
        problems.append(messages.EPC_FORMAT.format(digits=rules.epc_digits))
    _raise_if_any(problems)
    return LatestScansQuery(
        window=window,
        epc=None if is_blank(epc) else epc.upper(),
        site_name=None if is_blank(site_name) else normalize(site_name),
    )


def parse_top_reads_query(
    limit: int | None, start: str | None, end: str | None,
) -> TopReadsQuery:
    problems, window = _window_problems(start, end)
    if not is_positive_integer(limit):
        problems.append(messages.N_FORMAT)
    _raise_if_any(problems)
    return TopReadsQuery(window=window, limit=limit)


def parse_criteria_query(
    epc: str | None = None,
    tag_id: str | None = None,
    start: str | None = None,
    end: str | None = None,
    rules: FormatRules = DEFAULT_RULES,
) -> CriteriaQuery:
    """AND over supplied filters; omitted ones are not applied."""
    problems: list[str] = []
    if not is_blank(epc) and not is_valid_epc(epc, rules):
        problems.append(messages.EPC_FORMAT.format(digits=rules.epc_digits))
    if not is_blank(tag_id) and not is_valid_tag(tag_id, rules):
        problems.append(messages.TAG_ID_FORMAT.format(
            min_digits=rules.tag_min_digits, max_digits=rules.tag_max_digits,
        ))
    for value in (start, end):
        if not is_blank(value) and not is_valid_date(value):
            problems.append(messages.DATE_FORMAT.format(value=value))
    _raise_if_any(problems)

    start_at = None if is_blank(start) else parse_date(start)
    end_at = None if is_blank(end) else parse_date(end)
    if start_at is not None and end_at is not None and not dates_in_order(start_at, end_at):
        raise InvalidInputError(messages.DATE_ORDER_ERROR)
    return CriteriaQuery(
        epc=None if is_blank(epc) else epc.upper(),
        tag_id=None if is_blank(tag_id) else tag_id.upper(),
        start=start_at,
        end=end_at,
    )


# ─── Narrow lookups ──────────────────────────────────────────────

def parse_epc(epc: str | None, rules: FormatRules = DEFAULT_RULES) -> str:
    if not is_valid_epc(epc, rules):
        raise InvalidInputError(messages.EPC_FORMAT.format(digits=rules.epc_digits))
    return epc.upper()


def parse_tag_id(tag_id: str | None, rules: FormatRules = DEFAULT_RULES) -> str:
    if not is_valid_tag(tag_id, rules):
        raise InvalidInputError(messages.TAG_ID_FORMAT.format(
            min_digits=rules.tag_min_digits, max_digits=rules.tag_max_digits,
        ))
    return tag_id.upper()


def parse_epc_and_tag_id(
    epc: str | None, tag_id: str | None, rules: FormatRules = DEFAULT_RULES,
) -> tuple[str, str]:
    problems: list[str] = []
    if not is_valid_tag(tag_id, rules):
        problems.append(messages.TAG_ID_FORMAT.format(
            min_digits=rules.tag_min_digits, max_digits=rules.tag_max_digits,
        ))
    if not is_valid_epc(epc, rules):
        problems.append(messages.EPC_FORMAT.format(digits=rules.epc_digits))
    _raise_if_any(problems)
    return epc.upper(), tag_id.upper()


def parse_date_range(start: str | None, end: str | None) -> ScanWindow:
    problems, window = _window_problems(start, end)
    _raise_if_any(problems)
    return window

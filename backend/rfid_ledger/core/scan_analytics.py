"""Scan Analytics — windowed aggregations over transaction rows.

Invariants:
    - All functions are PURE and deterministic for any input ordering
    - latest_scans_per_epc: one result per EPC; count and average cover ALL rows of
      that EPC, the location comes from the latest row only
    - Latest row: greatest scan_date, ties broken by smallest tag_id
    - rank_top_reads: count descending, ties broken by EPC ascending, first N kept

Design Decisions:
    - Two-pass group-then-reduce instead of SQL window functions: identical
      semantics on PostgreSQL and SQLite, and the tie-break is explicit here
      rather than left to row order
"""

from collections import defaultdict
from typing import Iterable

from rfid_ledger.core.domain_types import LatestEpc, ScanRow, TopEpc
from rfid_ledger.core.normalize_names import display_location


def group_by_epc(rows: Iterable[ScanRow]) -> dict[str, list[ScanRow]]:
    groups: dict[str, list[ScanRow]] = defaultdict(list)
    for row in rows:
        groups[row.epc].append(row)
    return dict(groups)


def pick_latest(rows: list[ScanRow]) -> ScanRow:
    """Greatest scan_date; among equal scan_dates the smallest tag_id."""
    latest = rows[0]
    for row in rows[1:]:
        if row.scan_date > latest.scan_date or (
            row.scan_date == latest.scan_date and row.tag_id < latest.tag_id
        ):
            latest = row
    return latest


def summarize_epc(epc: str, rows: list[ScanRow]) -> LatestEpc:
    latest = pick_latest(rows)
    total = sum(row.rssi for row in rows)
    return LatestEpc(
        epc=epc,
        transaction_count=len(rows),
        average_rssi=total / len(rows),
        most_recent_location=display_location(latest.site_name, latest.location_name),
    )


def latest_scans_per_epc(rows: Iterable[ScanRow]) -> list[LatestEpc]:
    """One summary per EPC, ordered by EPC."""
    groups = group_by_epc(rows)
    return [summarize_epc(epc, groups[epc]) for epc in sorted(groups)]


def rank_top_reads(counts: Iterable[tuple[str, int]], limit: int) -> list[TopEpc]:
    """Top `limit` EPCs by read count."""
    ranked = sorted(counts, key=lambda item: (-item[1], item[0]))
    return [TopEpc(epc=epc, read_count=count) for epc, count in ranked[:limit]]

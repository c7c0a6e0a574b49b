"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Site, location and binding lookups are read-only; their CRUD lives elsewhere
    - Names passed to lookups are already in storage form
    - TransactionStore.insert raises DataConflictError when the key already exists,
      delete_by_key when nothing was removed; update raises ResourceNotFoundError
      when the row is gone

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the shell orchestrates the awaits
      around the pure parsing and aggregation functions
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from rfid_ledger.core.domain_types import (
    RfidKey, ScanRow, ScanWindow, TransactionKey, TransactionView,
)


class SiteLike(Protocol):
    site_id: int
    site_name: str


class LocationLike(Protocol):
    location_id: int
    location_name: str
    site_id: int


class TransactionLike(Protocol):
    tag_id: str
    epc: str
    scan_date: datetime
    rssi: Decimal
    location_id: int


class SiteLookup(Protocol):
    """Contract for site reads — implemented by shell."""
    async def site_exists(self, site_name: str) -> bool: ...
    async def find_site_by_name(self, site_name: str) -> SiteLike | None: ...


class LocationLookup(Protocol):
    """Contract for location reads — implemented by shell."""
    async def location_exists(self, location_name: str) -> bool: ...
    async def find_location_matching_site(
        self, location_name: str, site_name: str,
    ) -> LocationLike | None: ...
    async def describe_location(self, location_id: int) -> tuple[str, str] | None: ...


class RfidBindingLookup(Protocol):
    """Contract for tag/EPC binding reads — implemented by shell."""
    async def binding_exists(self, key: RfidKey) -> bool: ...
    async def ref_code_matches(self, key: RfidKey, ref_code: int) -> bool: ...


class TransactionStore(Protocol):
    """Contract for transaction persistence and queries — implemented by shell."""
    async def find_by_key(self, key: TransactionKey) -> TransactionLike | None: ...
    async def exists_by_key(self, key: TransactionKey) -> bool: ...
    async def insert(
        self, key: TransactionKey, location_id: int, rssi: Decimal,
    ) -> TransactionLike: ...
    async def update(self, transaction: TransactionLike) -> TransactionLike: ...
    async def delete_by_key(self, key: TransactionKey) -> None: ...

    async def scans_in_window(
        self, window: ScanWindow, epc: str | None, site_name: str | None,
    ) -> list[ScanRow]: ...
    async def read_counts_in_window(
        self, window: ScanWindow,
    ) -> list[tuple[str, int]]: ...
    async def find_by_criteria(
        self,
        epc: str | None,
        tag_id: str | None,
        start: datetime | None,
        end: datetime | None,
    ) -> list[TransactionView]: ...

    async def find_by_epc(self, epc: str) -> list[TransactionView]: ...
    async def find_by_tag_id(self, tag_id: str) -> list[TransactionView]: ...
    async def find_by_epc_and_tag_id(
        self, epc: str, tag_id: str,
    ) -> list[TransactionView]: ...
    async def find_by_scan_date_between(
        self, window: ScanWindow,
    ) -> list[TransactionView]: ...

"""Domain Types — value objects that replace bare primitives across the codebase.

Invariants:
    - RfidKey (tag_id, epc) and TransactionKey (tag_id, epc, scan_date) are frozen and hashable
    - tag_id and epc inside keys are always upper-case
    - FormatRules is immutable; DEFAULT_RULES holds the built-in constants
    - Site and location names carried by these types are in storage form unless named display_*

Design Decisions:
    - Frozen dataclasses over ORM composite identities: usable as dict keys in the core (ADR: functional core)
    - Decimal for RSSI end to end: averages are exact, serialization decides precision
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


# ─── Constants ───────────────────────────────────────────────────

DATETIME_PATTERN = "yyyy-MM-dd HH:mm:ss"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
NAME_SEPARATOR = ".."


@dataclass(frozen=True)
class FormatRules:
    """Digit bounds for the literal formats accepted at the boundary."""
    epc_digits: int = 3
    tag_min_digits: int = 1
    tag_max_digits: int = 10
    refcode_digits: int = 5


DEFAULT_RULES = FormatRules()


# ─── Identity Types ──────────────────────────────────────────────

@dataclass(frozen=True)
class RfidKey:
    """Identity of a tag-to-EPC binding."""
    tag_id: str
    epc: str


@dataclass(frozen=True)
class TransactionKey:
    """Identity of one scan event."""
    tag_id: str
    epc: str
    scan_date: datetime

    @property
    def rfid(self) -> RfidKey:
        return RfidKey(self.tag_id, self.epc)


# ─── Parsed Requests ─────────────────────────────────────────────

@dataclass(frozen=True)
class NewTransaction:
    """A create request that passed presence and format checks."""
    key: TransactionKey
    ref_code: int
    site_name: str
    location_name: str
    rssi: Decimal


@dataclass(frozen=True)
class TransactionPatch:
    """Non-key fields an update may replace; None means keep current."""
    rssi: Decimal | None = None
    site_name: str | None = None
    location_name: str | None = None

    @property
    def moves_location(self) -> bool:
        return self.site_name is not None or self.location_name is not None


@dataclass(frozen=True)
class ScanWindow:
    """Inclusive [start, end] time window."""
    start: datetime
    end: datetime


# ─── Query Rows & Results ────────────────────────────────────────

@dataclass(frozen=True)
class ScanRow:
    """One transaction joined to its location and site (storage-form names)."""
    tag_id: str
    epc: str
    scan_date: datetime
    rssi: Decimal
    site_name: str
    location_name: str


@dataclass(frozen=True)
class LatestEpc:
    """Most recent scan of an EPC plus aggregates over the whole window."""
    epc: str
    transaction_count: int
    average_rssi: Decimal
    most_recent_location: str


@dataclass(frozen=True)
class TopEpc:
    """Read count for one EPC."""
    epc: str
    read_count: int


@dataclass(frozen=True)
class TransactionView:
    """A transaction ready for display (names de-normalized)."""
    tag_id: str
    epc: str
    scan_date: datetime
    rssi: Decimal
    location_id: int
    location_name: str
    site_name: str

"""RfidTransaction ORM — one observed scan of a tag at a location and time.

Invariants:
    - Composite primary key (tag_id, epc, scan_date): the store-level guarantee
      that no two scans share a key, whatever the application checks saw
    - No FK to rfid_bindings: the binding is checked in application code
    - location_id is a plain FK (no cascade)

Design Decisions:
    - No relationship to Location: display names are resolved by explicit
      joins/lookups, never by lazy dereference at serialization time
    - Numeric(10, 2) for rssi: exact decimal readings
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from rfid_ledger.db.base import Base


class RfidTransaction(Base):
    """Scan event keyed by tag, EPC and scan instant."""
    __tablename__ = "rfid_transactions"

    tag_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    epc: Mapped[str] = mapped_column(String(20), primary_key=True, index=True)
    scan_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), primary_key=True, index=True,
    )
    location_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("locations.location_id"), nullable=False,
    )
    rssi: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

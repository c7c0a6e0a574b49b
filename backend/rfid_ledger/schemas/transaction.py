"""Transaction Schemas — Pydantic models for the transaction API boundary.

Invariants:
    - Wire names are camelCase (siteName, tagId, refCode, scanDate); Python names snake_case
    - Create fields are all optional at this layer: the core reports every missing
      field in one message instead of letting pydantic reject the first one
    - scanDate is rendered back in the yyyy-MM-dd HH:mm:ss pattern

Design Decisions:
    - from_view()/from_summary() builders keep route handlers free of mapping code
    - coerce_numbers_to_str: refCode 12345 and "12345" are the same request
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from rfid_ledger.core.domain_types import (
    DATETIME_FORMAT, LatestEpc, TopEpc, TransactionView,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class TransactionCreate(_CamelModel):
    """Scan event as reported by a reader; all seven fields are required by the core."""
    site_name: str | None = None
    epc: str | None = None
    ref_code: str | None = None
    tag_id: str | None = None
    location_name: str | None = None
    rssi: Decimal | None = None
    scan_date: str | None = None


class TransactionUpdate(_CamelModel):
    """Partial update: omitted, blank or zero fields keep their stored value."""
    site_name: str | None = None
    location_name: str | None = None
    rssi: Decimal | None = None


class TransactionResponse(_CamelModel):
    tag_id: str
    epc: str
    scan_date: datetime
    rssi: float
    location_id: int
    location_name: str
    site_name: str

    @field_serializer("scan_date")
    def format_scan_date(self, value: datetime) -> str:
        return value.strftime(DATETIME_FORMAT)

    @classmethod
    def from_view(cls, view: TransactionView) -> "TransactionResponse":
        return cls(
            tag_id=view.tag_id,
            epc=view.epc,
            scan_date=view.scan_date,
            rssi=float(view.rssi),
            location_id=view.location_id,
            location_name=view.location_name,
            site_name=view.site_name,
        )


class LatestScanResponse(_CamelModel):
    epc: str
    transaction_count: int
    average_rssi: float
    most_recent_location: str

    @classmethod
    def from_summary(cls, summary: LatestEpc) -> "LatestScanResponse":
        return cls(
            epc=summary.epc,
            transaction_count=summary.transaction_count,
            average_rssi=float(summary.average_rssi),
            most_recent_location=summary.most_recent_location,
        )


class TopReadResponse(_CamelModel):
    epc: str
    read_count: int

    @classmethod
    def from_summary(cls, summary: TopEpc) -> "TopReadResponse":
        return cls(epc=summary.epc, read_count=summary.read_count)

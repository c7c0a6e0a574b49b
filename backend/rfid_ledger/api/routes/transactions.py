"""Transaction Routes — HTTP surface for scan transactions and their analytics.

Invariants:
    - Query parameter names match the reader/dashboard clients (camelCase, N)
    - Handlers only translate parameters and map results to response schemas
    - Errors propagate to the global handlers (400/404/409)

Design Decisions:
    - Services built per request from the request-scoped AsyncSession
    - Update and delete address a scan by query parameters, since scanDate
      contains a space and does not sit well in a path segment
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rfid_ledger.config import get_settings
from rfid_ledger.infrastructure.database import get_db
from rfid_ledger.schemas.transaction import (
    LatestScanResponse, TopReadResponse, TransactionCreate,
    TransactionResponse, TransactionUpdate,
)
from rfid_ledger.services.transaction_analytics import TransactionAnalytics
from rfid_ledger.services.transaction_lifecycle import TransactionLifecycle

router = APIRouter(prefix="/api/v1/rfid", tags=["rfid-transactions"])


def get_lifecycle(db: AsyncSession = Depends(get_db)) -> TransactionLifecycle:
    return TransactionLifecycle.for_session(db, get_settings().format_rules())


def get_analytics(db: AsyncSession = Depends(get_db)) -> TransactionAnalytics:
    return TransactionAnalytics.for_session(db, get_settings().format_rules())


# ─── Analytics ───────────────────────────────────────────────────

@router.get("/latest-scans", response_model=list[LatestScanResponse])
async def latest_scans(
    start: str | None = Query(None, alias="startdatetime"),
    end: str | None = Query(None, alias="enddatetime"),
    epc: str | None = Query(None),
    site_name: str | None = Query(None, alias="siteName"),
    analytics: TransactionAnalytics = Depends(get_analytics),
):
    """Latest scan per EPC in the window, with count and mean RSSI."""
    summaries = await analytics.latest_scans(start, end, epc, site_name)
    return [LatestScanResponse.from_summary(s) for s in summaries]


@router.get("/top-reads", response_model=list[TopReadResponse])
async def top_reads(
    limit: int | None = Query(None, alias="N"),
    start: str | None = Query(None, alias="startdatetime"),
    end: str | None = Query(None, alias="enddatetime"),
    analytics: TransactionAnalytics = Depends(get_analytics),
):
    """The N most-read EPCs in the window."""
    ranked = await analytics.top_reads(limit, start, end)
    return [TopReadResponse.from_summary(r) for r in ranked]


@router.get("/search", response_model=list[TransactionResponse])
async def search(
    epc: str | None = Query(None),
    tag_id: str | None = Query(None, alias="tagId"),
    start: str | None = Query(None, alias="startDate"),
    end: str | None = Query(None, alias="endDate"),
    analytics: TransactionAnalytics = Depends(get_analytics),
):
    """Transactions matching every supplied filter."""
    views = await analytics.search(epc, tag_id, start, end)
    return [TransactionResponse.from_view(v) for v in views]


@router.get("/by-epc", response_model=list[TransactionResponse])
async def by_epc(
    epc: str | None = Query(None),
    analytics: TransactionAnalytics = Depends(get_analytics),
):
    views = await analytics.by_epc(epc)
    return [TransactionResponse.from_view(v) for v in views]


@router.get("/by-tagid", response_model=list[TransactionResponse])
async def by_tag_id(
    tag_id: str | None = Query(None, alias="tagId"),
    analytics: TransactionAnalytics = Depends(get_analytics),
):
    views = await analytics.by_tag_id(tag_id)
    return [TransactionResponse.from_view(v) for v in views]


@router.get("/by-epc-and-tagid", response_model=list[TransactionResponse])
async def by_epc_and_tag_id(
    epc: str | None = Query(None),
    tag_id: str | None = Query(None, alias="tagId"),
    analytics: TransactionAnalytics = Depends(get_analytics),
):
    views = await analytics.by_epc_and_tag_id(epc, tag_id)
    return [TransactionResponse.from_view(v) for v in views]


@router.get("/by-scan-date-range", response_model=list[TransactionResponse])
async def by_scan_date_range(
    start: str | None = Query(None, alias="startDate"),
    end: str | None = Query(None, alias="endDate"),
    analytics: TransactionAnalytics = Depends(get_analytics),
):
    views = await analytics.by_scan_date_range(start, end)
    return [TransactionResponse.from_view(v) for v in views]


# ─── Lifecycle ───────────────────────────────────────────────────

@router.post(
    "/transactions", response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(
    body: TransactionCreate,
    lifecycle: TransactionLifecycle = Depends(get_lifecycle),
):
    """Record one scan event."""
    view = await lifecycle.create(body)
    return TransactionResponse.from_view(view)


@router.put("/transactions", response_model=TransactionResponse)
async def update_transaction(
    body: TransactionUpdate,
    tag_id: str | None = Query(None, alias="tagId"),
    epc: str | None = Query(None),
    scan_date: str | None = Query(None, alias="scanDate"),
    lifecycle: TransactionLifecycle = Depends(get_lifecycle),
):
    """Change rssi and/or site/location of a recorded scan."""
    view = await lifecycle.update(tag_id, epc, scan_date, body)
    return TransactionResponse.from_view(view)


@router.delete("/transactions", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    tag_id: str | None = Query(None, alias="tagId"),
    epc: str | None = Query(None),
    scan_date: str | None = Query(None, alias="scanDate"),
    lifecycle: TransactionLifecycle = Depends(get_lifecycle),
):
    """Remove a recorded scan by its exact key."""
    await lifecycle.delete(tag_id, epc, scan_date)

"""Transaction Store — SQL persistence and queries for scan transactions.

Invariants:
    - Rows are addressed by TransactionKey (tag_id, epc, scan_date)
    - Writes never report success for a row they did not touch: after rollback an
      insert collision or a delete that removed nothing is DataConflictError, an
      update of a row deleted meanwhile is ResourceNotFoundError
    - Query methods return core value types, never ORM instances
    - TransactionView names are in display form; ScanRow names stay in storage form
    - Listing queries order by scan_date, tag_id, epc

Design Decisions:
    - Latest-per-EPC reads raw window rows and reduces in core/scan_analytics.py;
      top reads pushes only GROUP BY epc to SQL and ranks in the core
    - Location and site names come from explicit joins, not ORM relationships
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import FlushError, StaleDataError

from rfid_ledger.core import messages
from rfid_ledger.core.domain_types import (
    ScanRow, ScanWindow, TransactionKey, TransactionView,
)
from rfid_ledger.core.errors import (
    DataConflictError, ErrorContext, ResourceNotFoundError,
)
from rfid_ledger.core.normalize_names import denormalize
from rfid_ledger.models.location import Location
from rfid_ledger.models.rfid_transaction import RfidTransaction
from rfid_ledger.models.site import Site

logger = logging.getLogger(__name__)


def _key_filter(key: TransactionKey):
    return (
        RfidTransaction.tag_id == key.tag_id,
        RfidTransaction.epc == key.epc,
        RfidTransaction.scan_date == key.scan_date,
    )


def _context(key: TransactionKey) -> ErrorContext:
    return ErrorContext(
        tag_id=key.tag_id, epc=key.epc,
        scan_date=key.scan_date.isoformat(sep=" "),
    )


def _view_query() -> Select:
    return (
        select(RfidTransaction, Site.site_name, Location.location_name)
        .join(Location, RfidTransaction.location_id == Location.location_id)
        .join(Site, Location.site_id == Site.site_id)
        .order_by(
            RfidTransaction.scan_date,
            RfidTransaction.tag_id,
            RfidTransaction.epc,
        )
    )


def _to_view(tx: RfidTransaction, site_name: str, location_name: str) -> TransactionView:
    return TransactionView(
        tag_id=tx.tag_id,
        epc=tx.epc,
        scan_date=tx.scan_date,
        rssi=tx.rssi,
        location_id=tx.location_id,
        location_name=denormalize(location_name),
        site_name=denormalize(site_name),
    )


class SqlTransactionStore:
    """TransactionStore over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Keyed access ────────────────────────────────────────────

    async def find_by_key(self, key: TransactionKey) -> RfidTransaction | None:
        result = await self.db.execute(
            select(RfidTransaction).where(*_key_filter(key)),
        )
        return result.scalar_one_or_none()

    async def exists_by_key(self, key: TransactionKey) -> bool:
        result = await self.db.execute(
            select(RfidTransaction.tag_id).where(*_key_filter(key)).limit(1),
        )
        return result.scalar_one_or_none() is not None

    async def insert(
        self, key: TransactionKey, location_id: int, rssi: Decimal,
    ) -> RfidTransaction:
        tx = RfidTransaction(
            tag_id=key.tag_id,
            epc=key.epc,
            scan_date=key.scan_date,
            location_id=location_id,
            rssi=rssi,
        )
        self.db.add(tx)
        try:
            await self.db.commit()
        except FlushError as e:
            await self.db.rollback()
            self._log_conflict("Insert", key, e)
            raise DataConflictError(messages.RFIDTX_ADD_FAILURE, _context(key))
        except IntegrityError as e:
            await self.db.rollback()
            self._log_conflict("Insert", key, e)
            # Only a primary-key collision leaves the key stored after rollback
            if await self.exists_by_key(key):
                raise DataConflictError(messages.RFIDTX_ADD_FAILURE, _context(key))
            raise DataConflictError(messages.DATA_CONFLICT, _context(key))
        return tx

    async def update(self, transaction: RfidTransaction) -> RfidTransaction:
        key = TransactionKey(
            transaction.tag_id, transaction.epc, transaction.scan_date,
        )
        try:
            await self.db.commit()
        except StaleDataError as e:
            await self.db.rollback()
            self._log_conflict("Update", key, e)
            raise ResourceNotFoundError(messages.RFIDTX_NOT_FOUND, _context(key))
        except IntegrityError as e:
            await self.db.rollback()
            self._log_conflict("Update", key, e)
            raise DataConflictError(messages.DATA_CONFLICT, _context(key))
        return transaction

    async def delete_by_key(self, key: TransactionKey) -> None:
        """Raises DataConflictError when no row was removed."""
        result = await self.db.execute(
            delete(RfidTransaction).where(*_key_filter(key)),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise DataConflictError(messages.RFIDTX_DELETE_FAILURE, _context(key))
        await self.db.commit()

    @staticmethod
    def _log_conflict(operation: str, key: TransactionKey, error: Exception) -> None:
        logger.warning(
            f"{operation} conflicted with stored data: {error}",
            extra={"tag_id": key.tag_id, "epc": key.epc},
        )

    # ─── Analytics ───────────────────────────────────────────────

    async def scans_in_window(
        self, window: ScanWindow, epc: str | None, site_name: str | None,
    ) -> list[ScanRow]:
        query = (
            select(
                RfidTransaction.tag_id,
                RfidTransaction.epc,
                RfidTransaction.scan_date,
                RfidTransaction.rssi,
                Site.site_name,
                Location.location_name,
            )
            .join(Location, RfidTransaction.location_id == Location.location_id)
            .join(Site, Location.site_id == Site.site_id)
            .where(RfidTransaction.scan_date.between(window.start, window.end))
        )
        if epc is not None:
            query = query.where(RfidTransaction.epc == epc)
        if site_name is not None:
            query = query.where(Site.site_name == site_name)
        result = await self.db.execute(query)
        return [
            ScanRow(
                tag_id=r.tag_id,
                epc=r.epc,
                scan_date=r.scan_date,
                rssi=r.rssi,
                site_name=r.site_name,
                location_name=r.location_name,
            )
            for r in result.all()
        ]

    async def read_counts_in_window(self, window: ScanWindow) -> list[tuple[str, int]]:
        result = await self.db.execute(
            select(RfidTransaction.epc, func.count())
            .where(RfidTransaction.scan_date.between(window.start, window.end))
            .group_by(RfidTransaction.epc),
        )
        return [(epc, count) for epc, count in result.all()]

    async def find_by_criteria(
        self,
        epc: str | None,
        tag_id: str | None,
        start: datetime | None,
        end: datetime | None,
    ) -> list[TransactionView]:
        """AND over the filters that are not None."""
        query = _view_query()
        if epc is not None:
            query = query.where(RfidTransaction.epc == epc)
        if tag_id is not None:
            query = query.where(RfidTransaction.tag_id == tag_id)
        if start is not None:
            query = query.where(RfidTransaction.scan_date >= start)
        if end is not None:
            query = query.where(RfidTransaction.scan_date <= end)
        return await self._views(query)

    # ─── Narrow lookups ──────────────────────────────────────────

    async def find_by_epc(self, epc: str) -> list[TransactionView]:
        return await self._views(_view_query().where(RfidTransaction.epc == epc))

    async def find_by_tag_id(self, tag_id: str) -> list[TransactionView]:
        return await self._views(_view_query().where(RfidTransaction.tag_id == tag_id))

    async def find_by_epc_and_tag_id(
        self, epc: str, tag_id: str,
    ) -> list[TransactionView]:
        return await self._views(
            _view_query()
            .where(RfidTransaction.epc == epc)
            .where(RfidTransaction.tag_id == tag_id),
        )

    async def find_by_scan_date_between(
        self, window: ScanWindow,
    ) -> list[TransactionView]:
        return await self._views(
            _view_query().where(
                RfidTransaction.scan_date.between(window.start, window.end),
            ),
        )

    async def _views(self, query: Select) -> list[TransactionView]:
        result = await self.db.execute(query)
        return [
            _to_view(tx, site_name, location_name)
            for tx, site_name, location_name in result.all()
        ]

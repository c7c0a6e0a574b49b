"""Transaction Analytics — latest scan per EPC, top reads and filtered searches.

Invariants:
    - Read-only: never writes to the store
    - Every literal parameter is validated before the store is touched
    - An empty result is always ResourceNotFound, never an empty list
    - Location labels and names leave this service in display form

Design Decisions:
    - Thin shell around core/parse_queries.py (validation) and core/scan_analytics.py
      (aggregation): the awaits happen here, the decisions happen in the core
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from rfid_ledger.core import messages
from rfid_ledger.core.domain_types import (
    DEFAULT_RULES, FormatRules, LatestEpc, TopEpc, TransactionView,
)
from rfid_ledger.core.errors import ResourceNotFoundError, RfidLedgerError
from rfid_ledger.core.parse_queries import (
    parse_criteria_query, parse_date_range, parse_epc, parse_epc_and_tag_id,
    parse_latest_scans_query, parse_tag_id, parse_top_reads_query,
)
from rfid_ledger.core.repository_protocols import TransactionStore
from rfid_ledger.core.scan_analytics import latest_scans_per_epc, rank_top_reads
from rfid_ledger.services.transaction_store import SqlTransactionStore

logger = logging.getLogger(__name__)


def _require_rows(rows: list, message: str) -> list:
    if not rows:
        raise ResourceNotFoundError(message)
    return rows


class TransactionAnalytics:
    """Analytic and lookup queries over the transaction store."""

    def __init__(self, store: TransactionStore, rules: FormatRules = DEFAULT_RULES):
        self.store = store
        self.rules = rules

    @classmethod
    def for_session(
        cls, db: AsyncSession, rules: FormatRules = DEFAULT_RULES,
    ) -> "TransactionAnalytics":
        return cls(SqlTransactionStore(db), rules)

    async def latest_scans(
        self,
        start: str | None,
        end: str | None,
        epc: str | None = None,
        site_name: str | None = None,
    ) -> list[LatestEpc]:
        """Per EPC in the window: latest location, scan count and mean RSSI."""
        try:
            query = parse_latest_scans_query(start, end, epc, site_name, self.rules)
            rows = await self.store.scans_in_window(
                query.window, query.epc, query.site_name,
            )
            summaries = _require_rows(
                latest_scans_per_epc(rows), messages.NO_TRANSACTIONS,
            )
        except RfidLedgerError as e:
            self._log_rejection("Latest scans", e)
            raise
        logger.info(
            "Successfully retrieved latest scans",
            extra={"result_count": len(summaries)},
        )
        return summaries

    async def top_reads(
        self, limit: int | None, start: str | None, end: str | None,
    ) -> list[TopEpc]:
        """The `limit` most-read EPCs in the window."""
        try:
            query = parse_top_reads_query(limit, start, end)
            counts = await self.store.read_counts_in_window(query.window)
            ranked = _require_rows(
                rank_top_reads(counts, query.limit), messages.NO_TRANSACTIONS,
            )
        except RfidLedgerError as e:
            self._log_rejection("Top reads", e)
            raise
        logger.info(
            "Successfully retrieved top reads list",
            extra={"result_count": len(ranked)},
        )
        return ranked

    async def search(
        self,
        epc: str | None = None,
        tag_id: str | None = None,
        start: str | None = None,
        end: str | None = None,
    ) -> list[TransactionView]:
        """Every transaction matching all supplied filters."""
        try:
            query = parse_criteria_query(epc, tag_id, start, end, self.rules)
            views = _require_rows(
                await self.store.find_by_criteria(
                    query.epc, query.tag_id, query.start, query.end,
                ),
                messages.NO_TRANSACTIONS,
            )
        except RfidLedgerError as e:
            self._log_rejection("Search", e)
            raise
        logger.info(
            "Successfully retrieved RfidTx by criteria",
            extra={"result_count": len(views)},
        )
        return views

    async def by_epc(self, epc: str | None) -> list[TransactionView]:
        try:
            epc = parse_epc(epc, self.rules)
            views = _require_rows(
                await self.store.find_by_epc(epc),
                messages.RFIDTX_EPC_NOT_FOUND.format(epc=epc),
            )
        except RfidLedgerError as e:
            self._log_rejection("Lookup by epc", e)
            raise
        return views

    async def by_tag_id(self, tag_id: str | None) -> list[TransactionView]:
        try:
            tag_id = parse_tag_id(tag_id, self.rules)
            views = _require_rows(
                await self.store.find_by_tag_id(tag_id),
                messages.RFIDTX_TAG_ID_NOT_FOUND.format(tag_id=tag_id),
            )
        except RfidLedgerError as e:
            self._log_rejection("Lookup by tagId", e)
            raise
        return views

    async def by_epc_and_tag_id(
        self, epc: str | None, tag_id: str | None,
    ) -> list[TransactionView]:
        try:
            epc, tag_id = parse_epc_and_tag_id(epc, tag_id, self.rules)
            views = _require_rows(
                await self.store.find_by_epc_and_tag_id(epc, tag_id),
                messages.RFIDTX_TAG_ID_EPC_NOT_FOUND.format(tag_id=tag_id, epc=epc),
            )
        except RfidLedgerError as e:
            self._log_rejection("Lookup by epc and tagId", e)
            raise
        return views

    async def by_scan_date_range(
        self, start: str | None, end: str | None,
    ) -> list[TransactionView]:
        try:
            window = parse_date_range(start, end)
            views = _require_rows(
                await self.store.find_by_scan_date_between(window),
                messages.RFIDTX_DATE_NOT_FOUND.format(start=start, end=end),
            )
        except RfidLedgerError as e:
            self._log_rejection("Lookup by date range", e)
            raise
        return views

    @staticmethod
    def _log_rejection(operation: str, error: RfidLedgerError) -> None:
        logger.error(
            f"{operation} rejected: {error.message}",
            extra={"error_code": error.code},
        )

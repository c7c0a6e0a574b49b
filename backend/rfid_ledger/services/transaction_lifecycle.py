"""Transaction Lifecycle — validated create, partial update and keyed delete of scans.

Invariants:
    - Create: presence (all seven fields) -> format (exhaustive) -> references (fail-fast)
      -> insert; nothing is written unless every stage passes
    - Update: only rssi, site and location change; the key never does
    - Update with rssi null/zero keeps the stored rssi; without site and location
      keeps the stored location untouched
    - Delete of a key that is not stored is a DataConflict (409), not a 404
    - Every rejection is logged once with its error code, then re-raised unchanged

Design Decisions:
    - Request-scoped: one instance per AsyncSession, no state shared between requests
    - Returns TransactionView so callers never dereference ORM relationships
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from rfid_ledger.core import messages
from rfid_ledger.core.domain_types import (
    DEFAULT_RULES, FormatRules, TransactionKey, TransactionView,
)
from rfid_ledger.core.errors import (
    DataConflictError, ErrorContext, ResourceNotFoundError, RfidLedgerError,
)
from rfid_ledger.core.normalize_names import denormalize
from rfid_ledger.core.parse_requests import (
    parse_create_request, parse_transaction_key, parse_update_request,
)
from rfid_ledger.core.repository_protocols import (
    LocationLookup, TransactionLike, TransactionStore,
)
from rfid_ledger.services.reference_checker import ReferenceChecker
from rfid_ledger.services.reference_lookups import (
    SqlLocationLookup, SqlRfidBindingLookup, SqlSiteLookup,
)
from rfid_ledger.services.transaction_store import SqlTransactionStore

logger = logging.getLogger(__name__)


def _log_rejection(operation: str, error: RfidLedgerError) -> None:
    logger.error(
        f"{operation} rejected: {error.message}",
        extra={
            "error_code": error.code,
            "tag_id": error.context.tag_id,
            "epc": error.context.epc,
        },
    )


def _context(key: TransactionKey) -> ErrorContext:
    return ErrorContext(
        tag_id=key.tag_id, epc=key.epc,
        scan_date=key.scan_date.isoformat(sep=" "),
    )


def _view(tx: TransactionLike, site_name: str, location_name: str) -> TransactionView:
    return TransactionView(
        tag_id=tx.tag_id,
        epc=tx.epc,
        scan_date=tx.scan_date,
        rssi=tx.rssi,
        location_id=tx.location_id,
        location_name=denormalize(location_name),
        site_name=denormalize(site_name),
    )


class TransactionLifecycle:
    """Create / update / delete for scan transactions."""

    def __init__(
        self,
        store: TransactionStore,
        checker: ReferenceChecker,
        locations: LocationLookup,
        rules: FormatRules = DEFAULT_RULES,
    ):
        self.store = store
        self.checker = checker
        self.locations = locations
        self.rules = rules

    @classmethod
    def for_session(
        cls, db: AsyncSession, rules: FormatRules = DEFAULT_RULES,
    ) -> "TransactionLifecycle":
        store = SqlTransactionStore(db)
        locations = SqlLocationLookup(db)
        checker = ReferenceChecker(
            SqlSiteLookup(db), locations, SqlRfidBindingLookup(db), store,
        )
        return cls(store, checker, locations, rules)

    async def create(self, request: Any) -> TransactionView:
        """Validate and persist one new scan."""
        try:
            new_tx = parse_create_request(request, self.rules)
            location = await self.checker.check_new_transaction(new_tx)
            tx = await self.store.insert(new_tx.key, location.location_id, new_tx.rssi)
        except RfidLedgerError as e:
            _log_rejection("Create", e)
            raise
        logger.info(
            "RFID transaction was added successfully",
            extra={"tag_id": tx.tag_id, "epc": tx.epc},
        )
        return _view(tx, new_tx.site_name, new_tx.location_name)

    async def update(
        self,
        tag_id: str | None,
        epc: str | None,
        scan_date: str | None,
        request: Any,
    ) -> TransactionView:
        """Replace rssi and/or location of an existing scan."""
        try:
            key = parse_transaction_key(tag_id, epc, scan_date)
            patch = parse_update_request(request)
            tx = await self.store.find_by_key(key)
            if tx is None:
                raise ResourceNotFoundError(messages.RFIDTX_NOT_FOUND, _context(key))

            site_name, location_name = await self.locations.describe_location(
                tx.location_id,
            )
            if patch.moves_location:
                site_name = patch.site_name or site_name
                location_name = patch.location_name or location_name
                location = await self.checker.resolve_location(site_name, location_name)
                tx.location_id = location.location_id
            if patch.rssi is not None:
                tx.rssi = patch.rssi
            tx = await self.store.update(tx)
        except RfidLedgerError as e:
            _log_rejection("Update", e)
            raise
        logger.info(
            "Successfully updated RfidTx",
            extra={"tag_id": tx.tag_id, "epc": tx.epc},
        )
        return _view(tx, site_name, location_name)

    async def delete(
        self, tag_id: str | None, epc: str | None, scan_date: str | None,
    ) -> None:
        """Remove one scan by its exact key."""
        try:
            key = parse_transaction_key(tag_id, epc, scan_date)
            if not await self.store.exists_by_key(key):
                raise DataConflictError(messages.RFIDTX_DELETE_FAILURE, _context(key))
            await self.store.delete_by_key(key)
        except RfidLedgerError as e:
            _log_rejection("Delete", e)
            raise
        logger.info(
            "Successfully deleted RfidTx",
            extra={"tag_id": key.tag_id, "epc": key.epc},
        )

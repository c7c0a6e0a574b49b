"""Referential Consistency Checker — cross-entity checks before a transaction is written.

Invariants:
    - Fail-fast: the FIRST failing check raises; later checks never run
    - Precedence for a new transaction:
        1. location exists          -> InvalidInput "Location Name doesn't exist"
        2. site exists              -> InvalidInput "Site Name doesn't exist"
        3. location is in site      -> InvalidInput "Location Name doesn't belong in the site"
        4. (tag_id, epc) is bound   -> InvalidInput "tag id and epc do not match"
        5. ref_code matches binding -> InvalidInput "refcode does not belong ..."
        6. key not yet stored       -> DataConflict "already exists"
    - Steps 1-5 are 400-class, step 6 is 409-class

Design Decisions:
    - Fail-fast (unlike exhaustive format checks): each step depends on state the
      previous one established
    - Step 6 is advisory; the store's primary key is the real uniqueness guarantee
"""

from rfid_ledger.core import messages
from rfid_ledger.core.domain_types import NewTransaction
from rfid_ledger.core.errors import DataConflictError, ErrorContext, InvalidInputError
from rfid_ledger.core.repository_protocols import (
    LocationLike, LocationLookup, RfidBindingLookup, SiteLookup, TransactionStore,
)


class ReferenceChecker:
    """Sequential existence and membership checks across Site, Location and RfidBinding."""

    def __init__(
        self,
        sites: SiteLookup,
        locations: LocationLookup,
        bindings: RfidBindingLookup,
        store: TransactionStore,
    ):
        self.sites = sites
        self.locations = locations
        self.bindings = bindings
        self.store = store

    async def check_new_transaction(self, tx: NewTransaction) -> LocationLike:
        """Run steps 1-6 in order. Returns the location to attach."""
        if not await self.locations.location_exists(tx.location_name):
            raise InvalidInputError(messages.LOCATION_NAME_DOESNT_EXIST)
        if not await self.sites.site_exists(tx.site_name):
            raise InvalidInputError(messages.SITE_NAME_DOESNT_EXIST)
        location = await self.locations.find_location_matching_site(
            tx.location_name, tx.site_name,
        )
        if location is None:
            raise InvalidInputError(messages.LOCATION_NOT_IN_SITE)

        rfid = tx.key.rfid
        context = ErrorContext(tag_id=rfid.tag_id, epc=rfid.epc)
        if not await self.bindings.binding_exists(rfid):
            raise InvalidInputError(messages.TAG_ID_EPC_NO_MATCH, context)
        if not await self.bindings.ref_code_matches(rfid, tx.ref_code):
            raise InvalidInputError(messages.REFCODE_TAG_ID_EPC_NO_MATCH, context)

        if await self.store.exists_by_key(tx.key):
            context.scan_date = tx.key.scan_date.isoformat(sep=" ")
            raise DataConflictError(messages.RFIDTX_ADD_FAILURE, context)
        return location

    async def resolve_location(self, site_name: str, location_name: str) -> LocationLike:
        """Site must exist and contain the location (used when a scan is moved)."""
        if await self.sites.find_site_by_name(site_name) is None:
            raise InvalidInputError(messages.SITE_NAME_DOESNT_EXIST)
        location = await self.locations.find_location_matching_site(
            location_name, site_name,
        )
        if location is None:
            raise InvalidInputError(messages.LOCATION_NOT_IN_SITE)
        return location

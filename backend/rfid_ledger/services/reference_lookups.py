"""Reference Lookups — read-only SQL access to sites, locations and tag bindings.

Invariants:
    - Never writes; Site/Location/Product/RfidBinding CRUD is owned elsewhere
    - Names are compared exactly: callers pass storage (normalized) form
    - Existence checks select a single column with LIMIT 1

Design Decisions:
    - One small class per entity, each holding the request-scoped AsyncSession
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rfid_ledger.core.domain_types import RfidKey
from rfid_ledger.models.location import Location
from rfid_ledger.models.rfid_binding import RfidBinding
from rfid_ledger.models.site import Site


class SqlSiteLookup:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def site_exists(self, site_name: str) -> bool:
        result = await self.db.execute(
            select(Site.site_id).where(Site.site_name == site_name).limit(1),
        )
        return result.scalar_one_or_none() is not None

    async def find_site_by_name(self, site_name: str) -> Site | None:
        result = await self.db.execute(
            select(Site).where(Site.site_name == site_name),
        )
        return result.scalar_one_or_none()


class SqlLocationLookup:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def location_exists(self, location_name: str) -> bool:
        """True if any site has a location with this name."""
        result = await self.db.execute(
            select(Location.location_id)
            .where(Location.location_name == location_name)
            .limit(1),
        )
        return result.scalar_one_or_none() is not None

    async def find_location_matching_site(
        self, location_name: str, site_name: str,
    ) -> Location | None:
        """The location with this name inside the named site, if any."""
        result = await self.db.execute(
            select(Location)
            .join(Site, Location.site_id == Site.site_id)
            .where(Location.location_name == location_name)
            .where(Site.site_name == site_name),
        )
        return result.scalar_one_or_none()

    async def describe_location(self, location_id: int) -> tuple[str, str] | None:
        """(site_name, location_name) in storage form."""
        result = await self.db.execute(
            select(Site.site_name, Location.location_name)
            .join(Site, Location.site_id == Site.site_id)
            .where(Location.location_id == location_id),
        )
        row = result.one_or_none()
        return (row.site_name, row.location_name) if row else None


class SqlRfidBindingLookup:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def binding_exists(self, key: RfidKey) -> bool:
        result = await self.db.execute(
            select(RfidBinding.tag_id)
            .where(RfidBinding.tag_id == key.tag_id)
            .where(RfidBinding.epc == key.epc)
            .limit(1),
        )
        return result.scalar_one_or_none() is not None

    async def ref_code_matches(self, key: RfidKey, ref_code: int) -> bool:
        result = await self.db.execute(
            select(RfidBinding.tag_id)
            .where(RfidBinding.tag_id == key.tag_id)
            .where(RfidBinding.epc == key.epc)
            .where(RfidBinding.ref_code == ref_code)
            .limit(1),
        )
        return result.scalar_one_or_none() is not None

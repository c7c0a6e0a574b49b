"""Location ORM — a named scan point inside exactly one site.

Invariants:
    - location_name is stored in normalized form
    - (location_name, site_id) is unique; the same name may exist in other sites
    - site_id is a plain FK (no cascade)

Design Decisions:
    - No relationship to Site: async sessions cannot lazy-load, so lookups join explicitly
"""

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rfid_ledger.db.base import Base


class Location(Base):
    """Location entity — read-only input to the transaction core."""
    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("location_name", "site_id", name="uq_location_name_site"),
    )

    location_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    location_name: Mapped[str] = mapped_column(String(255), nullable=False)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.site_id"), nullable=False,
    )

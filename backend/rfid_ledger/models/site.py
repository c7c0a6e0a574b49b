"""Site ORM — a named facility that owns locations.

Invariants:
    - site_name is stored in normalized form (trimmed, upper-case, spaces as "..")
    - site_name is unique
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rfid_ledger.db.base import Base


class Site(Base):
    """Site entity — read-only input to the transaction core."""
    __tablename__ = "sites"

    site_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    site_name: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )

"""RfidBinding ORM — fixed assignment of a (tag_id, epc) pair to a product.

Invariants:
    - Composite primary key (tag_id, epc)
    - tag_id and epc stored upper-case
    - ref_code references products.ref_code
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rfid_ledger.db.base import Base


class RfidBinding(Base):
    """Tag-to-product binding — immutable from the transaction core's view."""
    __tablename__ = "rfid_bindings"

    tag_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    epc: Mapped[str] = mapped_column(String(20), primary_key=True)
    ref_code: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.ref_code"), nullable=False,
    )

"""Product ORM — catalogue entry identified by its reference code."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rfid_ledger.db.base import Base


class Product(Base):
    __tablename__ = "products"

    ref_code: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

"""ORM Models — SQLAlchemy declarative models for all ledger entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Site, Location, Product and RfidBinding are read-only inputs to the core

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete for create_all and
      Alembic autogenerate
"""

from rfid_ledger.models.site import Site  # noqa: F401
from rfid_ledger.models.location import Location  # noqa: F401
from rfid_ledger.models.product import Product  # noqa: F401
from rfid_ledger.models.rfid_binding import RfidBinding  # noqa: F401
from rfid_ledger.models.rfid_transaction import RfidTransaction  # noqa: F401

from __future__ import annotations

from sqlalchemy import select

from backend.app.core.logsetup import configure_logging
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal
from backend.app.db.models.models_v1 import Donor, Hospital
from backend.services.accounts import register_donor
from backend.services.stock import StockReplacementService, StockStore

DEMO_HOSPITAL = {
    "name": "Apollo",
    "address": "21 Greams Lane",
    "contact": "044-28290200",
    "email": "stock@apollo.example",
}
DEMO_STOCK = [
    {"group": "A+", "needed": 5, "available": 2},
    {"group": "O-", "needed": 3, "available": 0},
    {"group": "B+", "needed": 0, "available": 7},
]


def run_seed(session_factory=SessionLocal) -> None:
    Base.metadata.create_all(bind=session_factory.kw["bind"])
    db = session_factory()
    try:
        # 1) Hôpital de démo + stock (pas d'email)
        if not db.scalar(select(Hospital).where(Hospital.name == DEMO_HOSPITAL["name"])):
            StockReplacementService(StockStore(db)).submit_stock(DEMO_HOSPITAL, DEMO_STOCK)

        # 2) Donneur de démo
        if not db.scalar(select(Donor).where(Donor.email == "donor@example.com")):
            register_donor(
                db,
                name="Demo Donor",
                email="donor@example.com",
                password="donor123",
                blood_type="A+",
            )

        print("SEED OK: hospital=Apollo, donor=donor@example.com")
    finally:
        db.close()


def main() -> None:
    configure_logging()
    run_seed()


if __name__ == "__main__":
    main()

from sqlalchemy import func, select

from backend.app.db.models.models_v1 import BloodStock, Donor, Hospital
from backend.app.db.seed import run_seed


def test_seed_is_idempotent(db_session):
    run_seed()
    run_seed()

    assert db_session.scalar(select(func.count()).select_from(Hospital)) == 1
    assert db_session.scalar(select(func.count()).select_from(BloodStock)) == 3
    assert db_session.scalar(select(func.count()).select_from(Donor)) == 1

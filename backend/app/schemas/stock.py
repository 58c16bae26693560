from datetime import datetime
from typing import Any

from pydantic import BaseModel


# ---------- IN ----------
class HospitalInfoIn(BaseModel):
    # présence vérifiée par le service, valeurs converties en str
    # (400 lisible plutôt qu'un 422)
    name: Any = None
    address: Any = None
    contact: Any = None
    email: Any = None


class BloodGroupIn(BaseModel):
    group: Any = None
    needed: Any = None  # parse_count_or_zero côté service
    available: Any = None


class SaveStockRequest(BaseModel):
    hospitalInfo: HospitalInfoIn | None = None
    bloodGroups: list[BloodGroupIn] | None = None


# ---------- OUT ----------
class HospitalRead(BaseModel):
    id: int
    name: str
    address: str
    contact: str
    email: str
    updated_at: datetime

    class Config:
        from_attributes = True


class BloodStockRead(BaseModel):
    blood_group: str
    units_needed: int
    units_available: int

    class Config:
        from_attributes = True

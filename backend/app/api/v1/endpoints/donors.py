from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.api.deps import get_db, get_notifier
from backend.app.schemas.accounts import DonorRead, DonorRegister, LoginRequest
from backend.services import accounts
from backend.services.notifications import NotificationDispatcher

router = APIRouter(prefix="/api/donors")


@router.post("/register")
def register_donor(
    payload: DonorRegister,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher | None = Depends(get_notifier),
):
    donor, queued = accounts.register_donor(
        db,
        notifier,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        dob=payload.dob,
        gender=payload.gender,
        blood_type=payload.bloodType,
        contact=payload.contact,
        address=payload.address,
    )
    return {"success": True, "message": "Registration successful", "id": donor.id, "emailQueued": queued}


@router.post("/login")
def login_donor(payload: LoginRequest, db: Session = Depends(get_db)):
    donor = accounts.login_donor(db, email=payload.email, password=payload.password)
    return {"success": True, "id": donor.id, "name": donor.name, "email": donor.email}


@router.get("/{donor_id}")
def get_donor(donor_id: int, db: Session = Depends(get_db)):
    donor = accounts.get_donor(db, donor_id)
    return {"success": True, "donor": DonorRead.model_validate(donor).model_dump(mode="json")}

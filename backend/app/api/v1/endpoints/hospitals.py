from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.api.deps import get_db, get_notifier
from backend.app.schemas.accounts import HospitalAccountRead, HospitalRegister, LoginRequest
from backend.services import accounts
from backend.services.notifications import NotificationDispatcher

router = APIRouter(prefix="/api/hospitals")


def _read(account) -> dict:
    return HospitalAccountRead.model_validate(account).model_dump(mode="json")


@router.post("/register")
def register_hospital(
    payload: HospitalRegister,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher | None = Depends(get_notifier),
):
    account, queued = accounts.register_hospital(
        db,
        notifier,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        address=payload.address,
        contact_person=payload.contactPerson,
        contact_number=payload.contactNumber,
        location=payload.location.model_dump() if payload.location else None,
    )
    return {"success": True, "message": "Registered successfully", "id": account.id, "emailQueued": queued}


@router.post("/login")
def login_hospital(payload: LoginRequest, db: Session = Depends(get_db)):
    account = accounts.login_hospital(db, email=payload.email, password=payload.password)
    return {"success": True, "hospital": _read(account)}


@router.get("")
def list_hospital_accounts(db: Session = Depends(get_db)):
    return {"success": True, "hospitals": [_read(a) for a in accounts.list_hospital_accounts(db)]}


@router.get("/{account_id}")
def get_hospital_account(account_id: int, db: Session = Depends(get_db)):
    return {"success": True, "hospital": _read(accounts.get_hospital_account(db, account_id))}

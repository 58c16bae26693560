from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.api.deps import get_db, get_notifier
from backend.app.schemas.blood_request import BloodRequestCreate, BloodRequestRead
from backend.services import blood_requests
from backend.services.notifications import NotificationDispatcher

router = APIRouter(prefix="/api/requests")


def _read(row) -> dict:
    return BloodRequestRead.model_validate(row).model_dump(mode="json")


@router.post("")
def create_request(
    payload: BloodRequestCreate,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher | None = Depends(get_notifier),
):
    row, notified = blood_requests.create_request(
        db,
        notifier,
        hospital_name=payload.hospitalName,
        contact_person=payload.contactPerson,
        contact_details=payload.contactDetails,
        patient_info=payload.patientInfo,
        blood_type=payload.bloodType,
        quantity=payload.quantity,
        urgency=payload.urgency,
        date_time=payload.dateTime,
        notes=payload.notes,
    )
    return {"success": True, "id": row.id, "notified": notified}


# déclaré AVANT /{request_id}, sinon "latest" est pris pour un id
@router.get("/latest")
def get_latest_request(db: Session = Depends(get_db)):
    return {"success": True, "request": _read(blood_requests.latest_request(db))}


@router.get("/{request_id}")
def get_request(request_id: int, db: Session = Depends(get_db)):
    return {"success": True, "request": _read(blood_requests.get_request(db, request_id))}

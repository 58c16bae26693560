"""
Demandes de sang.

Après l'enregistrement, chaque donneur du même groupe sanguin reçoit un
email (un job indépendant par donneur, sans retry ni attente).
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.db.models.core_types import NotificationKind
from backend.app.db.models.models_v1 import BloodRequest, Donor
from backend.services import templates
from backend.services.errors import NotFound, StorageError
from backend.services.notifications import NotificationDispatcher
from backend.services.parsing import parse_count_or_none

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    "hospital_name",
    "contact_person",
    "contact_details",
    "patient_info",
    "blood_type",
    "urgency",
    "date_time",
    "notes",
)


def _text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def matching_donors(db: Session, blood_type: str) -> list[Donor]:
    key = blood_type.strip().upper()
    return list(
        db.execute(
            select(Donor)
            .where(func.upper(func.trim(Donor.blood_type)) == key)
            .order_by(Donor.id)
        )
        .scalars()
        .all()
    )


def create_request(
    db: Session,
    notifier: NotificationDispatcher | None = None,
    **fields: Any,
) -> tuple[BloodRequest, int]:
    """Returns the saved request and how many donor notifications were queued."""
    row = BloodRequest(
        quantity=parse_count_or_none(fields.get("quantity")) or None,
        **{f: _text_or_none(fields.get(f)) for f in TEXT_FIELDS},
    )
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Could not save blood request")
        raise StorageError("Failed to save request") from exc

    logger.info("Blood request %s saved (%s x%s)", row.id, row.blood_type, row.quantity)
    return row, broadcast_request(db, notifier, row)


def broadcast_request(db: Session, notifier: NotificationDispatcher | None, req: BloodRequest) -> int:
    if notifier is None or not req.blood_type:
        return 0

    queued = 0
    for donor in matching_donors(db, req.blood_type):
        subject, body = templates.blood_request(
            donor.name,
            blood_type=req.blood_type,
            hospital_name=req.hospital_name,
            quantity=req.quantity,
            urgency=req.urgency,
            contact=req.contact_details,
        )
        if notifier.enqueue(NotificationKind.blood_request, donor.email, subject, body) is not None:
            queued += 1

    logger.info("Blood request %s: %d donor notification(s) queued", req.id, queued)
    return queued


def get_request(db: Session, request_id: int) -> BloodRequest:
    row = db.get(BloodRequest, request_id)
    if not row:
        raise NotFound("Not found")
    return row


def latest_request(db: Session) -> BloodRequest:
    row = db.execute(select(BloodRequest).order_by(BloodRequest.id.desc()).limit(1)).scalar_one_or_none()
    if not row:
        raise NotFound("No requests yet")
    return row

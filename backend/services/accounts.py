"""
Comptes hôpitaux et donneurs.

Pas de session ni de token : login = vérification du couple email / mot de
passe, puis retour du profil (sans le hash).
"""
from __future__ import annotations

import logging
from typing import Any

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.db.models.core_types import NotificationKind
from backend.app.db.models.models_v1 import Donor, HospitalAccount
from backend.services import templates
from backend.services.errors import AuthenticationError, Conflict, NotFound, StorageError, ValidationError
from backend.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


# ---------- Helpers ----------
def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # hash illisible en base
        return False


def _require(fields: dict[str, Any], message: str) -> None:
    if any(not str(v or "").strip() for v in fields.values()):
        raise ValidationError(message)


def _coord(location: dict | None, key: str) -> float | None:
    if not location or location.get(key) in (None, ""):
        return None
    try:
        return float(location[key])
    except (TypeError, ValueError):
        return None


def _welcome(notifier: NotificationDispatcher | None, kind: NotificationKind, email: str, name: str) -> bool:
    if notifier is None:
        return False
    if kind == NotificationKind.hospital_welcome:
        subject, body = templates.hospital_welcome(name)
    else:
        subject, body = templates.donor_welcome(name)
    return notifier.enqueue(kind, email, subject, body) is not None


def _save(db: Session, row, what: str):
    try:
        db.add(row)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Could not save %s", what)
        raise StorageError("Database error") from exc
    db.refresh(row)
    return row


# ---------- Hospitals ----------
def register_hospital(
    db: Session,
    notifier: NotificationDispatcher | None = None,
    *,
    name: str | None,
    email: str | None,
    password: str | None,
    address: str | None = None,
    contact_person: str | None = None,
    contact_number: str | None = None,
    location: dict | None = None,
) -> tuple[HospitalAccount, bool]:
    """Returns the account and whether a welcome email was queued."""
    _require({"name": name, "email": email, "password": password}, "name, email and password are required")

    if db.execute(select(HospitalAccount.id).where(HospitalAccount.email == email)).first():
        raise Conflict("Email already registered")

    account = _save(
        db,
        HospitalAccount(
            name=name,
            address=address,
            contact_person=contact_person,
            contact_number=contact_number,
            email=email,
            password_hash=hash_password(password),
            latitude=_coord(location, "latitude"),
            longitude=_coord(location, "longitude"),
        ),
        "hospital account",
    )
    logger.info("Hospital account %s registered (%s)", account.id, account.email)
    return account, _welcome(notifier, NotificationKind.hospital_welcome, account.email, account.name)


def login_hospital(db: Session, *, email: str | None, password: str | None) -> HospitalAccount:
    _require({"email": email, "password": password}, "email and password required")

    account = db.execute(select(HospitalAccount).where(HospitalAccount.email == email)).scalar_one_or_none()
    if not account or not check_password(password, account.password_hash):
        raise AuthenticationError("Invalid credentials")
    return account


def get_hospital_account(db: Session, account_id: int) -> HospitalAccount:
    account = db.get(HospitalAccount, account_id)
    if not account:
        raise NotFound("Not found")
    return account


def list_hospital_accounts(db: Session) -> list[HospitalAccount]:
    return list(
        db.execute(select(HospitalAccount).order_by(HospitalAccount.created_at.desc(), HospitalAccount.id.desc()))
        .scalars()
        .all()
    )


# ---------- Donors ----------
def register_donor(
    db: Session,
    notifier: NotificationDispatcher | None = None,
    *,
    name: str | None,
    email: str | None,
    password: str | None,
    dob: str | None = None,
    gender: str | None = None,
    blood_type: str | None = None,
    contact: str | None = None,
    address: str | None = None,
) -> tuple[Donor, bool]:
    _require({"name": name, "email": email, "password": password}, "Name, email and password are required")

    if db.execute(select(Donor.id).where(Donor.email == email)).first():
        raise Conflict("Email already registered")

    donor = _save(
        db,
        Donor(
            name=name,
            dob=dob,
            gender=gender,
            blood_type=blood_type.strip() if blood_type else None,
            contact=contact,
            email=email,
            address=address,
            password_hash=hash_password(password),
        ),
        "donor",
    )
    logger.info("Donor %s registered (%s)", donor.id, donor.blood_type)
    return donor, _welcome(notifier, NotificationKind.donor_welcome, donor.email, donor.name)


def login_donor(db: Session, *, email: str | None, password: str | None) -> Donor:
    _require({"email": email, "password": password}, "Missing email or password")

    donor = db.execute(select(Donor).where(Donor.email == email)).scalar_one_or_none()
    if not donor or not check_password(password, donor.password_hash):
        raise AuthenticationError("Invalid credentials")
    return donor


def get_donor(db: Session, donor_id: int) -> Donor:
    donor = db.get(Donor, donor_id)
    if not donor:
        raise NotFound("Not found")
    return donor

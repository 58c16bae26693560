from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core import config
from backend.app.db.models.core_types import NotificationKind
from backend.app.db.models.models_v1 import BloodStock, Hospital, utcnow
from backend.services import templates
from backend.services.errors import NotFound, StorageError, ValidationError
from backend.services.locks import NamedLocks, hospital_locks
from backend.services.notifications import NotificationDispatcher
from backend.services.parsing import parse_count_or_zero

logger = logging.getLogger(__name__)

REQUIRED_HOSPITAL_FIELDS = ("name", "address", "contact", "email")

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass(frozen=True)
class StockLine:
    group: str
    needed: int
    available: int


@dataclass(frozen=True)
class SubmitResult:
    hospital_id: int
    email_sent: bool


@dataclass
class StockSnapshot:
    hospital: Hospital
    lines: list[BloodStock]


# ---------- STORE ----------
class StockStore:
    """
    Accès SQL au stock d'un hôpital.

    Le store n'ouvre ni ne ferme de transaction : l'appelant décide du
    commit / rollback (tout dans la même transaction).
    """

    def __init__(self, db: Session):
        self.db = db

    def upsert_hospital(self, *, name: str, address: str, contact: str, email: str) -> int:
        """
        INSERT ... ON CONFLICT (name) DO UPDATE, puis relecture de l'id.
        En Postgres la ligne reste verrouillée jusqu'au commit.
        """
        now = utcnow()
        dialect = self.db.get_bind().dialect.name
        make_insert = _UPSERT_DIALECTS.get(dialect)

        if make_insert is None:
            return self._upsert_hospital_generic(name=name, address=address, contact=contact, email=email)

        stmt = make_insert(Hospital).values(
            name=name,
            address=address,
            contact=contact,
            email=email,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Hospital.name],
            set_={
                "address": stmt.excluded.address,
                "contact": stmt.excluded.contact,
                "email": stmt.excluded.email,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self.db.execute(stmt)

        hospital_id = self.db.execute(
            select(Hospital.id).where(Hospital.name == name).with_for_update()
        ).scalar_one()
        return int(hospital_id)

    def _upsert_hospital_generic(self, *, name: str, address: str, contact: str, email: str) -> int:
        hospital = (
            self.db.execute(select(Hospital).where(Hospital.name == name).with_for_update())
            .scalar_one_or_none()
        )
        if not hospital:
            hospital = Hospital(name=name)
            self.db.add(hospital)

        hospital.address = address
        hospital.contact = contact
        hospital.email = email
        hospital.updated_at = utcnow()
        self.db.flush()
        return int(hospital.id)

    def replace_stock_lines(self, hospital_id: int, lines: Sequence[StockLine]) -> int:
        """
        Supprime toutes les lignes de l'hôpital puis insère le nouveau snapshot.

        Un même groupe sanguin présent deux fois : la dernière occurrence gagne
        (UNIQUE(hospital_id, blood_group)).
        """
        merged: dict[str, StockLine] = {}
        for line in lines:
            merged[line.group] = line

        self.db.execute(delete(BloodStock).where(BloodStock.hospital_id == hospital_id))

        if merged:
            self.db.execute(
                insert(BloodStock),
                [
                    {
                        "hospital_id": hospital_id,
                        "blood_group": line.group,
                        "units_needed": line.needed,
                        "units_available": line.available,
                    }
                    for line in merged.values()
                ],
            )
        return len(merged)

    def get_by_name(self, name: str) -> Hospital | None:
        return self.db.execute(select(Hospital).where(Hospital.name == name)).scalar_one_or_none()

    def get_lines(self, hospital_id: int) -> list[BloodStock]:
        return list(
            self.db.execute(
                select(BloodStock)
                .where(BloodStock.hospital_id == hospital_id)
                .order_by(BloodStock.id)
            )
            .scalars()
            .all()
        )

    def list_hospitals(self) -> list[Hospital]:
        return list(
            self.db.execute(select(Hospital).order_by(Hospital.updated_at.desc(), Hospital.id.desc()))
            .scalars()
            .all()
        )

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()


# ---------- HELPERS ----------
def require_hospital_info(hospital_info: Mapping[str, Any] | None) -> dict[str, str]:
    if not isinstance(hospital_info, Mapping):
        raise ValidationError("Missing hospitalInfo")

    missing = [f for f in REQUIRED_HOSPITAL_FIELDS if not str(hospital_info.get(f) or "").strip()]
    if missing:
        raise ValidationError(f"Missing required hospital fields: {', '.join(missing)}")

    return {f: str(hospital_info[f]) for f in REQUIRED_HOSPITAL_FIELDS}


def normalize_stock_lines(stock_lines: Iterable[Mapping[str, Any]] | None) -> list[StockLine]:
    if stock_lines is None or isinstance(stock_lines, (str, bytes, Mapping)):
        raise ValidationError("bloodGroups must be a list")

    lines = []
    for item in stock_lines:
        if not isinstance(item, Mapping):
            raise ValidationError("Each blood group entry must be an object")
        lines.append(
            StockLine(
                group=str(item.get("group") or "").strip(),
                needed=parse_count_or_zero(item.get("needed")),
                available=parse_count_or_zero(item.get("available")),
            )
        )
    return lines


# ---------- SERVICE ----------
class StockReplacementService:
    """
    Remplacement complet du stock d'un hôpital.

    Invariant : les lignes d'un hôpital correspondent toujours à UN seul
    snapshot soumis.
    - upsert + delete + insert dans une seule transaction
    - soumissions concurrentes pour un même nom sérialisées (mutex par nom)
    - email après commit, jamais bloquant pour les données
    """

    def __init__(
        self,
        store: StockStore,
        notifier: NotificationDispatcher | None = None,
        *,
        locks: NamedLocks = hospital_locks,
        notify_timeout: float | None = None,
    ):
        self.store = store
        self.notifier = notifier
        self.locks = locks
        self.notify_timeout = config.NOTIFY_WAIT_SECONDS if notify_timeout is None else notify_timeout

    def submit_stock(
        self,
        hospital_info: Mapping[str, Any] | None,
        stock_lines: Iterable[Mapping[str, Any]] | None,
    ) -> SubmitResult:
        info = require_hospital_info(hospital_info)
        lines = normalize_stock_lines(stock_lines)

        with self.locks.hold(info["name"]):
            try:
                hospital_id = self.store.upsert_hospital(**info)
                saved = self.store.replace_stock_lines(hospital_id, lines)
                self.store.commit()
            except (SQLAlchemyError, OverflowError) as exc:
                self.store.rollback()
                logger.exception("Stock save failed for hospital %r", info["name"])
                raise StorageError("Database error while saving stock") from exc

        logger.info("Stock saved for hospital %r (id=%s, %d lines)", info["name"], hospital_id, saved)

        email_sent = self._notify(info["email"], info["name"], saved)
        return SubmitResult(hospital_id=hospital_id, email_sent=email_sent)

    def get_stock(self, hospital_name: str) -> StockSnapshot:
        try:
            hospital = self.store.get_by_name(hospital_name)
            if not hospital:
                raise NotFound("Hospital not found")
            lines = self.store.get_lines(hospital.id)
        except SQLAlchemyError as exc:
            logger.exception("Stock lookup failed for hospital %r", hospital_name)
            raise StorageError("Database error while fetching stock") from exc
        return StockSnapshot(hospital=hospital, lines=lines)

    def list_hospitals(self) -> list[Hospital]:
        try:
            return self.store.list_hospitals()
        except SQLAlchemyError as exc:
            logger.exception("Hospital listing failed")
            raise StorageError("Database error while fetching hospitals") from exc

    def _notify(self, email: str, hospital_name: str, line_count: int) -> bool:
        if self.notifier is None:
            return False

        subject, body = templates.stock_saved(hospital_name, line_count)
        return self.notifier.send_and_wait(
            NotificationKind.stock_saved,
            email,
            subject,
            body,
            timeout=self.notify_timeout,
        )

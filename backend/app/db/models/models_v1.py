from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    String,
    Integer,
    DateTime,
    Float,
    ForeignKey,
    Text,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base, BigIntPK


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------- STOCK ----------
class Hospital(Base):
    __tablename__ = "hospitals"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    address: Mapped[str] = mapped_column(Text, default="", nullable=False)
    contact: Mapped[str] = mapped_column(String(128), default="", nullable=False)
    email: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    stock_lines: Mapped[list["BloodStock"]] = relationship(
        back_populates="hospital",
        cascade="all, delete-orphan",
        order_by="BloodStock.id",
    )


class BloodStock(Base):
    __tablename__ = "blood_stock"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    hospital_id: Mapped[int] = mapped_column(
        ForeignKey("hospitals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    blood_group: Mapped[str] = mapped_column(String(64), nullable=False)
    units_needed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    units_available: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    hospital: Mapped[Hospital] = relationship(back_populates="stock_lines")

    __table_args__ = (
        UniqueConstraint("hospital_id", "blood_group", name="uq_blood_stock_hospital_group"),
        CheckConstraint("units_needed >= 0", name="ck_blood_stock_needed_nonneg"),
        CheckConstraint("units_available >= 0", name="ck_blood_stock_available_nonneg"),
    )


# ---------- ACCOUNTS ----------
class HospitalAccount(Base):
    __tablename__ = "hospital_accounts"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text)
    contact_person: Mapped[str | None] = mapped_column(String(200))
    contact_number: Mapped[str | None] = mapped_column(String(64))
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class Donor(Base):
    __tablename__ = "donors"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    dob: Mapped[str | None] = mapped_column(String(32))
    gender: Mapped[str | None] = mapped_column(String(32))
    blood_type: Mapped[str | None] = mapped_column(String(64), index=True)
    contact: Mapped[str | None] = mapped_column(String(64))
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    address: Mapped[str | None] = mapped_column(Text)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


# ---------- REQUESTS ----------
class BloodRequest(Base):
    __tablename__ = "blood_requests"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    hospital_name: Mapped[str | None] = mapped_column(String(255))
    contact_person: Mapped[str | None] = mapped_column(String(200))
    contact_details: Mapped[str | None] = mapped_column(String(255))
    patient_info: Mapped[str | None] = mapped_column(Text)
    blood_type: Mapped[str | None] = mapped_column(String(64))
    quantity: Mapped[int | None] = mapped_column(Integer)
    urgency: Mapped[str | None] = mapped_column(String(32))
    date_time: Mapped[str | None] = mapped_column(String(64))
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (Index("ix_blood_requests_blood_type", "blood_type"),)

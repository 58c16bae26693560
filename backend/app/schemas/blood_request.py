from datetime import datetime
from typing import Any

from pydantic import BaseModel


class BloodRequestCreate(BaseModel):
    hospitalName: str | None = None
    contactPerson: str | None = None
    contactDetails: str | None = None
    patientInfo: str | None = None
    bloodType: str | None = None
    quantity: Any = None
    urgency: str | None = None
    dateTime: str | None = None
    notes: str | None = None


class BloodRequestRead(BaseModel):
    id: int
    hospital_name: str | None
    contact_person: str | None
    contact_details: str | None
    patient_info: str | None
    blood_type: str | None
    quantity: int | None
    urgency: str | None
    date_time: str | None
    notes: str | None
    created_at: datetime

    class Config:
        from_attributes = True

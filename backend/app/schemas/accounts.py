from datetime import datetime

from pydantic import BaseModel


class Location(BaseModel):
    latitude: float | None = None
    longitude: float | None = None


class HospitalRegister(BaseModel):
    name: str | None = None
    address: str | None = None
    contactPerson: str | None = None
    contactNumber: str | None = None
    email: str | None = None
    password: str | None = None
    location: Location | None = None


class DonorRegister(BaseModel):
    name: str | None = None
    dob: str | None = None
    gender: str | None = None
    bloodType: str | None = None
    contact: str | None = None
    email: str | None = None
    address: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class HospitalAccountRead(BaseModel):
    id: int
    name: str
    address: str | None
    contact_person: str | None
    contact_number: str | None
    email: str
    latitude: float | None
    longitude: float | None
    created_at: datetime

    class Config:
        from_attributes = True


class DonorRead(BaseModel):
    id: int
    name: str
    dob: str | None
    gender: str | None
    blood_type: str | None
    contact: str | None
    email: str
    address: str | None
    created_at: datetime

    class Config:
        from_attributes = True

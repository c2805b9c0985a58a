import datetime as dt
from typing import Any

from pydantic import BaseModel, Field


class CreateSessionRequestSchema(BaseModel):
    provider_id: str = Field(min_length=1)
    date: dt.date | None = None


class ServiceSelectionSchema(BaseModel):
    service_id: str = Field(min_length=1)


class DateSelectionSchema(BaseModel):
    date: dt.date


class TimeSelectionSchema(BaseModel):
    time: str = Field(min_length=1)


class ProviderChangeSchema(BaseModel):
    provider_id: str = Field(min_length=1)


class ContactUpdateSchema(BaseModel):
    patient_name: str | None = None
    patient_phone: str | None = None
    patient_email: str | None = None
    notes: str | None = None


class ServiceSchema(BaseModel):
    id: str
    name: str
    duration_minutes: int
    price: int
    description: str | None = None


class ProviderSchema(BaseModel):
    id: str
    name: str
    specialty: str
    phone: str
    address: str
    city: str
    email: str | None = None
    bio: str | None = None
    photo: str | None = None
    currency: str
    services: list[ServiceSchema] = Field(default_factory=list)


class DraftSchema(BaseModel):
    provider_id: str
    service_id: str | None = None
    date: dt.date | None = None
    time: str | None = None
    patient_name: str = ""
    patient_phone: str = ""
    patient_email: str | None = None
    notes: str | None = None


class NoticeSchema(BaseModel):
    level: str
    code: str
    message: str


class ConfirmationSchema(BaseModel):
    title: str
    message: str
    date: dt.date
    date_label: str
    time: str
    service_name: str
    patient_name: str
    reference: str | None = None
    lines: list[dict[str, Any]] = Field(default_factory=list)


class SessionSchema(BaseModel):
    session_id: str
    status: str
    failure: str | None = None
    provider: ProviderSchema | None = None
    draft: DraftSchema
    slots: list[str] | None = None
    can_submit: bool
    notices: list[NoticeSchema] = Field(default_factory=list)
    confirmation: ConfirmationSchema | None = None

from __future__ import annotations

from typing import Any
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field

from booking.application.utils.calendar_dates import midnight_timestamp
from booking.domain.entities.booking_draft import BookingDraft


class BookingRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    provider_id: str = Field(alias="providerId")
    service_id: str = Field(alias="serviceId")
    date: str
    time: str
    patient_name: str = Field(alias="patientName")
    patient_phone: str = Field(alias="patientPhone")
    patient_email: str | None = Field(default=None, alias="patientEmail")
    notes: str | None = None

    @classmethod
    def from_draft(cls, draft: BookingDraft, timezone: ZoneInfo) -> "BookingRequestDTO":
        if not (draft.service_id and draft.date and draft.time):
            raise ValueError("Draft is incomplete: service, date and time are required")
        return cls(
            provider_id=draft.provider_id,
            service_id=draft.service_id,
            date=midnight_timestamp(draft.date, timezone),
            time=draft.time,
            patient_name=draft.patient_name.strip(),
            patient_phone=draft.patient_phone.strip(),
            patient_email=(draft.patient_email or "").strip() or None,
            notes=(draft.notes or "").strip() or None,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

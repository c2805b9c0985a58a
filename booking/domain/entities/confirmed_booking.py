from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from booking.domain.entities.booking_draft import BookingDraft
from booking.domain.entities.provider import Provider, Service


@dataclass(frozen=True)
class ConfirmedBooking:
    provider_id: str
    provider_name: str
    service: Service
    date: date
    time: str
    patient_name: str
    patient_phone: str
    patient_email: str | None = None
    notes: str | None = None
    reference: str | None = None  # booking id returned by the server, if any
    confirmed_at: datetime | None = None

    @classmethod
    def from_draft(
        cls,
        draft: BookingDraft,
        provider: Provider,
        service: Service,
        reference: str | None = None,
        confirmed_at: datetime | None = None,
    ) -> "ConfirmedBooking":
        if draft.date is None or draft.time is None:
            raise ValueError("Cannot confirm a draft without date and time")
        return cls(
            provider_id=draft.provider_id,
            provider_name=provider.name,
            service=service,
            date=draft.date,
            time=draft.time,
            patient_name=draft.patient_name.strip(),
            patient_phone=draft.patient_phone.strip(),
            patient_email=draft.patient_email,
            notes=draft.notes,
            reference=reference,
            confirmed_at=confirmed_at,
        )

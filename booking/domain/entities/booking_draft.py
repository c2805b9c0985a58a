from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date


@dataclass
class BookingDraft:
    """In-progress reservation. Mutated only by the workflow that owns it."""

    provider_id: str
    service_id: str | None = None
    date: date | None = None
    time: str | None = None
    patient_name: str = ""
    patient_phone: str = ""
    patient_email: str | None = None
    notes: str | None = None

    @property
    def slot_key(self) -> tuple[str, date | None]:
        return (self.provider_id, self.date)

    def copy(self) -> "BookingDraft":
        return replace(self)

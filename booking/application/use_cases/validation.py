from __future__ import annotations

from booking.domain.entities.booking_draft import BookingDraft

REQUIRED_FIELDS = ("provider_id", "service_id", "date", "time", "patient_name", "patient_phone")


def missing_fields(draft: BookingDraft) -> list[str]:
    """Names of required draft fields that are absent or blank, in form order."""
    missing: list[str] = []
    for field_name in REQUIRED_FIELDS:
        value = getattr(draft, field_name)
        if value is None:
            missing.append(field_name)
        elif isinstance(value, str) and not value.strip():
            missing.append(field_name)
    return missing


def can_submit(draft: BookingDraft) -> bool:
    """True iff every required field is present. Email and notes never block."""
    return not missing_fields(draft)

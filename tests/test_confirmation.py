"""
Tests for the confirmation snapshot and its rendering.
"""

from __future__ import annotations

import dataclasses

import pytest

from booking.application.use_cases.confirmation import ConfirmationPresenter
from booking.domain.entities.booking_draft import BookingDraft
from booking.domain.entities.confirmed_booking import ConfirmedBooking
from fakes import BOOKING_DATE, CLEANING, DENTIST


def _confirmed(draft: BookingDraft | None = None) -> ConfirmedBooking:
    draft = draft or BookingDraft(
        provider_id=DENTIST.id,
        service_id=CLEANING.id,
        date=BOOKING_DATE,
        time="09:00",
        patient_name="Amina",
        patient_phone="0600000000",
    )
    return ConfirmedBooking.from_draft(draft, provider=DENTIST, service=CLEANING, reference="ref-42")


def test_french_summary():
    """French summary uses the long French date and the snapshot fields."""
    summary = ConfirmationPresenter("fr").render(_confirmed())

    assert summary.title == "Rendez-vous réservé!"
    assert summary.date_label == "10 juin 2025"
    assert summary.time == "09:00"
    assert summary.service_name == "Cleaning"
    assert summary.patient_name == "Amina"
    assert ("Référence", "ref-42") in summary.lines


def test_english_summary_text():
    """English summary renders as plain text lines."""
    text = ConfirmationPresenter("en-US").render(_confirmed()).as_text()

    assert "Date: June 10, 2025" in text
    assert "Time: 09:00" in text
    assert "Service: Cleaning" in text
    assert "Patient: Amina" in text


def test_unknown_locale_falls_back_to_english():
    """Unsupported locales render in English."""
    summary = ConfirmationPresenter("de").render(_confirmed())

    assert summary.title == "Appointment booked!"


def test_snapshot_ignores_later_draft_changes():
    """The summary reads the snapshot, not the live draft."""
    draft = BookingDraft(
        provider_id=DENTIST.id,
        service_id=CLEANING.id,
        date=BOOKING_DATE,
        time="09:00",
        patient_name="Amina",
        patient_phone="0600000000",
    )
    confirmed = _confirmed(draft)
    presenter = ConfirmationPresenter("en")
    before = presenter.render(confirmed)

    draft.patient_name = ""
    draft.time = None
    draft.date = None

    assert presenter.render(confirmed) == before
    with pytest.raises(dataclasses.FrozenInstanceError):
        confirmed.time = "10:00"


def test_incomplete_draft_cannot_be_confirmed():
    """A snapshot cannot be built without a date and time."""
    draft = BookingDraft(provider_id=DENTIST.id, service_id=CLEANING.id, date=BOOKING_DATE)

    with pytest.raises(ValueError):
        ConfirmedBooking.from_draft(draft, provider=DENTIST, service=CLEANING)

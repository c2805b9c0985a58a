from __future__ import annotations

from dataclasses import dataclass

from booking.application.utils.calendar_dates import format_long_date
from booking.domain.entities.confirmed_booking import ConfirmedBooking

_LABELS = {
    "fr": {
        "title": "Rendez-vous réservé!",
        "message": "Votre rendez-vous a été confirmé.",
        "date": "Date",
        "time": "Heure",
        "service": "Service",
        "patient": "Patient",
        "reference": "Référence",
    },
    "en": {
        "title": "Appointment booked!",
        "message": "Your appointment has been confirmed.",
        "date": "Date",
        "time": "Time",
        "service": "Service",
        "patient": "Patient",
        "reference": "Reference",
    },
}


@dataclass(frozen=True)
class ConfirmationSummary:
    title: str
    message: str
    date_label: str
    time: str
    service_name: str
    patient_name: str
    lines: tuple[tuple[str, str], ...]

    def as_text(self) -> str:
        body = "\n".join(f"{label}: {value}" for label, value in self.lines)
        return f"{self.title}\n{self.message}\n{body}"


class ConfirmationPresenter:
    """Renders the terminal summary from a ConfirmedBooking snapshot only."""

    def __init__(self, locale: str = "fr") -> None:
        normalized = (locale or "").lower().split("-")[0]
        self._locale = normalized if normalized in _LABELS else "en"

    def render(self, confirmed: ConfirmedBooking) -> ConfirmationSummary:
        labels = _LABELS[self._locale]
        date_label = format_long_date(confirmed.date, self._locale)
        lines = [
            (labels["date"], date_label),
            (labels["time"], confirmed.time),
            (labels["service"], confirmed.service.name),
            (labels["patient"], confirmed.patient_name),
        ]
        if confirmed.reference:
            lines.append((labels["reference"], confirmed.reference))
        return ConfirmationSummary(
            title=labels["title"],
            message=labels["message"],
            date_label=date_label,
            time=confirmed.time,
            service_name=confirmed.service.name,
            patient_name=confirmed.patient_name,
            lines=tuple(lines),
        )

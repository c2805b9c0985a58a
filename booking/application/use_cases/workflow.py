from __future__ import annotations

import logging
from datetime import date
from typing import Callable
from zoneinfo import ZoneInfo

from booking.application.exceptions import (
    AvailabilityServiceError,
    InvalidSelectionError,
    SlotFetchError,
    SubmissionError,
    WorkflowStateError,
)
from booking.application.ports.availability import AvailabilityServicePort
from booking.application.use_cases.availability_query import AvailabilityQueryClient
from booking.application.use_cases.submission import SubmissionExecutor
from booking.application.use_cases.validation import can_submit, missing_fields
from booking.application.utils.calendar_dates import today_in
from booking.domain.entities.booking_draft import BookingDraft
from booking.domain.entities.confirmed_booking import ConfirmedBooking
from booking.domain.entities.provider import Provider
from booking.domain.entities.slot_set import SlotSet
from booking.domain.entities.workflow_state import (
    EDITABLE_STATUSES,
    SUBMITTABLE_STATUSES,
    Notice,
    WorkflowStatus,
)

PROVIDER_NOT_FOUND = "provider_not_found"

_UNSET = object()

_MESSAGES = {
    "fr": {
        "missing_fields": "Veuillez remplir tous les champs obligatoires : {fields}",
        "submission_failed": "Erreur lors de la réservation du rendez-vous. Veuillez réessayer.",
        "booked": "Votre rendez-vous a été réservé.",
        "provider_unavailable": "Erreur lors du chargement des informations du dentiste.",
        "slot_fetch_failed": "Erreur lors du chargement des créneaux. Veuillez réessayer.",
        "no_availability": "Aucun créneau disponible pour cette date.",
        "date_expired": "La date sélectionnée est passée. Veuillez choisir une nouvelle date.",
    },
    "en": {
        "missing_fields": "Please fill in all required fields: {fields}",
        "submission_failed": "The appointment could not be booked. Please try again.",
        "booked": "Your appointment has been booked.",
        "provider_unavailable": "Could not load the provider's information.",
        "slot_fetch_failed": "Could not load available times. Please try again.",
        "no_availability": "No time slots are available for this date.",
        "date_expired": "The selected date has passed. Please choose a new date.",
    },
}


class BookingWorkflow:
    """
    One booking attempt for one visitor.

    Owns the draft, the loaded provider and the visible slot set, and moves
    through WorkflowStatus as the visitor selects a service, a date, a time
    and fills in contact details. Slot answers are applied only while they
    still match the draft's (provider, date); anything arriving after
    close() is dropped.
    """

    def __init__(
        self,
        provider_id: str,
        service: AvailabilityServicePort,
        timezone: ZoneInfo,
        today: Callable[[], date] | None = None,
        actor: str | None = None,
        session_id: str | None = None,
        locale: str = "fr",
    ) -> None:
        self._service = service
        self._timezone = timezone
        self._today = today or (lambda: today_in(timezone))
        self._actor = actor
        self._session_id = session_id
        normalized = (locale or "").lower().split("-")[0]
        self._locale = normalized if normalized in _MESSAGES else "en"
        self._availability = AvailabilityQueryClient(service)
        self._executor = SubmissionExecutor(service, timezone)

        self._status = WorkflowStatus.loading
        self._failure: str | None = None
        self._provider: Provider | None = None
        self._draft = BookingDraft(provider_id=provider_id)
        self._slot_set: SlotSet | None = None
        self._confirmation: ConfirmedBooking | None = None
        self._notices: list[Notice] = []
        self._closed = False
        self._logger = logging.getLogger(__name__)

    # -- read side -------------------------------------------------------

    @property
    def status(self) -> WorkflowStatus:
        return self._status

    @property
    def failure(self) -> str | None:
        return self._failure

    @property
    def provider(self) -> Provider | None:
        return self._provider

    @property
    def draft(self) -> BookingDraft:
        """A copy of the draft; edits go through the workflow operations."""
        return self._draft.copy()

    @property
    def slot_set(self) -> SlotSet | None:
        return self._slot_set

    @property
    def confirmation(self) -> ConfirmedBooking | None:
        return self._confirmation

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def can_submit(self) -> bool:
        return can_submit(self._draft)

    @property
    def notices(self) -> tuple[Notice, ...]:
        return tuple(self._notices)

    def drain_notices(self) -> list[Notice]:
        notices, self._notices = self._notices, []
        return notices

    # -- lifecycle -------------------------------------------------------

    async def load(self, initial_date: date | None = None) -> None:
        """Fetch the provider profile; optionally preselect a date once loaded."""
        if self._closed:
            raise WorkflowStateError("Workflow is closed")
        if self._status is not WorkflowStatus.loading or self._provider is not None:
            raise WorkflowStateError(f"Cannot load in state {self._status.value}")

        provider_id = self._draft.provider_id
        self._logger.info(
            "Loading provider",
            extra={"session_id": self._session_id, "provider_id": provider_id, "actor": self._actor},
        )
        provider = await self._fetch_provider(provider_id)
        if self._closed or self._draft.provider_id != provider_id:
            return
        if provider is None:
            return

        self._provider = provider
        self._status = WorkflowStatus.ready
        self._log_transition()

        if initial_date is not None:
            await self.select_date(initial_date)

    def close(self) -> None:
        """Tear the workflow down. Late responses are ignored from now on."""
        if self._closed:
            return
        self._closed = True
        self._availability.close()
        self._logger.info(
            "Workflow closed",
            extra={"session_id": self._session_id, "status": self._status.value},
        )

    # -- edits -----------------------------------------------------------

    def select_service(self, service_id: str) -> None:
        self._require_editable()
        provider = self._require_provider()
        if not provider.offers(service_id):
            raise InvalidSelectionError(f"Service {service_id!r} is not offered by this provider")
        self._draft.service_id = service_id

    async def select_date(self, day: date) -> None:
        self._require_editable()
        self._require_provider()
        if day < self._today():
            raise InvalidSelectionError(f"Date {day.isoformat()} is in the past")

        self._draft.date = day
        self._draft.time = None
        await self._refresh_slots()

    def select_time(self, value: str) -> None:
        self._require_editable()
        if self._slot_set is None or self._draft.date is None:
            raise InvalidSelectionError("No slots loaded for the selected date")
        if self._slot_set.key != self._draft.slot_key:
            raise InvalidSelectionError("Slots are not loaded for the selected date")
        if value not in self._slot_set:
            raise InvalidSelectionError(f"Time {value!r} is not available")
        self._draft.time = value

    def update_contact(
        self,
        patient_name: object = _UNSET,
        patient_phone: object = _UNSET,
        patient_email: object = _UNSET,
        notes: object = _UNSET,
    ) -> None:
        """Partial update of the visitor's details; omitted arguments are left alone."""
        self._require_editable()
        if patient_name is not _UNSET:
            self._draft.patient_name = str(patient_name or "")
        if patient_phone is not _UNSET:
            self._draft.patient_phone = str(patient_phone or "")
        if patient_email is not _UNSET:
            self._draft.patient_email = _optional_text(patient_email)
        if notes is not _UNSET:
            self._draft.notes = _optional_text(notes)

    async def change_provider(self, provider_id: str) -> None:
        """Switch to another provider, reloading its profile and, if a date is set, its slots."""
        self._require_editable()
        if provider_id == self._draft.provider_id:
            return

        self._draft.provider_id = provider_id
        self._slot_set = None
        self._availability.abandon()
        self._status = WorkflowStatus.loading
        self._log_transition()

        provider = await self._fetch_provider(provider_id)
        if self._closed or self._draft.provider_id != provider_id:
            return
        if provider is None:
            self._provider = None
            return

        self._provider = provider
        if not provider.offers(self._draft.service_id):
            self._draft.service_id = None

        if self._draft.date is not None and self._draft.date >= self._today():
            await self._refresh_slots()
            return
        self._draft.date = None
        self._draft.time = None
        self._status = WorkflowStatus.ready
        self._log_transition()

    async def retry_slots(self) -> None:
        """Re-run the slot query for the current date, e.g. after a fetch error."""
        self._require_editable()
        self._require_provider()
        if self._draft.date is None:
            raise InvalidSelectionError("No date selected")
        if self._expire_past_date():
            return
        await self._refresh_slots()

    # -- submission ------------------------------------------------------

    async def submit(self) -> ConfirmedBooking | None:
        """
        Submit the draft if it passes the validation gate.

        Returns the confirmation snapshot on success. Returns None when the
        submit is a no-op (blocked, already submitting, terminal) or when the
        backend failed; failures leave the draft untouched and add a notice.
        """
        if self._closed or self._status not in SUBMITTABLE_STATUSES:
            self._logger.info(
                "Submit ignored",
                extra={"session_id": self._session_id, "status": self._status.value},
            )
            return None
        if self._expire_past_date():
            return None
        if not can_submit(self._draft):
            missing = missing_fields(self._draft)
            self._notify("info", "missing_fields", fields=", ".join(missing))
            return None

        provider = self._require_provider()
        resume_status = self._status
        self._status = WorkflowStatus.submitting
        self._log_transition()

        try:
            confirmed = await self._executor.submit(self._draft, provider)
        except SubmissionError as e:
            if self._closed:
                return None
            self._status = resume_status
            self._log_transition(reason=e.reason)
            self._notify("error", "submission_failed")
            return None

        if self._closed:
            return None
        if confirmed is None:
            self._status = resume_status
            return None

        self._confirmation = confirmed
        self._status = WorkflowStatus.confirmed
        self._log_transition()
        self._notify("success", "booked")
        return confirmed

    # -- internals -------------------------------------------------------

    async def _fetch_provider(self, provider_id: str) -> Provider | None:
        try:
            provider = await self._service.get_provider(provider_id)
        except AvailabilityServiceError as e:
            if self._closed or self._draft.provider_id != provider_id:
                return None
            self._logger.error(
                "Error loading provider",
                extra={"session_id": self._session_id, "provider_id": provider_id, "reason": str(e)},
            )
            self._notify("error", "provider_unavailable")
            self._fail(PROVIDER_NOT_FOUND)
            return None

        if self._closed or self._draft.provider_id != provider_id:
            return None
        if provider is None:
            self._fail(PROVIDER_NOT_FOUND)
            return None
        return provider

    async def _refresh_slots(self) -> None:
        provider_id, day = self._draft.slot_key
        if day is None:
            return
        query = self._availability.issue(provider_id, day)
        self._slot_set = None
        self._status = WorkflowStatus.slots_loading
        self._log_transition()

        try:
            slot_set = await self._availability.fetch(query)
        except SlotFetchError as e:
            if not self._availability.is_current(query, self._draft.slot_key):
                self._log_discarded(query.provider_id, query.date)
                return
            self._status = WorkflowStatus.ready
            self._log_transition(reason=str(e))
            self._notify("error", "slot_fetch_failed")
            return

        if not self._availability.is_current(query, self._draft.slot_key):
            self._log_discarded(query.provider_id, query.date)
            return

        self._slot_set = slot_set
        if slot_set.is_empty:
            self._draft.time = None
            self._status = WorkflowStatus.slots_empty
            self._notify("info", "no_availability")
        else:
            if self._draft.time is not None and self._draft.time not in slot_set:
                self._draft.time = None
            self._status = WorkflowStatus.slots_ready
        self._log_transition()

    def _expire_past_date(self) -> bool:
        """Drop a selected date that has fallen behind today, e.g. a session left open overnight."""
        day = self._draft.date
        if day is None or day >= self._today():
            return False
        self._availability.abandon()
        self._draft.date = None
        self._draft.time = None
        self._slot_set = None
        self._status = WorkflowStatus.ready
        self._log_transition(reason="date_expired")
        self._notify("error", "date_expired")
        return True

    def _require_editable(self) -> None:
        if self._closed:
            raise WorkflowStateError("Workflow is closed")
        if self._status not in EDITABLE_STATUSES:
            raise WorkflowStateError(f"Cannot edit the booking in state {self._status.value}")

    def _require_provider(self) -> Provider:
        if self._provider is None:
            raise WorkflowStateError("Provider is not loaded")
        return self._provider

    def _fail(self, failure: str) -> None:
        self._failure = failure
        self._status = WorkflowStatus.failed
        self._log_transition(reason=failure)

    def _notify(self, level: str, code: str, **params: str) -> None:
        message = _MESSAGES[self._locale][code].format(**params)
        self._notices.append(Notice(level=level, code=code, message=message))

    def _log_transition(self, reason: str | None = None) -> None:
        self._logger.info(
            "Workflow state",
            extra={
                "session_id": self._session_id,
                "provider_id": self._draft.provider_id,
                "status": self._status.value,
                "reason": reason,
            },
        )

    def _log_discarded(self, provider_id: str, day: date) -> None:
        self._logger.info(
            "Discarding stale slot response",
            extra={"session_id": self._session_id, "provider_id": provider_id, "date": day.isoformat()},
        )


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

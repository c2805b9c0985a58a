from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from booking.application.dto.booking_request import BookingRequestDTO
from booking.application.exceptions import SubmissionError
from booking.application.ports.availability import AvailabilityServicePort
from booking.domain.entities.booking_draft import BookingDraft
from booking.domain.entities.confirmed_booking import ConfirmedBooking
from booking.domain.entities.provider import Provider


class SubmissionExecutor:
    def __init__(self, service: AvailabilityServicePort, timezone: ZoneInfo) -> None:
        self._service = service
        self._timezone = timezone
        self._in_flight = False
        self._logger = logging.getLogger(__name__)

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def submit(self, draft: BookingDraft, provider: Provider) -> ConfirmedBooking | None:
        """
        Send the booking request for `draft`.

        Returns the confirmation snapshot, or None if another submission is
        still in flight. Raises SubmissionError if the backend fails or
        rejects the booking; the draft is never modified.
        """
        if self._in_flight:
            self._logger.info("Submission already in flight, ignoring", extra={"provider_id": draft.provider_id})
            return None

        service = provider.find_service(draft.service_id)
        if service is None:
            raise SubmissionError("unknown_service")

        sent = draft.copy()
        request = BookingRequestDTO.from_draft(sent, self._timezone)

        self._in_flight = True
        try:
            reference = await self._service.book_appointment(request)
        except SubmissionError as e:
            self._logger.warning(
                "Booking rejected",
                extra={"provider_id": sent.provider_id, "reason": e.reason},
            )
            raise
        except Exception as e:
            self._logger.error(
                "Error creating booking",
                extra={"provider_id": sent.provider_id, "reason": str(e)},
            )
            raise SubmissionError(str(e) or "booking_failed") from e
        finally:
            self._in_flight = False

        self._logger.info(
            "Booking confirmed",
            extra={
                "provider_id": sent.provider_id,
                "date": sent.date.isoformat() if sent.date else None,
                "time": sent.time,
            },
        )
        return ConfirmedBooking.from_draft(
            sent,
            provider=provider,
            service=service,
            reference=reference,
            confirmed_at=datetime.now(self._timezone),
        )

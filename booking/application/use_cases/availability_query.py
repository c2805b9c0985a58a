from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from booking.application.exceptions import SlotFetchError
from booking.application.ports.availability import AvailabilityServicePort
from booking.domain.entities.slot_set import SlotSet


@dataclass(frozen=True)
class SlotQuery:
    """A slot request tagged with the (provider, date) it was issued for."""

    provider_id: str
    date: date
    sequence: int

    @property
    def key(self) -> tuple[str, date]:
        return (self.provider_id, self.date)


class AvailabilityQueryClient:
    """
    Issues slot queries and decides whether their answers are still relevant.

    Only the most recently issued query is current. Older queries are not
    cancelled; their answers are simply reported as stale and dropped by the
    caller.
    """

    def __init__(self, service: AvailabilityServicePort) -> None:
        self._service = service
        self._sequence = 0
        self._current: SlotQuery | None = None
        self._closed = False
        self._logger = logging.getLogger(__name__)

    @property
    def current(self) -> SlotQuery | None:
        return self._current

    def issue(self, provider_id: str, day: date) -> SlotQuery:
        self._sequence += 1
        query = SlotQuery(provider_id=provider_id, date=day, sequence=self._sequence)
        if self._current is not None:
            self._logger.debug(
                "Superseding slot query",
                extra={"provider_id": self._current.provider_id, "date": self._current.date.isoformat()},
            )
        self._current = query
        return query

    def is_current(self, query: SlotQuery, key: tuple[str, date | None]) -> bool:
        """True if `query` is the latest one issued and still matches the draft's (provider, date)."""
        if self._closed:
            return False
        return self._current is query and query.key == key

    async def fetch(self, query: SlotQuery) -> SlotSet:
        """Run `query` against the backend. Raises SlotFetchError on any failure."""
        try:
            raw_times = await self._service.get_available_slots(query.provider_id, query.date)
        except SlotFetchError:
            raise
        except Exception as e:
            self._logger.error(
                "Error fetching available slots",
                extra={"provider_id": query.provider_id, "date": query.date.isoformat(), "reason": str(e)},
            )
            raise SlotFetchError(str(e)) from e

        try:
            slot_set = SlotSet.from_raw(query.provider_id, query.date, raw_times or [])
        except (TypeError, ValueError) as e:
            self._logger.error(
                "Malformed slot response",
                extra={"provider_id": query.provider_id, "date": query.date.isoformat(), "reason": str(e)},
            )
            raise SlotFetchError(str(e)) from e

        self._logger.info(
            "Slots fetched",
            extra={"provider_id": query.provider_id, "date": query.date.isoformat(), "count": len(slot_set)},
        )
        return slot_set

    def abandon(self) -> None:
        """Forget the current query so any answer to it is treated as stale."""
        self._current = None

    def close(self) -> None:
        self._closed = True
        self._current = None

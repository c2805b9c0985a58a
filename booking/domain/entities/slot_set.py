from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator

_SLOT_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def normalize_slot_time(value: str) -> str:
    """Return `value` as zero-padded "HH:MM". Raises ValueError if it is not a time of day."""
    match = _SLOT_TIME_PATTERN.match(str(value).strip())
    if not match:
        raise ValueError(f"Invalid slot time: {value!r}")
    hour = int(match.group(1))
    minute = int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid slot time: {value!r}")
    return f"{hour:02d}:{minute:02d}"


@dataclass(frozen=True)
class SlotSet:
    """Available start times for one (provider, date) pair.

    `times` is strictly ascending with no duplicates. An empty tuple means
    the provider has no availability that day; "not loaded yet" is
    represented by the absence of a SlotSet, never by an empty one.
    """

    provider_id: str
    date: date
    times: tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, provider_id: str, day: date, raw_times: Iterable[str]) -> "SlotSet":
        """Build a SlotSet from server values. Raises ValueError on a malformed time."""
        normalized = {normalize_slot_time(value) for value in raw_times}
        return cls(provider_id=provider_id, date=day, times=tuple(sorted(normalized)))

    @property
    def key(self) -> tuple[str, date]:
        return (self.provider_id, self.date)

    @property
    def is_empty(self) -> bool:
        return not self.times

    def __contains__(self, value: object) -> bool:
        return value in self.times

    def __iter__(self) -> Iterator[str]:
        return iter(self.times)

    def __len__(self) -> int:
        return len(self.times)

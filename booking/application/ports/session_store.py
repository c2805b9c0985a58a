from __future__ import annotations

from abc import ABC, abstractmethod

from booking.application.use_cases.workflow import BookingWorkflow


class SessionStorePort(ABC):
    @abstractmethod
    def new_session_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def put(self, session_id: str, workflow: BookingWorkflow) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> BookingWorkflow | None:
        raise NotImplementedError

    @abstractmethod
    def remove(self, session_id: str) -> BookingWorkflow | None:
        """Drop the session and return its workflow, if any."""
        raise NotImplementedError

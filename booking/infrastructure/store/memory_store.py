from __future__ import annotations

import uuid
from collections import OrderedDict

from booking.application.ports.session_store import SessionStorePort
from booking.application.use_cases.workflow import BookingWorkflow


class MemorySessionStore(SessionStorePort):
    def __init__(self, session_limit: int = 500) -> None:
        self._sessions: OrderedDict[str, BookingWorkflow] = OrderedDict()
        self._session_limit = session_limit

    def new_session_id(self) -> str:
        return uuid.uuid4().hex

    def put(self, session_id: str, workflow: BookingWorkflow) -> None:
        self._sessions[session_id] = workflow
        self._sessions.move_to_end(session_id)
        while len(self._sessions) > self._session_limit:
            _, evicted = self._sessions.popitem(last=False)
            evicted.close()

    def get(self, session_id: str) -> BookingWorkflow | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> BookingWorkflow | None:
        return self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)

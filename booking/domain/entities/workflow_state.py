from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class WorkflowStatus(str, Enum):
    loading = "loading"
    failed = "failed"
    ready = "ready"
    slots_loading = "slots_loading"
    slots_ready = "slots_ready"
    slots_empty = "slots_empty"
    submitting = "submitting"
    confirmed = "confirmed"


# States in which the draft may be edited.
EDITABLE_STATUSES = frozenset(
    {
        WorkflowStatus.ready,
        WorkflowStatus.slots_loading,
        WorkflowStatus.slots_ready,
        WorkflowStatus.slots_empty,
    }
)

# States from which a validated submit may start.
SUBMITTABLE_STATUSES = frozenset(
    {
        WorkflowStatus.ready,
        WorkflowStatus.slots_ready,
        WorkflowStatus.slots_empty,
    }
)


@dataclass(frozen=True)
class Notice:
    level: str  # "info", "success", "error"
    code: str
    message: str

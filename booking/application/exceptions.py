class AvailabilityServiceError(RuntimeError):
    """Raised when the availability backend fails (timeouts, network errors, bad payloads)."""
    pass


class ProviderNotFoundError(AvailabilityServiceError):
    """Raised when the requested provider does not exist."""
    pass


class SlotFetchError(AvailabilityServiceError):
    """Raised when a slot query cannot be answered. Transient."""
    pass


class SubmissionError(AvailabilityServiceError):
    """Raised when the backend rejects or fails a booking request. Transient."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidSelectionError(ValueError):
    """Raised when a selection would break a draft invariant (past date, unknown service, missing slot)."""
    pass


class WorkflowStateError(RuntimeError):
    """Raised when an operation is not allowed in the workflow's current state."""
    pass

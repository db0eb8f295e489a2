"""
Domain errors raised by the scheduling core.

Each kind is a distinct class so the HTTP layer (or any other caller) can map
it to its own response without parsing messages:
- NotFoundError: a referenced doctor, service or appointment does not exist
- SlotConflictError: the requested interval is outside working hours or
  overlaps a blocking appointment
- ValidationFailure: malformed input or an illegal status transition
"""

from datetime import datetime
from typing import Optional, Sequence


class ClinicError(Exception):
    """Base class for errors the caller is expected to handle"""

    kind = "clinic_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ClinicError):
    """Raised when a referenced entity does not exist"""

    kind = "not_found"

    def __init__(self, entity: str, identifier):
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier


class SlotConflictError(ClinicError):
    """Raised when a doctor cannot take an appointment in the requested interval"""

    kind = "slot_conflict"

    def __init__(
        self,
        doctor_id: int,
        start: datetime,
        end: datetime,
        conflicting_ids: Optional[Sequence[int]] = None,
    ):
        super().__init__(
            f"Doctor {doctor_id} is not available between "
            f"{start.isoformat(timespec='minutes')} and {end.isoformat(timespec='minutes')}"
        )
        self.doctor_id = doctor_id
        self.start = start
        self.end = end
        self.conflicting_ids = list(conflicting_ids or [])


class ValidationFailure(ClinicError):
    """Raised when input is malformed or violates a domain rule"""

    kind = "validation_failure"


class InvalidTransitionError(ValidationFailure):
    """Raised when an appointment status change is not in the transition table"""

    kind = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change appointment status from {current} to {requested}")
        self.current = current
        self.requested = requested

"""
Appointment lifecycle state machine.

    NEW -> CONFIRMED -> COMPLETED
      \\        \\
       +--------+--> CANCELLED

COMPLETED and CANCELLED are terminal. CANCELLED is the only status that
releases the appointment's slot.
"""

import logging
from typing import Optional, Union

from ... import config
from ...exceptions import InvalidTransitionError, ValidationFailure
from ...models import NON_BLOCKING_STATUSES, AppointmentStatus

logger = logging.getLogger(__name__)

INITIAL_STATUS = AppointmentStatus.NEW

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset] = {
    AppointmentStatus.NEW: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CONFIRMED: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


def parse_status(value: Union[str, AppointmentStatus]) -> AppointmentStatus:
    """Convert a raw status value to AppointmentStatus, raising ValidationFailure if unknown"""
    if isinstance(value, AppointmentStatus):
        return value
    try:
        return AppointmentStatus(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in AppointmentStatus)
        raise ValidationFailure(f"Unknown appointment status '{value}' (allowed: {allowed})")


def is_transition_allowed(current: AppointmentStatus, requested: AppointmentStatus) -> bool:
    if current == requested:
        return True
    return requested in ALLOWED_TRANSITIONS[current]


def is_blocking(status: Union[str, AppointmentStatus]) -> bool:
    """Whether an appointment in this status holds its slot"""
    return parse_status(status).value not in NON_BLOCKING_STATUSES


def apply_transition(appointment, requested, strict: Optional[bool] = None) -> AppointmentStatus:
    """
    Move an appointment to the requested status.

    Args:
        appointment: Appointment whose status is changed in place
        requested: target status (enum or raw string)
        strict: reject transitions outside ALLOWED_TRANSITIONS;
            defaults to config.STRICT_STATUS_TRANSITIONS

    Returns:
        The previous status

    Raises:
        ValidationFailure: unknown status value
        InvalidTransitionError: illegal transition in strict mode
    """
    if strict is None:
        strict = config.STRICT_STATUS_TRANSITIONS

    current = parse_status(appointment.status)
    target = parse_status(requested)

    if not is_transition_allowed(current, target):
        if strict:
            raise InvalidTransitionError(current.value, target.value)
        logger.warning(
            f"⚠️ Appointment {appointment.id}: applying off-workflow transition "
            f"{current.value} -> {target.value}"
        )

    appointment.status = target.value
    return current

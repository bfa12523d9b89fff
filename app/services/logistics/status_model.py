"""
Delivery status model.

Three ordered states drive every status-dependent view and check:
Pending (0) < In Transit (1) < Delivered (2). The rank doubles as the
progress-bar step index, so a bar is filled ``rank * 50`` percent.

No transition graph is enforced by default: ``can_transition`` accepts any
pair so an operator can correct a status in either direction. Services take a
``TransitionPolicy`` so a stricter rule such as ``forward_only`` can be
plugged in without changing any signature.
"""
from typing import Callable, Dict, List, Tuple, Union

from app.core.exceptions import ValidationError
from app.models.shared.enums import DeliveryStatus

STATUS_ORDER: Tuple[DeliveryStatus, ...] = (
    DeliveryStatus.PENDING,
    DeliveryStatus.IN_TRANSIT,
    DeliveryStatus.DELIVERED,
)

INITIAL_STATUS: DeliveryStatus = DeliveryStatus.PENDING

PROGRESS_STEP_PERCENT = 50

TransitionPolicy = Callable[[DeliveryStatus, DeliveryStatus], bool]

_RANKS: Dict[DeliveryStatus, int] = {status: index for index, status in enumerate(STATUS_ORDER)}


def parse_status(value: Union[str, DeliveryStatus]) -> DeliveryStatus:
    """Resolve a display value ("In Transit") or member name ("IN_TRANSIT")"""
    if isinstance(value, DeliveryStatus):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for status in STATUS_ORDER:
            if normalized in (status.value.lower(), status.name.lower()):
                return status
    raise ValidationError(f"Invalid delivery status: {value!r}", field="status")


def rank(status: Union[str, DeliveryStatus]) -> int:
    return _RANKS[parse_status(status)]


def progress_percent(status: Union[str, DeliveryStatus]) -> int:
    return rank(status) * PROGRESS_STEP_PERCENT


def is_step_reached(step_index: int, status: Union[str, DeliveryStatus]) -> bool:
    return step_index <= rank(status)


def is_current(step_index: int, status: Union[str, DeliveryStatus]) -> bool:
    return step_index == rank(status)


def can_transition(current: DeliveryStatus, new: DeliveryStatus) -> bool:
    """Default policy: every transition is allowed, including backwards ones"""
    return True


def forward_only(current: DeliveryStatus, new: DeliveryStatus) -> bool:
    """Stricter policy: status may stay the same or move forward, never back"""
    return rank(new) >= rank(current)


def timeline(status: Union[str, DeliveryStatus]) -> List[dict]:
    """Per-step view of the status bar"""
    current = parse_status(status)
    return [
        {
            "step": index,
            "status": step,
            "reached": is_step_reached(index, current),
            "current": is_current(index, current),
        }
        for index, step in enumerate(STATUS_ORDER)
    ]

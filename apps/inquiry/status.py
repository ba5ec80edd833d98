# apps/inquiry/status.py
"""
Inquiry status lifecycle.

    unread <-> processed      admin "mark" actions, single or bulk
    unread|processed -> replied   forced by a successful reply

`replied` is terminal: nothing leads back out of it. Further replies keep it there.
"""
from __future__ import annotations

from .exceptions import InquiryError, InvalidStatusTransition
from .models import Inquiry

Status = Inquiry.Status

UNREAD = Status.UNREAD.value
PROCESSED = Status.PROCESSED.value
REPLIED = Status.REPLIED.value

# action name (as sent by admin UIs) -> target status
ADMIN_ACTIONS = {
    "processed": PROCESSED,
    "unread": UNREAD,
}

TRANSITIONS = {
    UNREAD: frozenset({UNREAD, PROCESSED, REPLIED}),
    PROCESSED: frozenset({PROCESSED, UNREAD, REPLIED}),
    REPLIED: frozenset({REPLIED}),
}


def target_for_action(action: str) -> str:
    try:
        return ADMIN_ACTIONS[(action or "").strip().lower()]
    except KeyError:
        raise InquiryError(f"Unknown status action: {action!r}. Use 'processed' or 'unread'.") from None


def can_transition(current: str, target: str) -> bool:
    return str(target) in TRANSITIONS.get(str(current), frozenset())


def check_admin_transition(current: str, target: str) -> None:
    """Admin marks only ever move between unread and processed."""
    if str(target) not in ADMIN_ACTIONS.values():
        raise InvalidStatusTransition(f"Status {target!r} cannot be set directly.")
    if not can_transition(current, target):
        raise InvalidStatusTransition()


def status_label(value: str) -> str:
    try:
        return Status(value).label
    except ValueError:
        return Status.UNREAD.label

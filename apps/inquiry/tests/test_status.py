import pytest

from apps.inquiry.exceptions import InquiryError, InvalidStatusTransition
from apps.inquiry.models import Inquiry
from apps.inquiry.status import (
    PROCESSED,
    REPLIED,
    UNREAD,
    can_transition,
    check_admin_transition,
    status_label,
    target_for_action,
)


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (UNREAD, PROCESSED, True),
        (PROCESSED, UNREAD, True),
        (UNREAD, REPLIED, True),
        (PROCESSED, REPLIED, True),
        (REPLIED, REPLIED, True),
        (REPLIED, UNREAD, False),
        (REPLIED, PROCESSED, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_choices_enum_members_behave_like_their_values():
    assert can_transition(Inquiry.Status.UNREAD, Inquiry.Status.PROCESSED)
    assert not can_transition(Inquiry.Status.REPLIED, Inquiry.Status.UNREAD)


def test_admin_marks_cannot_set_replied_directly():
    with pytest.raises(InvalidStatusTransition):
        check_admin_transition(UNREAD, REPLIED)


def test_admin_marks_cannot_leave_replied():
    with pytest.raises(InvalidStatusTransition):
        check_admin_transition(REPLIED, PROCESSED)
    # same-state marks are fine for everything else
    check_admin_transition(PROCESSED, PROCESSED)


def test_action_names_map_to_targets():
    assert target_for_action("processed") == PROCESSED
    assert target_for_action(" Unread ") == UNREAD
    with pytest.raises(InquiryError):
        target_for_action("replied")


def test_labels():
    assert status_label("unread") == "Unread"
    assert status_label("replied") == "Replied"
    assert status_label("bogus") == "Unread"

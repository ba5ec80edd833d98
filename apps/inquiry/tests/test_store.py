from datetime import datetime, timezone as dt_timezone
from unittest import mock

import pytest
from django.db import DatabaseError

from apps.inquiry.exceptions import InquiryError, InvalidStatusTransition, NotFoundError, PersistenceError
from apps.inquiry.models import Inquiry, InquiryReply
from apps.inquiry.store import InquiryStore, ReplyEntry
from apps.inquiry.validators import SubmissionDraft

FIXED = datetime(2025, 3, 1, 9, 30, tzinfo=dt_timezone.utc)


def _draft(**overrides):
    values = dict(
        product_ref="42",
        product_title="Blue Mug",
        product_url="https://shop.example.com/products/blue-mug/",
        sender_name="Jo",
        sender_email="jo@x.com",
        sender_phone="",
        message="Is this in stock?",
    )
    values.update(overrides)
    return SubmissionDraft(**values)


@pytest.mark.django_db
def test_create_starts_unread_with_no_replies_and_uses_clock():
    store = InquiryStore(clock=lambda: FIXED)
    inquiry_id = store.create(_draft())

    obj = store.get(inquiry_id)
    assert obj.status == Inquiry.Status.UNREAD
    assert obj.created_at == FIXED
    assert obj.replies.count() == 0


@pytest.mark.django_db
def test_create_wraps_database_errors(caplog):
    store = InquiryStore()
    with mock.patch.object(Inquiry.objects, "create", side_effect=DatabaseError("disk full")):
        with pytest.raises(PersistenceError) as exc:
            store.create(_draft())

    # the user-facing message never carries storage detail
    assert "disk full" not in exc.value.message
    assert exc.value.message == "Failed to save inquiry. Please try again later."
    assert "create failed" in caplog.text
    assert Inquiry.objects.count() == 0


@pytest.mark.django_db
def test_get_missing_or_garbage_id_raises_not_found():
    store = InquiryStore()
    with pytest.raises(NotFoundError):
        store.get(12345)
    with pytest.raises(NotFoundError):
        store.get("abc")


@pytest.mark.django_db
def test_set_status_toggles_and_is_idempotent(inquiry):
    store = InquiryStore()

    store.set_status(inquiry.pk, "processed")
    store.set_status(inquiry.pk, "processed")
    assert store.get(inquiry.pk).status == "processed"

    store.set_status(inquiry.pk, "unread")
    obj = store.get(inquiry.pk)
    assert obj.status == "unread"
    assert obj.replies.count() == 0


@pytest.mark.django_db
def test_set_status_refuses_replied_target_and_replied_source(inquiry):
    store = InquiryStore()
    with pytest.raises(InvalidStatusTransition):
        store.set_status(inquiry.pk, "replied")

    store.append_reply(inquiry.pk, ReplyEntry(body="Yes, in stock now!"))
    with pytest.raises(InvalidStatusTransition):
        store.set_status(inquiry.pk, "unread")
    assert store.get(inquiry.pk).status == "replied"


@pytest.mark.django_db
def test_set_status_on_missing_inquiry():
    with pytest.raises(NotFoundError):
        InquiryStore().set_status(999, "processed")


@pytest.mark.django_db
def test_append_reply_increments_log_and_forces_replied(inquiry):
    store = InquiryStore(clock=lambda: FIXED)
    store.set_status(inquiry.pk, "processed")

    reply = store.append_reply(
        inquiry.pk,
        ReplyEntry(body="Yes, in stock now!", replied_by_user_id=7, replied_by_name="Sam", replied_by_email="sam@x.com"),
    )

    obj = store.get(inquiry.pk)
    assert obj.status == "replied"
    assert obj.replies.count() == 1
    assert reply.created_at == FIXED
    assert reply.replied_by_user_id == 7

    store.append_reply(inquiry.pk, ReplyEntry(body="Shipped today as well."))
    obj = store.get(inquiry.pk)
    assert obj.status == "replied"
    assert [r.body for r in store.replies_for(inquiry.pk)] == ["Yes, in stock now!", "Shipped today as well."]


@pytest.mark.django_db
def test_append_reply_is_all_or_nothing(inquiry):
    store = InquiryStore()
    with mock.patch.object(Inquiry, "save", side_effect=DatabaseError("locked")):
        with pytest.raises(PersistenceError):
            store.append_reply(inquiry.pk, ReplyEntry(body="Yes, in stock now!"))

    # the reply row was rolled back together with the failed status write
    assert InquiryReply.objects.count() == 0
    assert store.get(inquiry.pk).status == "unread"


@pytest.mark.django_db
def test_list_by_status_and_unprocessed_count(product):
    store = InquiryStore()
    a = store.create(_draft(sender_name="Ann"))
    b = store.create(_draft(sender_name="Bob"))
    c = store.create(_draft(sender_name="Cy"))
    store.set_status(b, "processed")
    store.append_reply(c, ReplyEntry(body="Thanks for asking!"))

    assert [i.pk for i in store.list_by_status()] == [c, b, a]
    assert [i.pk for i in store.list_by_status("processed")] == [b]
    assert [i.pk for i in store.list_by_status("replied")] == [c]
    assert store.list_by_status("replied")[0].reply_count == 1
    # unread + replied still count as needing attention
    assert store.count_unprocessed() == 2

    with pytest.raises(InquiryError):
        store.list_by_status("archived")


@pytest.mark.django_db
def test_delete_all_reports_inquiry_count(inquiry):
    store = InquiryStore()
    store.append_reply(inquiry.pk, ReplyEntry(body="Yes, in stock now!"))
    store.create(_draft())

    assert store.delete_all() == 2
    assert Inquiry.objects.count() == 0
    assert InquiryReply.objects.count() == 0

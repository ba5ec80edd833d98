from dataclasses import FrozenInstanceError, replace
from smtplib import SMTPException
from unittest import mock

import pytest

from apps.inquiry.email import (
    ADMIN_ALERT,
    AUTO_REPLY,
    REPLY,
    Notifier,
    OutgoingMail,
    django_mail_transport,
)
from apps.inquiry.hooks import PRE_SEND, HookPipeline
from apps.inquiry.options import InquirySettings


@pytest.mark.django_db
def test_admin_alert_goes_to_site_admin_when_no_inquiry_admin_set(inquiry, inquiry_settings, mailoutbox):
    sent = Notifier(inquiry_settings).send(ADMIN_ALERT, inquiry)

    assert sent is True
    assert len(mailoutbox) == 1
    m = mailoutbox[0]
    assert m.to == ["owner@shop.example.com"]
    assert m.subject == "New Product Inquiry: Blue Mug"
    assert m.from_email == "Blue Shop <owner@shop.example.com>"
    assert m.reply_to == ["Jo <jo@x.com>"]
    assert "Product URL: https://shop.example.com/products/blue-mug/" in m.body
    assert f"View/Reply: https://shop.example.com/admin/inquiry/inquiry/{inquiry.pk}/change/" in m.body
    assert "Is this in stock?" in m.body
    # no phone given, no phone line
    assert "Phone:" not in m.body


@pytest.mark.django_db
def test_admin_alert_uses_configured_admin_and_lists_phone(inquiry, settings, mailoutbox):
    settings.INQUIRY_ADMIN_EMAIL = "sales@shop.example.com"
    inquiry.sender_phone = "555-0100"
    Notifier(InquirySettings.resolve()).send(ADMIN_ALERT, inquiry)

    assert mailoutbox[0].to == ["sales@shop.example.com"]
    assert "Phone: 555-0100" in mailoutbox[0].body


@pytest.mark.django_db
def test_auto_reply_substitutes_placeholders_literally(inquiry, inquiry_settings, mailoutbox):
    s = replace(
        inquiry_settings,
        auto_reply_subject="Thanks {customer_name}",
        auto_reply_message="{customer_name} asked about {product_name} at {site_name} ({site_url}); {unknown} stays.",
    )
    Notifier(s).send(AUTO_REPLY, inquiry)

    m = mailoutbox[0]
    assert m.to == ["jo@x.com"]
    assert m.subject == "Thanks Jo"
    assert m.body == "Jo asked about Blue Mug at Blue Shop (https://shop.example.com); {unknown} stays."


@pytest.mark.django_db
def test_reply_layout_and_subject(inquiry, inquiry_settings, mailoutbox):
    Notifier(inquiry_settings).send(REPLY, inquiry, {"body": "Yes, in stock now!", "actor_name": "Sam Keeper"})

    m = mailoutbox[0]
    assert m.to == ["jo@x.com"]
    assert m.subject == "Response to your inquiry about: Blue Mug"
    assert m.body.startswith("Hello Jo,\n")
    assert "--- Our Response ---\n\nYes, in stock now!\n" in m.body
    assert "Product Link: https://shop.example.com/products/blue-mug/" in m.body
    assert m.body.rstrip().endswith("Best regards,\nSam Keeper\nBlue Shop\nowner@shop.example.com")


@pytest.mark.django_db
def test_plain_text_bodies_are_not_html_escaped(inquiry, inquiry_settings, mailoutbox):
    inquiry.sender_name = "O'Brien & Sons"
    inquiry.message = "Is it <b>big</b> & blue?"
    notifier = Notifier(inquiry_settings)

    notifier.send(ADMIN_ALERT, inquiry)
    notifier.send(REPLY, inquiry, {"body": "Yes, 30cm & \"dishwasher safe\"."})

    alert, reply = mailoutbox
    assert "Name: O'Brien & Sons\n" in alert.body
    assert "Is it <b>big</b> & blue?" in alert.body
    assert reply.body.startswith("Hello O'Brien & Sons,\n")
    assert 'Yes, 30cm & "dishwasher safe".' in reply.body


@pytest.mark.django_db
def test_reply_signature_falls_back_to_store_admin(inquiry, inquiry_settings, mailoutbox):
    Notifier(inquiry_settings).send(REPLY, inquiry, {"body": "Yes, in stock now!"})
    assert "Best regards,\nStore Admin\n" in mailoutbox[0].body


@pytest.mark.django_db
def test_deleted_product_is_tolerated(inquiry, inquiry_settings, mailoutbox):
    inquiry.product_ref = "777"
    assert Notifier(inquiry_settings).send(ADMIN_ALERT, inquiry)
    assert mailoutbox[0].subject == "New Product Inquiry: (Product Deleted)"


@pytest.mark.django_db
def test_transport_failure_returns_false_and_logs(inquiry, inquiry_settings, caplog):
    notifier = Notifier(inquiry_settings, transport=lambda *a: False)
    assert notifier.send(REPLY, inquiry, {"body": "Yes, in stock now!"}) is False
    assert "failed to send reply email" in caplog.text


@pytest.mark.django_db
def test_missing_admin_address_skips_alert(inquiry, inquiry_settings, mailoutbox):
    s = replace(inquiry_settings, admin_email="")
    assert Notifier(s).send(ADMIN_ALERT, inquiry) is False
    assert mailoutbox == []


@pytest.mark.django_db
def test_pre_send_hooks_run_in_order(inquiry, inquiry_settings, mailoutbox):
    def tag(mail, *, kind, inquiry):
        return replace(mail, subject=f"[{kind}] {mail.subject}")

    def bcc_header(mail, *, kind, inquiry):
        return replace(mail, headers={**mail.headers, "X-Inquiry-Id": str(inquiry.pk)})

    hooks = HookPipeline({PRE_SEND: [tag, bcc_header]})
    Notifier(inquiry_settings, hooks=hooks).send(ADMIN_ALERT, inquiry)

    m = mailoutbox[0]
    assert m.subject == "[admin_alert] New Product Inquiry: Blue Mug"
    assert m.extra_headers["X-Inquiry-Id"] == str(inquiry.pk)


def test_unknown_kind_is_rejected(inquiry_settings):
    with pytest.raises(ValueError):
        Notifier(inquiry_settings, lookup=lambda ref: None).send("newsletter", mock.Mock(pk=1))


def test_django_transport_swallows_smtp_errors(caplog):
    with mock.patch("apps.inquiry.email.EmailMessage.send", side_effect=SMTPException("boom")):
        assert django_mail_transport(["jo@x.com"], "Hi", "Body", {"From": "Shop <a@b.c>"}) is False
    assert "mail transport failed" in caplog.text


def test_outgoing_mail_is_immutable():
    mail = OutgoingMail(to=("a@b.c",), subject="s", body="b")
    with pytest.raises(FrozenInstanceError):
        mail.subject = "changed"

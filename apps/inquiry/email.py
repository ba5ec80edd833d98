# apps/inquiry/email.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from smtplib import SMTPException
from typing import Callable, Dict, Literal, Mapping, Optional, Sequence

from django.conf import settings as dj_settings
from django.core.mail import BadHeaderError, EmailMessage
from django.template.loader import render_to_string
from django.urls import reverse
from django.utils import timezone
from django.utils.formats import date_format

from .hooks import PRE_SEND, HookPipeline
from .models import Inquiry
from .options import InquirySettings, product_lookup, render_template

logger = logging.getLogger(__name__)

Kind = Literal["admin_alert", "auto_reply", "reply"]
ADMIN_ALERT: Kind = "admin_alert"
AUTO_REPLY: Kind = "auto_reply"
REPLY: Kind = "reply"

DELETED_PRODUCT = "(Product Deleted)"
FALLBACK_ADMIN_NAME = "Store Admin"


@dataclass(frozen=True)
class OutgoingMail:
    """What the notifier hands to pre_send hooks and then to the transport."""

    to: tuple
    subject: str
    body: str
    headers: Dict[str, str] = field(default_factory=dict)


Transport = Callable[[Sequence[str], str, str, Mapping[str, str]], bool]


def django_mail_transport(to, subject, body, headers) -> bool:
    """
    Mail Transport over Django's configured email backend.
    `From` and `Reply-To` in headers become the envelope fields; the rest
    are passed through as extra headers. Never raises on delivery problems.
    """
    headers = dict(headers or {})
    from_email = headers.pop("From", None) or dj_settings.DEFAULT_FROM_EMAIL
    reply_to = headers.pop("Reply-To", None)

    message = EmailMessage(
        subject=subject,
        body=body,
        from_email=from_email,
        to=list(to),
        reply_to=[reply_to] if reply_to else None,
        headers=headers or None,
    )
    try:
        return message.send(fail_silently=False) > 0
    except (SMTPException, BadHeaderError, OSError):
        logger.exception("mail transport failed (to=%s, subject=%r)", ", ".join(to), subject)
        return False


def _mailbox(name: str, address: str) -> str:
    return f"{name} <{address}>" if name else address


class Notifier:
    """
    Renders and sends the three plain-text inquiry emails.
    `send` reports delivery as a bool; callers decide whether a failure matters.
    """

    def __init__(
        self,
        settings: InquirySettings,
        *,
        transport: Optional[Transport] = None,
        hooks: Optional[HookPipeline] = None,
        lookup: Optional[Callable] = None,
    ):
        self.settings = settings
        self.transport = transport or django_mail_transport
        self.hooks = hooks or HookPipeline()
        self.lookup = lookup or product_lookup()

    def send(self, kind: Kind, inquiry: Inquiry, extra: Optional[Mapping] = None) -> bool:
        builders = {
            ADMIN_ALERT: self.build_admin_alert,
            AUTO_REPLY: self.build_auto_reply,
            REPLY: self.build_reply,
        }
        if kind not in builders:
            raise ValueError(f"Unknown email kind: {kind!r}")

        mail = builders[kind](inquiry, extra or {})
        if mail is None:
            logger.warning("inquiry %s: no recipient for %s email, skipped", inquiry.pk, kind)
            return False

        mail = self.hooks.run(PRE_SEND, mail, kind=kind, inquiry=inquiry)
        sent = bool(self.transport(mail.to, mail.subject, mail.body, mail.headers))
        if sent:
            logger.info("inquiry %s: %s email sent to %s", inquiry.pk, kind, ", ".join(mail.to))
        else:
            logger.error("inquiry %s: failed to send %s email", inquiry.pk, kind)
        return sent

    # ---- builders ----

    def build_admin_alert(self, inquiry: Inquiry, extra: Mapping) -> Optional[OutgoingMail]:
        s = self.settings
        if not s.admin_email:
            return None
        title, url = self._product(inquiry, extra)

        body = render_to_string(
            "email/inquiry/admin_alert.txt",
            {
                "inquiry": inquiry,
                "product_title": title,
                "product_url": url,
                "admin_link": self.admin_link(inquiry),
                "site_name": s.site_name,
            },
        )
        return OutgoingMail(
            to=(s.admin_email,),
            subject=f"New Product Inquiry: {title}",
            body=body.strip(),
            headers={
                "From": _mailbox(s.site_name, s.site_admin_email or s.from_email),
                "Reply-To": _mailbox(inquiry.sender_name, inquiry.sender_email),
            },
        )

    def build_auto_reply(self, inquiry: Inquiry, extra: Mapping) -> Optional[OutgoingMail]:
        s = self.settings
        title, _ = self._product(inquiry, extra)
        values = s.placeholders(customer_name=inquiry.sender_name, product_name=title)
        return OutgoingMail(
            to=(inquiry.sender_email,),
            subject=render_template(s.auto_reply_subject, values),
            body=render_template(s.auto_reply_message, values),
            headers=self._store_headers(),
        )

    def build_reply(self, inquiry: Inquiry, extra: Mapping) -> Optional[OutgoingMail]:
        s = self.settings
        title, url = self._product(inquiry, extra)

        body = render_to_string(
            "email/inquiry/reply.txt",
            {
                "inquiry": inquiry,
                "body": extra.get("body", ""),
                "product_title": title,
                "product_url": url,
                "submitted": date_format(timezone.localtime(inquiry.created_at), "DATETIME_FORMAT"),
                "admin_name": extra.get("actor_name") or FALLBACK_ADMIN_NAME,
                "site_name": s.site_name,
                "admin_email": s.admin_email,
            },
        )
        values = s.placeholders(customer_name=inquiry.sender_name, product_name=title)
        return OutgoingMail(
            to=(inquiry.sender_email,),
            subject=render_template(s.reply_subject, values),
            body=body.strip(),
            headers=self._store_headers(),
        )

    # ---- helpers ----

    def admin_link(self, inquiry: Inquiry) -> str:
        return self.settings.site_url + reverse("admin:inquiry_inquiry_change", args=[inquiry.pk])

    def _store_headers(self) -> Dict[str, str]:
        s = self.settings
        sender = s.admin_email or s.from_email
        headers = {"From": _mailbox(s.site_name, sender)}
        if s.admin_email:
            headers["Reply-To"] = s.admin_email
        return headers

    def _product(self, inquiry: Inquiry, extra: Mapping) -> tuple[str, str]:
        if extra.get("product_title"):
            return extra["product_title"], extra.get("product_url", "")
        info = self.lookup(inquiry.product_ref)
        if info is None:
            return DELETED_PRODUCT, ""
        return info.title, info.permalink

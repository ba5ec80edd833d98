# apps/inquiry/store.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from django.db import DatabaseError, transaction
from django.db.models import Count, QuerySet
from django.utils import timezone

from .exceptions import InquiryError, NotFoundError, PersistenceError
from .models import Inquiry, InquiryReply
from .status import PROCESSED, REPLIED, UNREAD, check_admin_transition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplyEntry:
    body: str
    replied_by_user_id: Optional[int] = None
    replied_by_name: str = ""
    replied_by_email: str = ""
    timestamp: Optional[datetime] = None


@contextmanager
def _persisting(what: str, inquiry_id=None):
    try:
        yield
    except DatabaseError as exc:
        logger.exception("inquiry store: %s failed (inquiry=%s)", what, inquiry_id)
        raise PersistenceError() from exc


class InquiryStore:
    """Typed repository over the Inquiry tables. All writes go through here."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or timezone.now

    # ---- reads ----

    def get(self, inquiry_id) -> Inquiry:
        try:
            return Inquiry.objects.get(pk=inquiry_id)
        except (Inquiry.DoesNotExist, ValueError, TypeError):
            raise NotFoundError() from None

    def list_by_status(self, status: str | None = None) -> QuerySet:
        qs = Inquiry.objects.annotate(reply_count=Count("replies")).order_by("-created_at", "-id")
        if status:
            if status not in Inquiry.Status.values:
                raise InquiryError(f"Unknown status filter: {status!r}.")
            qs = qs.filter(status=status)
        return qs

    def count_unprocessed(self) -> int:
        return Inquiry.objects.exclude(status=PROCESSED).count()

    def count(self) -> int:
        return Inquiry.objects.count()

    def ids_newest_first(self, limit: int | None = None) -> List[int]:
        qs = Inquiry.objects.order_by("-created_at", "-id").values_list("id", flat=True)
        if limit is not None:
            qs = qs[:limit]
        return list(qs)

    def fetch_many(self, ids) -> dict:
        """pk -> Inquiry for the ids that still exist."""
        clean = [i for i in (_as_int(x) for x in ids) if i is not None]
        return Inquiry.objects.in_bulk(clean)

    def replies_for(self, inquiry_id) -> QuerySet:
        return InquiryReply.objects.filter(inquiry_id=inquiry_id).order_by("created_at", "id")

    # ---- writes ----

    def create(self, draft) -> int:
        with _persisting("create"):
            inquiry = Inquiry.objects.create(
                product_ref=draft.product_ref,
                sender_name=draft.sender_name,
                sender_email=draft.sender_email,
                sender_phone=draft.sender_phone or "",
                message=draft.message,
                status=UNREAD,
                created_at=self.clock(),
            )
        logger.info("inquiry %s created for product %s", inquiry.pk, draft.product_ref)
        return inquiry.pk

    def set_status(self, inquiry_id, status: str) -> Inquiry:
        """Idempotent admin mark; replied inquiries refuse (see status.py)."""
        with _persisting("set_status", inquiry_id), transaction.atomic():
            inquiry = self._locked(inquiry_id)
            check_admin_transition(inquiry.status, status)
            if inquiry.status != status:
                inquiry.status = status
                inquiry.save(update_fields=["status", "updated_at"])
        return inquiry

    def append_reply(self, inquiry_id, entry: ReplyEntry) -> InquiryReply:
        """Append to the reply log and force `replied` in one transaction."""
        with _persisting("append_reply", inquiry_id), transaction.atomic():
            inquiry = self._locked(inquiry_id)
            reply = InquiryReply.objects.create(
                inquiry=inquiry,
                created_at=entry.timestamp or self.clock(),
                replied_by_user_id=entry.replied_by_user_id,
                replied_by_name=entry.replied_by_name,
                replied_by_email=entry.replied_by_email,
                body=entry.body,
            )
            if inquiry.status != REPLIED:
                inquiry.status = REPLIED
                inquiry.save(update_fields=["status", "updated_at"])
        return reply

    def delete_all(self) -> int:
        """Bulk purge for the uninstall flow. Returns the number of inquiries removed."""
        with _persisting("delete_all"), transaction.atomic():
            _, per_model = Inquiry.objects.all().delete()
        deleted = per_model.get(Inquiry._meta.label, 0)
        logger.warning("inquiry store: purged %s inquiries", deleted)
        return deleted

    def _locked(self, inquiry_id) -> Inquiry:
        try:
            return Inquiry.objects.select_for_update().get(pk=inquiry_id)
        except (Inquiry.DoesNotExist, ValueError, TypeError):
            raise NotFoundError() from None


def _as_int(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

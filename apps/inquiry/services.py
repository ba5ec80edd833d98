from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Mapping, Optional

from django.db.models import QuerySet
from django.utils import timezone
from django.utils.formats import date_format

from .email import ADMIN_ALERT, AUTO_REPLY, DELETED_PRODUCT, FALLBACK_ADMIN_NAME, REPLY, Notifier
from .exceptions import (
    ExportTooLarge,
    InquiryError,
    InvalidStatusTransition,
    MailDeliveryFailure,
    NotFoundError,
    PersistenceError,
    SubmissionInvalid,
)
from .export import InquiryExporter, build_filename
from .forms import ReplyForm
from .hooks import PRE_CREATE, HookPipeline
from .models import Inquiry, InquiryReply
from .options import InquirySettings, product_lookup
from .permissions import PermissionAuthorizer
from .status import target_for_action
from .store import InquiryStore, ReplyEntry
from .validators import validate_submission

logger = logging.getLogger(__name__)


# ---- Actor ----

@dataclass(frozen=True)
class Actor:
    user_id: Optional[int]
    display_name: str
    email: str

    @classmethod
    def from_user(cls, user) -> "Actor":
        name = (user.get_full_name() or "").strip() or user.get_username()
        return cls(user_id=user.pk, display_name=name, email=getattr(user, "email", "") or "")


# ---- Submit ----

@dataclass
class SubmitResult:
    ok: bool
    inquiry_id: Optional[int] = None
    errors: List[str] = field(default_factory=list)
    message: str = ""
    # storage trouble, not bad input; the caller may retry later
    retryable: bool = False

    def as_dict(self) -> dict:
        if self.ok:
            return {"ok": True, "inquiry_id": self.inquiry_id, "message": self.message}
        return {"ok": False, "errors": list(self.errors), "message": "\n".join(self.errors)}


def submit_inquiry(
    data: Mapping,
    *,
    settings: Optional[InquirySettings] = None,
    store: Optional[InquiryStore] = None,
    notifier: Optional[Notifier] = None,
    hooks: Optional[HookPipeline] = None,
    lookup: Optional[Callable] = None,
) -> SubmitResult:
    """
    Validate, persist, notify. Never raises for bad input or storage trouble:
    the outcome is always a SubmitResult. Notification failures are logged
    by the notifier and do not change the outcome.
    """
    settings = settings or InquirySettings.resolve()
    lookup = lookup or product_lookup()
    hooks = hooks or HookPipeline.from_settings()
    store = store or InquiryStore()

    checked = validate_submission(data, lookup=lookup)
    if not checked.ok:
        return SubmitResult(ok=False, errors=list(checked.errors))

    draft = hooks.run(PRE_CREATE, checked.draft, raw=data)
    try:
        inquiry_id = store.create(draft)
    except PersistenceError as exc:
        return SubmitResult(ok=False, errors=[exc.message], retryable=True)

    inquiry = store.get(inquiry_id)
    notifier = notifier or Notifier(settings, hooks=hooks, lookup=lookup)
    extra = {"product_title": draft.product_title, "product_url": draft.product_url}
    notifier.send(ADMIN_ALERT, inquiry, extra)
    if settings.auto_reply_enabled:
        notifier.send(AUTO_REPLY, inquiry, extra)

    return SubmitResult(ok=True, inquiry_id=inquiry_id, message=settings.success_message)


# ---- Status ----

def mark_status(
    inquiry_id,
    action: str,
    *,
    user,
    store: Optional[InquiryStore] = None,
    authorizer: Optional[PermissionAuthorizer] = None,
) -> Inquiry:
    (authorizer or PermissionAuthorizer()).require_edit(user, inquiry_id)
    target = target_for_action(action)
    return (store or InquiryStore()).set_status(inquiry_id, target)


@dataclass
class BulkResult:
    status: str
    updated: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    missing: List = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "ok": True,
            "status": self.status,
            "updated": len(self.updated),
            "skipped": len(self.skipped),
            "missing": len(self.missing),
            "skipped_ids": self.skipped,
        }


def bulk_mark_status(
    ids: Iterable,
    action: str,
    *,
    user,
    store: Optional[InquiryStore] = None,
    authorizer: Optional[PermissionAuthorizer] = None,
) -> BulkResult:
    """Mark many at once. Replied inquiries are skipped, unknown ids counted as missing."""
    authorizer = authorizer or PermissionAuthorizer()
    authorizer.require_edit(user)
    store = store or InquiryStore()
    result = BulkResult(status=target_for_action(action))

    for inquiry_id in ids:
        try:
            inquiry = store.set_status(inquiry_id, result.status)
        except InvalidStatusTransition:
            result.skipped.append(int(inquiry_id))
        except NotFoundError:
            result.missing.append(inquiry_id)
        else:
            result.updated.append(inquiry.pk)

    logger.info(
        "bulk mark %s: %s updated, %s skipped, %s missing",
        result.status, len(result.updated), len(result.skipped), len(result.missing),
    )
    return result


# ---- Reply ----

@dataclass
class ReplyResult:
    ok: bool
    replies_count: int
    last_reply: str

    def as_dict(self) -> dict:
        return {"ok": self.ok, "replies_count": self.replies_count, "last_reply": self.last_reply}


def reply_summary(reply: Optional[InquiryReply]) -> str:
    if reply is None:
        return ""
    when = date_format(timezone.localtime(reply.created_at), "DATETIME_FORMAT")
    return f"Last reply by {reply.replied_by_name or FALLBACK_ADMIN_NAME} on {when}"


def reply_to_inquiry(
    inquiry_id,
    body: str,
    *,
    user,
    settings: Optional[InquirySettings] = None,
    store: Optional[InquiryStore] = None,
    notifier: Optional[Notifier] = None,
    authorizer: Optional[PermissionAuthorizer] = None,
) -> ReplyResult:
    """
    Email the customer, then log the reply and force `replied`.
    Nothing is recorded unless the email went out.
    """
    (authorizer or PermissionAuthorizer()).require_edit(user, inquiry_id)

    form = ReplyForm(data={"body": body})
    if not form.is_valid():
        raise SubmissionInvalid([form.errors["body"][0]])
    body = form.cleaned_data["body"]

    store = store or InquiryStore()
    inquiry = store.get(inquiry_id)
    actor = Actor.from_user(user)

    notifier = notifier or Notifier(settings or InquirySettings.resolve(), hooks=HookPipeline.from_settings())
    if not notifier.send(REPLY, inquiry, {"body": body, "actor_name": actor.display_name}):
        raise MailDeliveryFailure()

    store.append_reply(
        inquiry.pk,
        ReplyEntry(
            body=body,
            replied_by_user_id=actor.user_id,
            replied_by_name=actor.display_name,
            replied_by_email=actor.email,
        ),
    )
    replies = list(store.replies_for(inquiry.pk))
    logger.info("inquiry %s replied by user %s (%s replies)", inquiry.pk, actor.user_id, len(replies))
    return ReplyResult(ok=True, replies_count=len(replies), last_reply=reply_summary(replies[-1] if replies else None))


# ---- Export ----

@dataclass
class ExportPlan:
    filename: str
    count: int
    chunks: Iterator[str]


def export_inquiries(
    ids: Iterable,
    *,
    user,
    settings: Optional[InquirySettings] = None,
    exporter: Optional[InquiryExporter] = None,
    authorizer: Optional[PermissionAuthorizer] = None,
) -> ExportPlan:
    """Export the given ids. Size is checked up front; the chunks are lazy."""
    (authorizer or PermissionAuthorizer()).require_view(user)
    settings = settings or InquirySettings.resolve()
    exporter = exporter or InquiryExporter(settings)

    ids = list(ids)
    if not ids:
        raise InquiryError("No inquiries selected for export.")
    chunks = exporter.stream(ids)
    return ExportPlan(filename=build_filename(settings.site_name, len(ids)), count=len(ids), chunks=chunks)


def export_all_ids(*, settings: InquirySettings, store: Optional[InquiryStore] = None) -> List[int]:
    """Every inquiry id, newest first; refused when the total is over the limit."""
    store = store or InquiryStore()
    total = store.count()
    if total > settings.export_limit:
        raise ExportTooLarge(requested=total, limit=settings.export_limit)
    if total == 0:
        raise NotFoundError("No inquiries found to export.")
    return store.ids_newest_first(limit=settings.export_limit)


# ---- Listing ----

def list_inquiries(
    status: Optional[str] = None,
    *,
    user,
    store: Optional[InquiryStore] = None,
    authorizer: Optional[PermissionAuthorizer] = None,
) -> QuerySet:
    (authorizer or PermissionAuthorizer()).require_view(user)
    return (store or InquiryStore()).list_by_status(status)


def count_unprocessed(store: Optional[InquiryStore] = None) -> int:
    return (store or InquiryStore()).count_unprocessed()


def inquiry_title(inquiry: Inquiry, lookup: Optional[Callable] = None) -> str:
    info = (lookup or product_lookup())(inquiry.product_ref)
    title = info.title if info is not None else DELETED_PRODUCT
    return f"{title} — {inquiry.sender_name}"

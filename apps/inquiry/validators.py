# apps/inquiry/validators.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Tuple

from .forms import InquiryForm
from .options import product_lookup

# Error order follows the form layout, not the order Django happens to clean in.
FIELD_ORDER = ("product_ref", "sender_name", "sender_email", "sender_phone", "message")


@dataclass(frozen=True)
class SubmissionDraft:
    product_ref: str
    product_title: str
    product_url: str
    sender_name: str
    sender_email: str
    sender_phone: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    draft: Optional[SubmissionDraft]
    errors: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.draft is not None and not self.errors


def validate_submission(data: Mapping, *, lookup: Optional[Callable] = None) -> ValidationResult:
    """
    Check a raw submission. All rules run; every failing field contributes
    one message. On failure nothing is normalized and no draft is returned.
    """
    form = InquiryForm(data=data, lookup=lookup or product_lookup())
    if not form.is_valid():
        errors = []
        for field in FIELD_ORDER:
            field_errors = form.errors.get(field)
            if field_errors:
                errors.append(field_errors[0])
        errors.extend(form.non_field_errors())
        return ValidationResult(draft=None, errors=tuple(errors))

    cd = form.cleaned_data
    return ValidationResult(
        draft=SubmissionDraft(
            product_ref=cd["product_ref"],
            product_title=form.product.title,
            product_url=form.product.permalink,
            sender_name=cd["sender_name"],
            sender_email=cd["sender_email"],
            sender_phone=cd.get("sender_phone") or "",
            message=cd["message"],
        )
    )

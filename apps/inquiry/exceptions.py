# apps/inquiry/exceptions.py
from __future__ import annotations


class InquiryError(Exception):
    """Base error; `message` is always safe to show to the person who triggered it."""

    status_code = 400
    default_message = "The inquiry request could not be completed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"ok": False, "detail": self.message}


class SubmissionInvalid(InquiryError):
    status_code = 400
    default_message = "Please correct the highlighted fields."

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors) or None)

    def as_dict(self) -> dict:
        return {"ok": False, "detail": self.message, "errors": self.errors}


class AuthorizationError(InquiryError):
    status_code = 403
    default_message = "You do not have permission to perform this action."


class NotFoundError(InquiryError):
    status_code = 404
    default_message = "Invalid inquiry."


class InvalidStatusTransition(InquiryError):
    status_code = 409
    default_message = "This inquiry has been replied to and can no longer change status."


class PersistenceError(InquiryError):
    status_code = 503
    default_message = "Failed to save inquiry. Please try again later."


class MailDeliveryFailure(InquiryError):
    status_code = 502
    default_message = "Failed to send reply email. Please check your email configuration."


class ExportTooLarge(InquiryError):
    status_code = 413

    def __init__(self, requested: int, limit: int):
        self.requested = requested
        self.limit = limit
        super().__init__(
            f"Cannot export {requested} inquiries. The export limit is {limit}. "
            "Please select fewer inquiries."
        )

    def as_dict(self) -> dict:
        return {"ok": False, "detail": self.message, "requested": self.requested, "limit": self.limit}

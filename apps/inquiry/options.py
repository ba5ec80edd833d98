# apps/inquiry/options.py
from __future__ import annotations

from dataclasses import dataclass, replace

from django.conf import settings as dj_settings
from django.utils.module_loading import import_string

from .models import InquiryOptions

DEFAULT_REPLY_SUBJECT = "Response to your inquiry about: {product_name}"


@dataclass(frozen=True)
class InquirySettings:
    """
    Site-wide inquiry configuration, resolved once per request and passed
    explicitly to the notifier, exporter and services.
    """

    admin_email: str
    site_admin_email: str
    site_name: str
    site_url: str
    from_email: str
    success_message: str
    auto_reply_enabled: bool
    auto_reply_subject: str
    auto_reply_message: str
    reply_subject: str = DEFAULT_REPLY_SUBJECT
    export_limit: int = 5000
    export_batch_size: int = 100

    @classmethod
    def from_django(cls) -> "InquirySettings":
        site_admin = getattr(dj_settings, "SITE_ADMIN_EMAIL", "") or ""
        return cls(
            admin_email=getattr(dj_settings, "INQUIRY_ADMIN_EMAIL", "") or site_admin,
            site_admin_email=site_admin,
            site_name=getattr(dj_settings, "SITE_NAME", ""),
            site_url=getattr(dj_settings, "SITE_URL", "").rstrip("/"),
            from_email=getattr(dj_settings, "DEFAULT_FROM_EMAIL", "") or site_admin,
            success_message=getattr(dj_settings, "INQUIRY_SUCCESS_MESSAGE", ""),
            auto_reply_enabled=bool(getattr(dj_settings, "INQUIRY_AUTO_REPLY_ENABLED", True)),
            auto_reply_subject=getattr(dj_settings, "INQUIRY_AUTO_REPLY_SUBJECT", ""),
            auto_reply_message=getattr(dj_settings, "INQUIRY_AUTO_REPLY_MESSAGE", ""),
            reply_subject=getattr(dj_settings, "INQUIRY_REPLY_SUBJECT", DEFAULT_REPLY_SUBJECT),
            export_limit=int(getattr(dj_settings, "INQUIRY_EXPORT_LIMIT", 5000)),
            export_batch_size=int(getattr(dj_settings, "INQUIRY_EXPORT_BATCH_SIZE", 100)),
        )

    @classmethod
    def resolve(cls) -> "InquirySettings":
        """Django settings first, then the store-editable InquiryOptions row on top."""
        base = cls.from_django()
        row = InquiryOptions.current()
        if row is None:
            return base

        overrides = {}
        if row.admin_email:
            overrides["admin_email"] = row.admin_email
        if row.success_message:
            overrides["success_message"] = row.success_message
        if row.auto_reply_enabled is not None:
            overrides["auto_reply_enabled"] = row.auto_reply_enabled
        if row.auto_reply_subject:
            overrides["auto_reply_subject"] = row.auto_reply_subject
        if row.auto_reply_message:
            overrides["auto_reply_message"] = row.auto_reply_message
        return replace(base, **overrides)

    def placeholders(self, *, customer_name: str, product_name: str) -> dict[str, str]:
        return {
            "{customer_name}": customer_name,
            "{product_name}": product_name,
            "{admin_email}": self.admin_email,
            "{site_name}": self.site_name,
            "{site_url}": self.site_url,
        }


def render_template(template: str, replacements: dict[str, str]) -> str:
    """Literal placeholder substitution; no template engine, no escaping."""
    out = template or ""
    for key, value in replacements.items():
        out = out.replace(key, "" if value is None else str(value))
    return out


def product_lookup():
    """The configured Product Lookup callable: resolve(product_ref) -> ProductInfo | None."""
    return import_string(getattr(dj_settings, "INQUIRY_PRODUCT_LOOKUP", "apps.catalog.lookup.resolve"))

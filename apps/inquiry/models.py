from django.db import models
from django.utils import timezone


class Inquiry(models.Model):
    class Status(models.TextChoices):
        UNREAD = "unread", "Unread"
        PROCESSED = "processed", "Processed"
        REPLIED = "replied", "Replied"

    # Opaque reference into the catalog; may dangle once the product is removed.
    product_ref = models.CharField(max_length=64)

    sender_name = models.TextField()
    sender_email = models.EmailField()
    sender_phone = models.TextField(blank=True, default="")
    message = models.TextField()

    status = models.CharField(max_length=12, choices=Status.choices, default=Status.UNREAD)

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["status", "created_at"], name="inquiry_status_created_idx")]
        verbose_name_plural = "Inquiries"

    def __str__(self):
        return f"Inquiry #{self.pk} from {self.sender_name} <{self.sender_email}>"


class InquiryReply(models.Model):
    """One entry of the append-only reply log."""

    inquiry = models.ForeignKey(Inquiry, on_delete=models.CASCADE, related_name="replies")
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    # Snapshot of the acting admin; survives user deletion.
    replied_by_user_id = models.PositiveBigIntegerField(null=True, blank=True)
    replied_by_name = models.CharField(max_length=150, blank=True, default="")
    replied_by_email = models.EmailField(blank=True, default="")

    body = models.TextField()

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name_plural = "Inquiry replies"

    def __str__(self):
        return f"Reply to #{self.inquiry_id} by {self.replied_by_name or 'unknown'}"


class InquiryOptions(models.Model):
    """
    Store-editable overrides for the inquiry settings. A single row is used;
    blank fields fall back to the INQUIRY_* Django settings.
    """

    admin_email = models.EmailField(blank=True, default="")
    success_message = models.TextField(blank=True, default="")
    auto_reply_enabled = models.BooleanField(null=True, blank=True)
    auto_reply_subject = models.CharField(max_length=200, blank=True, default="")
    auto_reply_message = models.TextField(
        blank=True,
        default="",
        help_text="Placeholders: {customer_name}, {product_name}, {admin_email}, {site_name}, {site_url}",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Inquiry options"
        verbose_name_plural = "Inquiry options"

    def __str__(self):
        return "Inquiry options"

    @classmethod
    def current(cls):
        return cls.objects.order_by("pk").first()

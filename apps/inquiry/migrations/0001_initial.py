import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Inquiry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_ref", models.CharField(max_length=64)),
                ("sender_name", models.CharField(max_length=120)),
                ("sender_email", models.EmailField(max_length=254)),
                ("sender_phone", models.CharField(blank=True, default="", max_length=40)),
                ("message", models.TextField()),
                (
                    "status",
                    models.CharField(
                        choices=[("unread", "Unread"), ("processed", "Processed"), ("replied", "Replied")],
                        default="unread",
                        max_length=12,
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "Inquiries",
                "ordering": ["-created_at", "-id"],
                "indexes": [models.Index(fields=["status", "created_at"], name="inquiry_status_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="InquiryOptions",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("admin_email", models.EmailField(blank=True, default="", max_length=254)),
                ("success_message", models.TextField(blank=True, default="")),
                ("auto_reply_enabled", models.BooleanField(blank=True, null=True)),
                ("auto_reply_subject", models.CharField(blank=True, default="", max_length=200)),
                (
                    "auto_reply_message",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Placeholders: {customer_name}, {product_name}, {admin_email}, {site_name}, {site_url}",
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Inquiry options",
                "verbose_name_plural": "Inquiry options",
            },
        ),
        migrations.CreateModel(
            name="InquiryReply",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("replied_by_user_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("replied_by_name", models.CharField(blank=True, default="", max_length=150)),
                ("replied_by_email", models.EmailField(blank=True, default="", max_length=254)),
                ("body", models.TextField()),
                (
                    "inquiry",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="replies",
                        to="inquiry.inquiry",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Inquiry replies",
                "ordering": ["created_at", "id"],
            },
        ),
    ]

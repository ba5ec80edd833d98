from django.contrib import admin, messages

from apps.audit.utils import log_event

from . import services
from .exceptions import InquiryError
from .export import csv_response
from .models import Inquiry, InquiryOptions, InquiryReply
from .options import InquirySettings, product_lookup


class InquiryReplyInline(admin.TabularInline):
    model = InquiryReply
    extra = 0
    can_delete = False
    fields = ("created_at", "replied_by_name", "replied_by_email", "body")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Inquiry)
class InquiryAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "sender_email", "status", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("sender_name", "sender_email", "message", "product_ref")
    date_hierarchy = "created_at"
    inlines = [InquiryReplyInline]
    actions = ["mark_processed", "mark_unread", "export_csv"]

    # submissions are immutable; only status moves, and only through the actions
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    @admin.display(description="Title")
    def title(self, obj):
        return getattr(obj, "display_title", None) or services.inquiry_title(obj)

    def get_changelist_instance(self, request):
        cl = super().get_changelist_instance(request)
        # one product lookup per distinct product on the page
        lookup = product_lookup()
        resolved = {}

        def cached(ref):
            if ref not in resolved:
                resolved[ref] = lookup(ref)
            return resolved[ref]

        for obj in cl.result_list:
            obj.display_title = services.inquiry_title(obj, lookup=cached)
        return cl

    def changelist_view(self, request, extra_context=None):
        extra_context = extra_context or {}
        extra_context["unprocessed_count"] = services.count_unprocessed()
        extra_context["subtitle"] = f"{extra_context['unprocessed_count']} need attention"
        return super().changelist_view(request, extra_context=extra_context)

    def change_view(self, request, object_id, form_url="", extra_context=None):
        log_event(request, "inquiry.view", "Inquiry", object_id)
        return super().change_view(request, object_id, form_url, extra_context)

    # ---- actions ----

    def _bulk(self, request, queryset, action_name):
        ids = list(queryset.values_list("id", flat=True))
        try:
            result = services.bulk_mark_status(ids, action_name, user=request.user)
        except InquiryError as exc:
            self.message_user(request, exc.message, level=messages.ERROR)
            return
        log_event(
            request,
            "inquiry.bulk_mark",
            "Inquiry",
            "",
            detail=f"{result.status}: {len(result.updated)} updated, {len(result.skipped)} skipped",
        )
        self.message_user(request, f"{len(result.updated)} inquiries marked {result.status}.")
        if result.skipped:
            self.message_user(
                request,
                f"{len(result.skipped)} replied inquiries were left unchanged.",
                level=messages.WARNING,
            )

    @admin.action(description="Mark as processed", permissions=["change"])
    def mark_processed(self, request, queryset):
        self._bulk(request, queryset, "processed")

    @admin.action(description="Mark as unread", permissions=["change"])
    def mark_unread(self, request, queryset):
        self._bulk(request, queryset, "unread")

    @admin.action(description="Export to CSV", permissions=["view"])
    def export_csv(self, request, queryset):
        ids = list(queryset.order_by("-created_at", "-id").values_list("id", flat=True))
        try:
            plan = services.export_inquiries(ids, user=request.user, settings=InquirySettings.resolve())
        except InquiryError as exc:
            self.message_user(request, exc.message, level=messages.ERROR)
            return None
        log_event(request, "inquiry.export", "Inquiry", "", detail=f"{plan.count} ids")
        return csv_response(plan.chunks, plan.filename)


@admin.register(InquiryOptions)
class InquiryOptionsAdmin(admin.ModelAdmin):
    list_display = ("admin_email", "auto_reply_enabled", "updated_at")
    readonly_fields = ("updated_at",)

    # a single row of overrides
    def has_add_permission(self, request):
        return not InquiryOptions.objects.exists()

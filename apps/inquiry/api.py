# apps/inquiry/api.py
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle

from drf_spectacular.utils import (
    extend_schema,
    extend_schema_view,
    OpenApiParameter,
)
from drf_spectacular.types import OpenApiTypes

from apps.audit.utils import log_event

from . import services
from .exceptions import InquiryError
from .export import csv_response, export_stats as compute_export_stats
from .models import Inquiry
from .options import InquirySettings
from .permissions import CanManageInquiries
from .schemas import (
    BulkMarkExample,
    BulkMarkResultSerializer,
    ExportExample,
    ExportStatsSerializer,
    ExportTooLarge413Serializer,
    InquiryErrorSerializer,
    MarkProcessedExample,
    ReplyExample,
    ReplyResultSerializer,
    SubmitInquiryExample,
    SubmitInvalidSerializer,
    SubmitOkSerializer,
    UnprocessedCountSerializer,
)
from .serializers import (
    BulkMarkStatusSerializer,
    ExportRequestSerializer,
    InquiryDetailSerializer,
    InquirySerializer,
    InquirySubmitSerializer,
    MarkStatusSerializer,
    ReplySerializer,
)
from .store import InquiryStore


def _error(exc: InquiryError) -> Response:
    return Response(exc.as_dict(), status=exc.status_code)


@extend_schema_view(
    list=extend_schema(
        summary="List inquiries (paginated)",
        description="Newest first. Optional `status` filter: unread, processed or replied.",
        parameters=[
            OpenApiParameter(name="status", required=False, type=OpenApiTypes.STR),
            OpenApiParameter(name="limit", required=False, type=OpenApiTypes.INT),
            OpenApiParameter(name="offset", required=False, type=OpenApiTypes.INT),
        ],
    ),
    retrieve=extend_schema(
        summary="Get inquiry",
        description="One inquiry with its reply history. Emits `inquiry.view` audit.",
        responses={200: InquiryDetailSerializer, 404: InquiryErrorSerializer},
    ),
)
class InquiryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Storefront submissions plus the admin triage surface: listing, status
    marks, replies and CSV export.
    """
    schema_tags = ["Inquiries"]
    queryset = Inquiry.objects.all()
    serializer_class = InquirySerializer
    permission_classes = [IsAuthenticated, CanManageInquiries]
    throttle_scope = "inquiry_submit"
    # POST actions that only read data
    read_actions = ("export",)

    def list(self, request, *args, **kwargs):
        try:
            qs = services.list_inquiries(request.query_params.get("status") or None, user=request.user)
        except InquiryError as exc:
            return _error(exc)

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(InquirySerializer(page, many=True).data)
        return Response(InquirySerializer(qs, many=True).data)

    def retrieve(self, request, *args, **kwargs):
        try:
            obj = InquiryStore().get(kwargs.get("pk"))
        except InquiryError as exc:
            return _error(exc)
        log_event(request, "inquiry.view", "Inquiry", obj.id)
        return Response(InquiryDetailSerializer(obj).data)

    # ---- public submission ----
    @extend_schema(
        methods=["POST"],
        summary="Submit a product inquiry",
        description=(
            "Public storefront endpoint. All field errors are returned together. "
            "Rate limited by the `inquiry_submit` throttle scope."
        ),
        request=InquirySubmitSerializer,
        examples=[SubmitInquiryExample],
        responses={201: SubmitOkSerializer, 400: SubmitInvalidSerializer, 503: SubmitInvalidSerializer},
    )
    @action(
        detail=False,
        methods=["post"],
        url_path="submit",
        permission_classes=[AllowAny],
        authentication_classes=[],
        throttle_classes=[ScopedRateThrottle],
    )
    def submit(self, request):
        result = services.submit_inquiry(request.data)
        if result.ok:
            code = status.HTTP_201_CREATED
        elif result.retryable:
            code = status.HTTP_503_SERVICE_UNAVAILABLE
        else:
            code = status.HTTP_400_BAD_REQUEST
        return Response(result.as_dict(), status=code)

    # ---- badge ----
    @extend_schema(
        methods=["GET"],
        summary="Count inquiries that still need attention",
        description="Every inquiry not marked processed (unread and replied).",
        responses={200: UnprocessedCountSerializer},
    )
    @action(detail=False, methods=["get"], url_path="unprocessed-count")
    def unprocessed_count(self, request):
        return Response({"count": services.count_unprocessed()})

    # ---- status marks ----
    @extend_schema(
        methods=["POST"],
        summary="Mark inquiry processed or unread",
        description="Idempotent. Replied inquiries cannot be re-marked and return **409**.",
        request=MarkStatusSerializer,
        examples=[MarkProcessedExample],
        responses={200: InquirySerializer, 404: InquiryErrorSerializer, 409: InquiryErrorSerializer},
    )
    @action(detail=True, methods=["post"], url_path="mark")
    def mark(self, request, pk=None):
        ser = MarkStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = services.mark_status(pk, ser.validated_data["action"], user=request.user)
        except InquiryError as exc:
            return _error(exc)
        log_event(request, "inquiry.mark", "Inquiry", obj.id, detail=obj.status)
        return Response(InquirySerializer(obj).data)

    @extend_schema(
        methods=["POST"],
        summary="Mark many inquiries processed or unread",
        description="Replied inquiries are skipped and reported in `skipped_ids`.",
        request=BulkMarkStatusSerializer,
        examples=[BulkMarkExample],
        responses={200: BulkMarkResultSerializer},
    )
    @action(detail=False, methods=["post"], url_path="bulk-mark")
    def bulk_mark(self, request):
        ser = BulkMarkStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        vd = ser.validated_data
        try:
            result = services.bulk_mark_status(vd["ids"], vd["action"], user=request.user)
        except InquiryError as exc:
            return _error(exc)
        log_event(
            request,
            "inquiry.bulk_mark",
            "Inquiry",
            "",
            detail=f"{result.status}: {len(result.updated)} updated, {len(result.skipped)} skipped",
        )
        return Response(result.as_dict())

    # ---- reply ----
    @extend_schema(
        methods=["POST"],
        summary="Reply to the customer",
        description=(
            "Emails the customer first; only after a successful send is the reply logged "
            "and the inquiry moved to replied. Mail failure returns **502** and changes nothing."
        ),
        request=ReplySerializer,
        examples=[ReplyExample],
        responses={
            200: ReplyResultSerializer,
            400: InquiryErrorSerializer,
            404: InquiryErrorSerializer,
            502: InquiryErrorSerializer,
        },
    )
    @action(detail=True, methods=["post"], url_path="reply")
    def reply(self, request, pk=None):
        ser = ReplySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            result = services.reply_to_inquiry(pk, ser.validated_data["body"], user=request.user)
        except InquiryError as exc:
            return _error(exc)
        log_event(request, "inquiry.reply", "Inquiry", pk, detail=f"{result.replies_count} replies")
        return Response(result.as_dict())

    # ---- export ----
    @extend_schema(
        methods=["POST"],
        summary="Export inquiries to CSV",
        description=(
            "Streams a UTF-8 CSV (with BOM) for the given `ids` in the order given, or for "
            "every inquiry (newest first) with `all: true`. Over the export limit returns **413**."
        ),
        request=ExportRequestSerializer,
        examples=[ExportExample],
        responses={(200, "text/csv"): OpenApiTypes.BINARY, 413: ExportTooLarge413Serializer},
    )
    @action(detail=False, methods=["post"], url_path="export")
    def export(self, request):
        ser = ExportRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        vd = ser.validated_data
        settings = InquirySettings.resolve()
        try:
            ids = services.export_all_ids(settings=settings) if vd.get("all") else vd["ids"]
            plan = services.export_inquiries(ids, user=request.user, settings=settings)
        except InquiryError as exc:
            return _error(exc)
        log_event(request, "inquiry.export", "Inquiry", "all" if vd.get("all") else "", detail=f"{plan.count} ids")
        return csv_response(plan.chunks, plan.filename)

    @extend_schema(
        methods=["GET"],
        summary="Export one inquiry to CSV",
        responses={(200, "text/csv"): OpenApiTypes.BINARY, 404: InquiryErrorSerializer},
    )
    @action(detail=True, methods=["get"], url_path="export")
    def export_one(self, request, pk=None):
        settings = InquirySettings.resolve()
        try:
            obj = InquiryStore().get(pk)
            plan = services.export_inquiries([obj.pk], user=request.user, settings=settings)
        except InquiryError as exc:
            return _error(exc)
        log_event(request, "inquiry.export", "Inquiry", obj.id, detail="1 ids")
        return csv_response(plan.chunks, plan.filename)

    @extend_schema(
        methods=["GET"],
        summary="Export limits and totals",
        responses={200: ExportStatsSerializer},
    )
    @action(detail=False, methods=["get"], url_path="export-stats")
    def export_stats(self, request):
        return Response(compute_export_stats(InquirySettings.resolve()))


# apps/inquiry/schemas.py
from rest_framework import serializers
from drf_spectacular.utils import OpenApiExample


# Error body shared by every InquiryError response.
class InquiryErrorSerializer(serializers.Serializer):
    ok = serializers.BooleanField(default=False)
    detail = serializers.CharField()


class SubmitOkSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    inquiry_id = serializers.IntegerField()
    message = serializers.CharField()


class SubmitInvalidSerializer(serializers.Serializer):
    ok = serializers.BooleanField(default=False)
    errors = serializers.ListField(child=serializers.CharField())
    message = serializers.CharField()


class BulkMarkResultSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    status = serializers.CharField()
    updated = serializers.IntegerField()
    skipped = serializers.IntegerField()
    missing = serializers.IntegerField()
    skipped_ids = serializers.ListField(child=serializers.IntegerField())


class ReplyResultSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    replies_count = serializers.IntegerField()
    last_reply = serializers.CharField()


class UnprocessedCountSerializer(serializers.Serializer):
    count = serializers.IntegerField()


class ExportStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    limit = serializers.IntegerField()
    batch_size = serializers.IntegerField()
    can_export_all = serializers.BooleanField()


class ExportTooLarge413Serializer(InquiryErrorSerializer):
    requested = serializers.IntegerField()
    limit = serializers.IntegerField()


# ---- Swagger example payloads ----

SubmitInquiryExample = OpenApiExample(
    "Submit inquiry",
    value={
        "product_ref": "42",
        "sender_name": "Jo",
        "sender_email": "jo@x.com",
        "sender_phone": "+44 20 7946 0000",
        "message": "Is this in stock?",
    },
)

MarkProcessedExample = OpenApiExample("Mark processed", value={"action": "processed"})

BulkMarkExample = OpenApiExample("Mark several unread", value={"ids": [3, 4, 7], "action": "unread"})

ReplyExample = OpenApiExample("Reply", value={"body": "Yes, in stock now!"})

ExportExample = OpenApiExample("Export selection", value={"ids": [12, 9, 4]})

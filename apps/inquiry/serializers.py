# apps/inquiry/serializers.py
from __future__ import annotations

from rest_framework import serializers

from .models import Inquiry, InquiryReply
from .status import ADMIN_ACTIONS, status_label


class InquiryReplySerializer(serializers.ModelSerializer):
    class Meta:
        model = InquiryReply
        fields = ["id", "created_at", "replied_by_user_id", "replied_by_name", "replied_by_email", "body"]
        read_only_fields = fields


class InquirySerializer(serializers.ModelSerializer):
    # list rows come annotated with reply_count by the store; detail falls back to a count.
    status_label = serializers.SerializerMethodField(read_only=True)
    reply_count = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Inquiry
        fields = [
            "id",
            "product_ref",
            "sender_name",
            "sender_email",
            "sender_phone",
            "message",
            "status",
            "status_label",
            "reply_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_status_label(self, obj: Inquiry) -> str:
        return status_label(obj.status)

    def get_reply_count(self, obj: Inquiry) -> int:
        annotated = getattr(obj, "reply_count", None)
        if annotated is not None:
            return annotated
        return obj.replies.count()


class InquiryDetailSerializer(InquirySerializer):
    replies = InquiryReplySerializer(many=True, read_only=True)

    class Meta(InquirySerializer.Meta):
        fields = InquirySerializer.Meta.fields + ["replies"]
        read_only_fields = fields


# ---- request bodies (documented; validation of submissions lives in validators.py) ----

class InquirySubmitSerializer(serializers.Serializer):
    product_ref = serializers.CharField()
    sender_name = serializers.CharField()
    sender_email = serializers.EmailField()
    sender_phone = serializers.CharField(required=False, allow_blank=True)
    message = serializers.CharField()


class MarkStatusSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=sorted(ADMIN_ACTIONS))


class BulkMarkStatusSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
    action = serializers.ChoiceField(choices=sorted(ADMIN_ACTIONS))


class ReplySerializer(serializers.Serializer):
    # length rule is enforced by ReplyForm so API and admin share one message
    body = serializers.CharField(allow_blank=True, trim_whitespace=False)


class ExportRequestSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    all = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if not attrs.get("all") and not attrs.get("ids"):
            raise serializers.ValidationError("Pass a list of `ids` or `all: true`.")
        return attrs

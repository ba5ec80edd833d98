from unittest import mock

import pytest
from django.urls import reverse

from apps.audit.models import AuditEvent
from apps.catalog.lookup import resolve
from apps.inquiry.models import Inquiry


@pytest.mark.django_db
def test_changelist_resolves_each_product_once(admin_client, product):
    for name in ("Ann", "Bob", "Cy"):
        Inquiry.objects.create(product_ref="42", sender_name=name, sender_email="x@x.com", message="Is this in stock?")
    Inquiry.objects.create(product_ref="777", sender_name="Dee", sender_email="d@x.com", message="Is this in stock?")
    counting = mock.Mock(side_effect=resolve)

    with mock.patch("apps.inquiry.admin.product_lookup", return_value=counting):
        res = admin_client.get(reverse("admin:inquiry_inquiry_changelist"))

    assert res.status_code == 200
    content = res.content.decode()
    assert "Blue Mug — Ann" in content
    assert "Blue Mug — Cy" in content
    assert "(Product Deleted) — Dee" in content
    assert sorted(c.args[0] for c in counting.call_args_list) == ["42", "777"]


@pytest.mark.django_db
def test_change_view_is_read_only_and_audited(admin_client, inquiry):
    res = admin_client.get(reverse("admin:inquiry_inquiry_change", args=[inquiry.pk]))

    assert res.status_code == 200
    assert "Is this in stock?" in res.content.decode()
    assert AuditEvent.objects.filter(action="inquiry.view", object_id=str(inquiry.pk)).exists()

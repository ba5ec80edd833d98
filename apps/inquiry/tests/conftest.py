import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from rest_framework.test import APIClient

from apps.catalog.models import Product
from apps.inquiry.models import Inquiry
from apps.inquiry.options import InquirySettings


@pytest.fixture
def product(db):
    # product 42 is the "Blue Mug" used across the end-to-end examples
    return Product.objects.create(pk=42, name="Blue Mug", sku="MUG-BLUE")


@pytest.fixture
def valid_payload(product):
    return {
        "product_ref": "42",
        "sender_name": "Jo",
        "sender_email": "jo@x.com",
        "message": "Is this in stock?",
    }


@pytest.fixture
def inquiry(product):
    return Inquiry.objects.create(
        product_ref="42",
        sender_name="Jo",
        sender_email="jo@x.com",
        message="Is this in stock?",
    )


def _user_with_perms(username, *codenames, **extra):
    U = get_user_model()
    user = U.objects.create_user(username=username, password="pass12345!", **extra)
    perms = Permission.objects.filter(content_type__app_label="inquiry", codename__in=codenames)
    user.user_permissions.add(*perms)
    return U.objects.get(pk=user.pk)


@pytest.fixture
def staff(db):
    return _user_with_perms(
        "shopkeeper",
        "view_inquiry",
        "change_inquiry",
        first_name="Sam",
        last_name="Keeper",
        email="sam@shop.example.com",
        is_staff=True,
    )


@pytest.fixture
def viewer(db):
    return _user_with_perms("reader", "view_inquiry")


@pytest.fixture
def outsider(db):
    return _user_with_perms("outsider")


@pytest.fixture
def inquiry_settings(db):
    return InquirySettings.resolve()


@pytest.fixture
def api(staff):
    client = APIClient()
    client.force_authenticate(user=staff)
    return client

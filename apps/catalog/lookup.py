# apps/catalog/lookup.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from .models import Product


@dataclass(frozen=True)
class ProductInfo:
    title: str
    permalink: str


def resolve(product_ref) -> Optional[ProductInfo]:
    """
    Resolve an opaque product reference (the product pk as text) to its
    display title and public URL. Returns None for unknown or removed products.
    """
    ref = str(product_ref or "").strip()
    if not ref.isdigit():
        return None
    product = Product.objects.filter(pk=int(ref)).only("name", "slug").first()
    if product is None:
        return None
    base = getattr(settings, "SITE_URL", "").rstrip("/")
    return ProductInfo(title=product.name, permalink=f"{base}{product.get_absolute_url()}")

from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "sku", "created_at")
    search_fields = ("name", "sku", "slug")
    readonly_fields = ("created_at", "updated_at")

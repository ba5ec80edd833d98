from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .api import InquiryViewSet

app_name = "inquiry_api"

router = DefaultRouter()
router.register(r"inquiries", InquiryViewSet, basename="inquiry")

urlpatterns = [path("", include(router.urls))]

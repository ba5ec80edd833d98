# config/urls.py
from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path, re_path
from django.views.generic import RedirectView

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    # Admin
    path("admin/", admin.site.urls),

    # Healthcheck
    path("health/", lambda r: JsonResponse({"ok": True}, status=200), name="health"),

    # OpenAPI schema + Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # JWT
    path("api/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),

    # ---------- v1 APIs ----------
    path("api/v1/", include(("apps.inquiry.api_urls", "inquiry_api"), namespace="inquiry_api")),

    # ---------- Legacy redirects ----------
    re_path(r"^api/inquiries/(?P<rest>.*)$",
            RedirectView.as_view(url="/api/v1/inquiries/%(rest)s", permanent=False)),

    # ---------- Storefront ----------
    path("inquiry/", include(("apps.inquiry.urls", "inquiry"), namespace="inquiry")),
]

"""
URL configuration for core_backend project.

Every app mounts its REST endpoints under ``api/``.
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    # The orders app registers its own "orders/" and "admin/stats/" prefixes.
    path("api/", include("orders.urls")),
    path("api/", include("agents.urls")),
    path("api/cart/", include("cart.urls")),
    path("api/coupons/", include("coupons.urls")),
    path("api/payments/", include("payments.urls")),
    path("api/disputes/", include("disputes.urls")),
    path("api/reviews/", include("reviews.urls")),
]

"""
URL configuration for core_backend project.

Staff endpoints live under ``/api/`` and authenticate with Django auth.
Customer endpoints live under ``/api/public/<merchant_code>/``; the merchant
code selects the tenant (see ``tenant.middleware.TenantMiddleware``).
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


public_urlpatterns = [
    path("", include("business_hours.urls")),
    path("", include("orders.public_urls")),
    path("", include("group_orders.urls")),
]

urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/orders/", include("orders.urls")),
    path("api/reservations/", include("reservations.urls")),
    path("api/public/<str:merchant_code>/", include(public_urlpatterns)),
]

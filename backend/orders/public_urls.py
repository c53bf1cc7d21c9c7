from django.urls import path

from .views import OrderWaitTimeView, PublicOrderCreateView

urlpatterns = [
    path("orders/", PublicOrderCreateView.as_view(), name="public-order-create"),
    path(
        "orders/<str:order_number>/wait-time/",
        OrderWaitTimeView.as_view(),
        name="public-order-wait-time",
    ),
]

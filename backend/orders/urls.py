from django.urls import path

from .views import PosOrderCreateView

app_name = "orders"

urlpatterns = [
    path("pos/", PosOrderCreateView.as_view(), name="pos-order-create"),
]

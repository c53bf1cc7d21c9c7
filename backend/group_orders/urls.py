from django.urls import path

from .views import GroupOrderSubmitView

urlpatterns = [
    path(
        "group-orders/<str:session_code>/submit/",
        GroupOrderSubmitView.as_view(),
        name="group-order-submit",
    ),
]

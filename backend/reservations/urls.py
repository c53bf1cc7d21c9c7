from django.urls import path

from .views import ReservationAcceptView

app_name = "reservations"

urlpatterns = [
    path("<int:reservation_id>/accept/", ReservationAcceptView.as_view(), name="reservation-accept"),
]

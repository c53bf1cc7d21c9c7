from rest_framework.response import Response

from core_backend.base import StaffAPIView
from .serializers import ReservationAcceptSerializer, ReservationSerializer
from .services import ReservationService


class ReservationAcceptView(StaffAPIView):
    """
    POST /api/reservations/<reservation_id>/accept/

    Body: optional ``tableNumber``. Creates the reservation's order (empty
    when nothing was pre-ordered) and returns the reservation with it.
    """

    def post(self, request, reservation_id):
        serializer = ReservationAcceptSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        reservation, _ = ReservationService().accept(
            reservation_id,
            table_number=serializer.validated_data.get('tableNumber'),
            tenant=request.tenant,
        )
        return Response({
            'success': True,
            'data': ReservationSerializer(reservation).data,
            'message': 'Reservation accepted',
        })

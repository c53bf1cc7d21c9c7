from django.conf import settings
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.response import Response

from core_backend.base import PublicAPIView
from orders.serializers import OrderSerializer
from .serializers import GroupSubmitSerializer, ParticipantShareSerializer
from .services import GroupOrderService


@method_decorator(
    ratelimit(key='core_backend.utils.get_client_ip', rate=settings.PUBLIC_ORDER_RATE, method='POST', block=True),
    name='post',
)
class GroupOrderSubmitView(PublicAPIView):
    """
    POST /api/public/<merchant_code>/group-orders/<session_code>/submit/

    Body: ``deviceId`` of the host, optional ``customer`` and ``notes``.
    Returns the merged order and the per-participant bill split.
    """

    def post(self, request, merchant_code, session_code):
        serializer = GroupSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        submission = GroupOrderService().submit(
            request.tenant,
            session_code,
            serializer.validated_data['deviceId'],
            customer=serializer.to_customer(),
            notes=serializer.validated_data.get('notes'),
        )
        return Response(
            {
                'success': True,
                'data': {
                    'session_code': submission.session.session_code,
                    'order': OrderSerializer(submission.order).data,
                    'split_bill': ParticipantShareSerializer(submission.bill_split, many=True).data,
                },
                'message': 'Group order submitted',
            },
            status=status.HTTP_201_CREATED,
        )

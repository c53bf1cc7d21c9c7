from django.conf import settings
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.response import Response

from cart.serializers import PublicOrderSerializer
from core_backend.base import PublicAPIView
from orders.exceptions import OrderNotFoundError
from orders.models import Order
from orders.serializers import OrderSerializer
from orders.services import PrepTimeEstimator, PublicOrderService


@method_decorator(
    ratelimit(key='core_backend.utils.get_client_ip', rate=settings.PUBLIC_ORDER_RATE, method='POST', block=True),
    name='post',
)
class PublicOrderCreateView(PublicAPIView):
    """
    POST /api/public/<merchant_code>/orders/

    Body: a cart with ``customer`` (name plus email or phone) and optional
    ``scheduledDate`` / ``scheduledTime`` in the merchant's timezone.
    """

    def post(self, request, merchant_code):
        serializer = PublicOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = PublicOrderService().create_order(
            request.tenant,
            serializer.to_cart(),
            schedule=serializer.to_schedule(),
        )
        return Response(
            {
                'success': True,
                'data': OrderSerializer(result.order).data,
                'message': 'Order created successfully',
            },
            status=status.HTTP_201_CREATED,
        )


class OrderWaitTimeView(PublicAPIView):
    """GET /api/public/<merchant_code>/orders/<order_number>/wait-time/"""

    def get(self, request, merchant_code, order_number):
        # Numbers repeat across business days; the latest order is the one being tracked
        order = (
            Order.all_objects
            .select_related('tenant')
            .filter(tenant=request.tenant, order_number=order_number.upper())
            .order_by('-placed_at')
            .first()
        )
        if order is None:
            raise OrderNotFoundError()

        estimate = PrepTimeEstimator().estimate(order)
        return Response({'success': True, 'data': estimate.to_dict()})

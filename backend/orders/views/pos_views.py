import logging

from rest_framework import status
from rest_framework.response import Response

from cart.serializers import CartSerializer
from core_backend.base import StaffAPIView
from orders.serializers import OrderSerializer, PosOrderRequestSerializer
from orders.services import PosOrderService

logger = logging.getLogger(__name__)


class PosOrderCreateView(StaffAPIView):
    """
    POST /api/orders/pos/

    Body: a cart plus optional ``paymentMethod`` and ``deliveryFee``.
    """

    def post(self, request):
        cart_serializer = CartSerializer(data=request.data)
        cart_serializer.is_valid(raise_exception=True)
        options = PosOrderRequestSerializer(data=request.data)
        options.is_valid(raise_exception=True)

        result = PosOrderService().create_order(
            cart_serializer.to_cart(),
            request.user,
            payment_method=options.validated_data['paymentMethod'],
            delivery_fee=options.validated_data['deliveryFee'],
        )
        return Response(
            {
                'success': True,
                'data': OrderSerializer(result.order).data,
                'message': 'Order created successfully',
            },
            status=status.HTTP_201_CREATED,
        )

"""
Orders serializers package.
"""

from .order_serializers import (
    OrderCustomerSerializer,
    OrderItemAddonSerializer,
    OrderItemSerializer,
    OrderPaymentSerializer,
    OrderSerializer,
    PosOrderRequestSerializer,
)

__all__ = [
    'OrderCustomerSerializer',
    'OrderItemAddonSerializer',
    'OrderItemSerializer',
    'OrderPaymentSerializer',
    'OrderSerializer',
    'PosOrderRequestSerializer',
]

from rest_framework import serializers

from cart.serializers import CartLineSerializer
from core_backend.base import IdField
from orders.serializers import OrderSerializer
from .models import Reservation


class PreorderSerializer(serializers.Serializer):
    """Shape of ``Reservation.preorder``."""
    items = CartLineSerializer(many=True, required=False, default=list)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')


class ReservationAcceptSerializer(serializers.Serializer):
    tableNumber = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)

    def validate_tableNumber(self, value):
        return (value or '').strip() or None


class ReservationSerializer(serializers.ModelSerializer):
    id = IdField()
    customer_id = IdField()
    order = OrderSerializer(read_only=True)

    class Meta:
        model = Reservation
        fields = [
            'id',
            'customer_id',
            'party_size',
            'reservation_date',
            'reservation_time',
            'table_number',
            'notes',
            'status',
            'accepted_at',
            'order',
        ]
        read_only_fields = fields

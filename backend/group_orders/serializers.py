from rest_framework import serializers

from cart.serializers import CartCustomerSerializer
from cart.types import CartCustomer
from core_backend.base import MoneyField


class GroupSubmitSerializer(serializers.Serializer):
    deviceId = serializers.CharField(max_length=100)
    customer = CartCustomerSerializer(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_customer(self):
        customer = self.validated_data.get('customer')
        return CartCustomer(**customer) if customer else None


class ParticipantShareSerializer(serializers.Serializer):
    participant_id = serializers.CharField(read_only=True)
    participant_name = serializers.CharField(read_only=True)
    is_host = serializers.BooleanField(read_only=True)
    subtotal = MoneyField()
    tax_share = MoneyField()
    service_charge_share = MoneyField()
    packaging_fee_share = MoneyField()
    delivery_fee_share = MoneyField()
    total = MoneyField()

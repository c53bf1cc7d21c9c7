from rest_framework import serializers

from core_backend.base import IdField, MoneyField
from customers.models import Customer
from payments.models import Payment
from orders.models import Order, OrderItem, OrderItemAddon


class OrderItemAddonSerializer(serializers.ModelSerializer):
    id = IdField()
    addon_item_id = IdField()
    addon_price = MoneyField()
    subtotal = MoneyField()

    class Meta:
        model = OrderItemAddon
        fields = ['id', 'addon_item_id', 'addon_name', 'addon_price', 'quantity', 'subtotal']


class OrderItemSerializer(serializers.ModelSerializer):
    id = IdField()
    menu_item_id = IdField()
    menu_price = MoneyField()
    subtotal = MoneyField()
    addons = OrderItemAddonSerializer(many=True, read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'menu_item_id', 'menu_name', 'menu_price', 'quantity', 'subtotal', 'notes', 'addons']


class OrderPaymentSerializer(serializers.ModelSerializer):
    id = IdField()
    amount = MoneyField()

    class Meta:
        model = Payment
        fields = ['id', 'amount', 'currency', 'payment_method', 'status', 'created_at']


class OrderCustomerSerializer(serializers.ModelSerializer):
    id = IdField()

    class Meta:
        model = Customer
        fields = ['id', 'name', 'email', 'phone']


class OrderSerializer(serializers.ModelSerializer):
    """Full order graph returned by every order-creating endpoint."""

    id = IdField()
    merchant_id = IdField(source='tenant_id')
    merchant_code = serializers.CharField(source='tenant.code', read_only=True)
    subtotal = MoneyField()
    tax_amount = MoneyField()
    service_charge_amount = MoneyField()
    packaging_fee_amount = MoneyField()
    delivery_fee_amount = MoneyField()
    total_amount = MoneyField()
    items = OrderItemSerializer(many=True, read_only=True)
    payment = OrderPaymentSerializer(read_only=True)
    customer = OrderCustomerSerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'merchant_id',
            'merchant_code',
            'order_number',
            'business_date',
            'order_type',
            'source',
            'status',
            'table_number',
            'notes',
            'subtotal',
            'tax_amount',
            'service_charge_amount',
            'packaging_fee_amount',
            'delivery_fee_amount',
            'total_amount',
            'is_scheduled',
            'scheduled_date',
            'scheduled_time',
            'placed_at',
            'accepted_at',
            'customer',
            'items',
            'payment',
        ]
        read_only_fields = fields


class PosOrderRequestSerializer(serializers.Serializer):
    """POS-only options sent alongside the cart."""
    paymentMethod = serializers.ChoiceField(
        choices=Payment.PaymentMethod.choices,
        required=False,
        default=Payment.PaymentMethod.CASH_ON_COUNTER,
    )
    deliveryFee = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, default=0
    )

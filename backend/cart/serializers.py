"""
Cart payload serializers.

Incoming carts are camelCase JSON. These serializers only check shape and
types; business rules (positive quantities, known order types, item
availability) belong to the order assembler so that every entry path reports
them with the same error codes.
"""

from rest_framework import serializers

from .types import Cart, CartCustomer, ScheduledTarget, lines_from_items


class CartAddonSerializer(serializers.Serializer):
    addonItemId = serializers.IntegerField()
    quantity = serializers.IntegerField(required=False, default=1)


class CartLineSerializer(serializers.Serializer):
    menuId = serializers.IntegerField()
    quantity = serializers.IntegerField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    addons = CartAddonSerializer(many=True, required=False, default=list)


class CartCustomerSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, default='', max_length=200)
    phone = serializers.CharField(required=False, allow_blank=True, default='', max_length=30)
    email = serializers.EmailField(required=False, allow_blank=True, default='')


class CartSerializer(serializers.Serializer):
    orderType = serializers.CharField()
    tableNumber = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    items = CartLineSerializer(many=True, required=False, default=list)
    customer = CartCustomerSerializer(required=False, allow_null=True)

    def to_cart(self) -> Cart:
        """Build the typed cart from validated data. Call after ``is_valid()``."""
        data = self.validated_data
        customer = data.get('customer')
        return Cart(
            order_type=data['orderType'].strip().upper(),
            lines=lines_from_items(data.get('items') or []),
            table_number=(data.get('tableNumber') or '').strip() or None,
            notes=data.get('notes') or '',
            customer=CartCustomer(**customer) if customer else None,
        )


class PublicOrderSerializer(CartSerializer):
    """Public checkout: a cart plus an optional scheduled date/time."""
    scheduledDate = serializers.DateField(required=False, allow_null=True)
    scheduledTime = serializers.TimeField(required=False, allow_null=True)

    def validate(self, attrs):
        has_date = attrs.get('scheduledDate') is not None
        has_time = attrs.get('scheduledTime') is not None
        if has_date != has_time:
            raise serializers.ValidationError(
                "scheduledDate and scheduledTime must be given together."
            )
        return attrs

    def to_schedule(self):
        data = self.validated_data
        if data.get('scheduledDate') is None:
            return None
        return ScheduledTarget(
            date=data['scheduledDate'].isoformat(),
            time=data['scheduledTime'].strftime('%H:%M'),
        )

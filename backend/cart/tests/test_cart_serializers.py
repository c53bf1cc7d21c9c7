"""
Cart payload tests.

Payloads are camelCase JSON; the serializers only check shape and hand the
typed cart to the order services.
"""

import pytest

from cart.serializers import CartSerializer, PublicOrderSerializer
from cart.types import Cart, CartAddon, CartCustomer, CartLine, ScheduledTarget, lines_from_items


class TestCartSerializer:

    def test_to_cart(self):
        serializer = CartSerializer(data={
            'orderType': ' dine_in ',
            'tableNumber': ' 7 ',
            'items': [
                {'menuId': 3, 'quantity': 2, 'notes': None, 'addons': [{'addonItemId': 9}]},
                {'menuId': 4, 'quantity': 1},
            ],
            'customer': {'name': 'Sam', 'phone': '+15550123'},
        })
        assert serializer.is_valid(), serializer.errors

        cart = serializer.to_cart()

        assert cart == Cart(
            order_type='DINE_IN',
            lines=(
                CartLine(menu_id=3, quantity=2, addons=(CartAddon(addon_item_id=9, quantity=1),)),
                CartLine(menu_id=4, quantity=1),
            ),
            table_number='7',
            customer=CartCustomer(name='Sam', phone='+15550123'),
        )

    def test_blank_table_is_none(self):
        serializer = CartSerializer(data={'orderType': 'TAKEAWAY', 'tableNumber': '   '})
        assert serializer.is_valid(), serializer.errors

        cart = serializer.to_cart()

        assert cart.table_number is None
        assert cart.is_empty
        assert cart.customer is None

    def test_quantity_must_be_integer(self):
        serializer = CartSerializer(data={'orderType': 'TAKEAWAY', 'items': [{'menuId': 1, 'quantity': 'two'}]})
        assert not serializer.is_valid()
        assert 'items' in serializer.errors

    def test_business_rules_left_to_assembler(self):
        # Zero quantities and unknown order types are rejected later with their own codes
        serializer = CartSerializer(data={'orderType': 'PICNIC', 'items': [{'menuId': 1, 'quantity': 0}]})
        assert serializer.is_valid(), serializer.errors

    def test_bad_customer_email(self):
        serializer = CartSerializer(data={'orderType': 'TAKEAWAY', 'customer': {'email': 'not-an-email'}})
        assert not serializer.is_valid()
        assert 'customer' in serializer.errors


class TestPublicOrderSerializer:

    def test_schedule(self):
        serializer = PublicOrderSerializer(data={
            'orderType': 'TAKEAWAY', 'scheduledDate': '2030-01-07', 'scheduledTime': '18:45',
        })
        assert serializer.is_valid(), serializer.errors

        assert serializer.to_schedule() == ScheduledTarget(date='2030-01-07', time='18:45')

    def test_no_schedule(self):
        serializer = PublicOrderSerializer(data={'orderType': 'TAKEAWAY'})
        assert serializer.is_valid(), serializer.errors
        assert serializer.to_schedule() is None

    @pytest.mark.parametrize('extra', [{'scheduledDate': '2030-01-07'}, {'scheduledTime': '18:45'}])
    def test_date_and_time_go_together(self, extra):
        serializer = PublicOrderSerializer(data={'orderType': 'TAKEAWAY', **extra})
        assert not serializer.is_valid()


class TestLinesFromItems:

    def test_participant_prefix_and_attribution(self):
        lines = lines_from_items(
            [{'menuId': 1, 'quantity': 1, 'notes': 'no onions'}, {'menuId': 2, 'quantity': 3, 'notes': ''}],
            attribution='17',
            notes_prefix='Alex',
        )

        assert [line.notes for line in lines] == ['[Alex] no onions', '[Alex]']
        assert {line.attribution for line in lines} == {'17'}

    def test_addon_quantity_defaults_to_one(self):
        [line] = lines_from_items([{'menuId': 1, 'quantity': 2, 'addons': [{'addonItemId': 5}]}])
        assert line.addons == (CartAddon(addon_item_id=5, quantity=1),)

"""
OrderAssembler tests.

Covers validation, pricing, stock deduction, fees, order numbering and the
all-or-nothing guarantee of the assembly transaction, plus the post-commit
side effects.
"""
import logging
import pytest
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.db import IntegrityError

from business_hours.models import OpeningHours
from cart.types import Cart, CartAddon, CartLine, ScheduledTarget
from customers.models import Customer
from discounts.models import Promotion, PromotionWindow
from inventory.models import StockMovement
from orders.exceptions import (
    EmptyCartError,
    InsufficientStockError,
    InvalidOrderTypeError,
    InvalidQuantityError,
    ItemNotFoundError,
    ItemUnavailableError,
    StoreClosedError,
    TableNumberRequiredError,
)
from orders.models import Order, OrderItem
from orders.numbering import OrderNumberGenerator
from orders.services import AssemblyRequest, OrderAssembler
from orders.signals import low_stock_reached, order_placed, stock_depleted
from payments.models import Payment
from products.models import MenuItem

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=dt_timezone.utc)


def fixed_clock():
    return NOW


def make_request(tenant, *lines, order_type='TAKEAWAY', **kwargs):
    cart_kwargs = {
        key: kwargs.pop(key) for key in ('table_number', 'notes') if key in kwargs
    }
    return AssemblyRequest(
        tenant=tenant,
        cart=Cart(order_type=order_type, lines=tuple(lines), **cart_kwargs),
        source=kwargs.pop('source', Order.OrderSource.ONLINE),
        **kwargs
    )


class ScriptedNumbers(OrderNumberGenerator):
    """Hands out the given numbers without checking for existing orders."""

    def __init__(self, *numbers):
        super().__init__()
        self.numbers = list(numbers)

    def generate(self, tenant, business_date, prefix=None):
        return self._with_prefix(self.numbers.pop(0), prefix)


@pytest.fixture
def assembler():
    return OrderAssembler(clock=fixed_clock)


@pytest.fixture
def second_tracked_item(tenant_a):
    return MenuItem.all_objects.create(
        tenant=tenant_a, name='Cannoli', price=Decimal('4.00'), track_stock=True, stock_qty=1,
    )


@pytest.fixture
def captured_signals():
    received = []

    def handler(signal_name):
        def receive(sender, **kwargs):
            received.append((signal_name, kwargs))
        return receive

    handlers = {
        order_placed: handler('order_placed'),
        stock_depleted: handler('stock_depleted'),
        low_stock_reached: handler('low_stock_reached'),
    }
    for signal, receive in handlers.items():
        signal.connect(receive, weak=False)
    yield received
    for signal, receive in handlers.items():
        signal.disconnect(receive)


@pytest.mark.django_db
class TestAssemblyHappyPath:

    def test_persists_full_order_graph(self, assembler, tenant_a, menu_item_a, addon_a):
        request = make_request(
            tenant_a,
            CartLine(menu_id=menu_item_a.id, quantity=2, notes='no basil',
                     addons=(CartAddon(addon_item_id=addon_a.id, quantity=1),)),
        )

        result = assembler.assemble(request)
        order = result.order

        assert order.subtotal == Decimal('21.50')
        assert order.total_amount == Decimal('21.50')
        assert order.status == Order.OrderStatus.PENDING
        assert order.business_date == NOW.date()
        assert order.placed_at == NOW

        [item] = order.items.all()
        assert item.menu_name == 'Margherita'
        assert item.menu_price == Decimal('10.00')
        assert item.quantity == 2
        assert item.subtotal == Decimal('21.50')
        assert item.notes == 'no basil'

        [addon] = item.addons.all()
        assert addon.addon_name == 'Extra Cheese'
        assert addon.subtotal == Decimal('1.50')

        assert order.payment.status == Payment.PaymentStatus.PENDING
        assert order.payment.amount == Decimal('21.50')
        assert order.payment.payment_method == Payment.PaymentMethod.CASH_ON_COUNTER

    def test_fees_applied(self, assembler, tenant_a, merchant_settings_a, menu_item_a):
        merchant_settings_a.enable_tax = True
        merchant_settings_a.tax_percentage = Decimal('10.00')
        merchant_settings_a.enable_packaging_fee = True
        merchant_settings_a.packaging_fee_amount = Decimal('2.00')
        merchant_settings_a.save()

        order = assembler.assemble(
            make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1))
        ).order

        assert order.tax_amount == Decimal('1.00')
        assert order.packaging_fee_amount == Decimal('2.00')
        assert order.total_amount == Decimal('13.00')

    def test_delivery_order_scenario(self, assembler, tenant_a, merchant_settings_a):
        merchant_settings_a.is_delivery_enabled = True
        merchant_settings_a.enable_tax = True
        merchant_settings_a.tax_percentage = Decimal('10.00')
        merchant_settings_a.save()
        item = MenuItem.all_objects.create(tenant=tenant_a, name='Lasagne', price=Decimal('8.00'))

        order = assembler.assemble(make_request(
            tenant_a, CartLine(menu_id=item.id, quantity=2),
            order_type='DELIVERY', delivery_fee=Decimal('4.00'),
        )).order

        assert order.subtotal == Decimal('16.00')
        assert order.tax_amount == Decimal('1.60')
        assert order.delivery_fee_amount == Decimal('4.00')
        assert order.total_amount == Decimal('21.60')

    def test_zero_total_order_still_gets_payment(self, assembler, tenant_a):
        result = assembler.assemble(make_request(tenant_a, order_type='DINE_IN', allow_empty=True))

        assert result.order.total_amount == Decimal('0.00')
        assert result.order.payment.amount == Decimal('0.00')

    def test_accepted_status_sets_accepted_at(self, assembler, tenant_a, menu_item_a):
        order = assembler.assemble(make_request(
            tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1),
            status=Order.OrderStatus.ACCEPTED,
        )).order

        assert order.accepted_at == NOW

    def test_stock_decremented_and_movement_recorded(self, assembler, tenant_a, tracked_item_a):
        order = assembler.assemble(
            make_request(tenant_a, CartLine(menu_id=tracked_item_a.id, quantity=2))
        ).order

        tracked_item_a.refresh_from_db()
        assert tracked_item_a.stock_qty == 3
        movement = StockMovement.all_objects.get(order=order)
        assert movement.quantity_change == -2

    def test_merchant_code_prefix(self, assembler, tenant_a, merchant_settings_a, menu_item_a):
        merchant_settings_a.use_merchant_code_prefix = True
        merchant_settings_a.save()

        order = assembler.assemble(
            make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1))
        ).order

        assert order.order_number.startswith('PIZZA-')
        assert len(order.order_number) == len('PIZZA-') + 4


@pytest.mark.django_db
class TestAssemblyValidation:

    def test_unknown_item(self, assembler, tenant_a):
        with pytest.raises(ItemNotFoundError):
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=999999, quantity=1)))

    def test_other_merchants_item_is_not_found(self, assembler, tenant_a, menu_item_b):
        with pytest.raises(ItemNotFoundError):
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=menu_item_b.id, quantity=1)))

    def test_soft_deleted_item_is_not_found(self, assembler, tenant_a, menu_item_a):
        menu_item_a.soft_delete()

        with pytest.raises(ItemNotFoundError):
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1)))

    def test_inactive_item_unavailable(self, assembler, tenant_a, menu_item_a):
        menu_item_a.is_active = False
        menu_item_a.save()

        with pytest.raises(ItemUnavailableError):
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1)))

    def test_addon_of_another_item_unavailable(self, assembler, tenant_a, tracked_item_a, addon_a):
        line = CartLine(menu_id=tracked_item_a.id, quantity=1, addons=(CartAddon(addon_item_id=addon_a.id),))

        with pytest.raises(ItemUnavailableError):
            assembler.assemble(make_request(tenant_a, line))

    @pytest.mark.parametrize('quantity', [0, -1])
    def test_non_positive_quantity(self, assembler, tenant_a, menu_item_a, quantity):
        with pytest.raises(InvalidQuantityError):
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=quantity)))

    def test_disabled_order_type(self, assembler, tenant_a, menu_item_a):
        # Delivery is off by default
        with pytest.raises(InvalidOrderTypeError):
            assembler.assemble(make_request(
                tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1), order_type='DELIVERY'
            ))

    def test_unknown_order_type(self, assembler, tenant_a, menu_item_a):
        with pytest.raises(InvalidOrderTypeError):
            assembler.assemble(make_request(
                tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1), order_type='DRIVE_THRU'
            ))

    def test_empty_cart(self, assembler, tenant_a):
        with pytest.raises(EmptyCartError):
            assembler.assemble(make_request(tenant_a))

    def test_table_number_required(self, assembler, tenant_a, merchant_settings_a, menu_item_a):
        merchant_settings_a.require_table_number_for_dine_in = True
        merchant_settings_a.save()

        with pytest.raises(TableNumberRequiredError):
            assembler.assemble(make_request(
                tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1), order_type='DINE_IN'
            ))

        order = assembler.assemble(make_request(
            tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1),
            order_type='DINE_IN', table_number='12',
        )).order
        assert order.table_number == '12'

    def test_scheduled_order_outside_opening_hours(self, assembler, tenant_a, tracked_item_a):
        # 2026-03-03 is a Tuesday
        OpeningHours.all_objects.create(
            tenant=tenant_a, day_of_week=1,
            open_time=datetime(2026, 1, 1, 9).time(), close_time=datetime(2026, 1, 1, 17).time(),
        )

        with pytest.raises(StoreClosedError):
            assembler.assemble(make_request(
                tenant_a, CartLine(menu_id=tracked_item_a.id, quantity=1),
                schedule=ScheduledTarget(date='2026-03-03', time='17:00'),
            ))

        tracked_item_a.refresh_from_db()
        assert tracked_item_a.stock_qty == 5


@pytest.mark.django_db
class TestAssemblyAtomicity:

    def test_insufficient_stock_rolls_back_earlier_decrements(
        self, assembler, tenant_a, tracked_item_a, second_tracked_item
    ):
        request = make_request(
            tenant_a,
            CartLine(menu_id=tracked_item_a.id, quantity=2),
            CartLine(menu_id=second_tracked_item.id, quantity=2),
        )

        with pytest.raises(InsufficientStockError):
            assembler.assemble(request)

        tracked_item_a.refresh_from_db()
        second_tracked_item.refresh_from_db()
        assert tracked_item_a.stock_qty == 5
        assert second_tracked_item.stock_qty == 1
        assert not Order.all_objects.filter(tenant=tenant_a).exists()
        assert not StockMovement.all_objects.filter(tenant=tenant_a).exists()

    def test_persist_failure_rolls_back_stock(self, tenant_a, tracked_item_a):
        Order.all_objects.create(
            tenant=tenant_a, order_number='DUPE', business_date=NOW.date(), order_type='TAKEAWAY'
        )
        assembler = OrderAssembler(clock=fixed_clock, number_generator=ScriptedNumbers('DUPE', 'DUPE', 'DUPE'))

        with pytest.raises(IntegrityError):
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=tracked_item_a.id, quantity=2)))

        tracked_item_a.refresh_from_db()
        assert tracked_item_a.stock_qty == 5
        assert Order.all_objects.filter(tenant=tenant_a).count() == 1

    def test_number_collision_retried(self, tenant_a, menu_item_a):
        Order.all_objects.create(
            tenant=tenant_a, order_number='DUPE', business_date=NOW.date(), order_type='TAKEAWAY'
        )
        assembler = OrderAssembler(clock=fixed_clock, number_generator=ScriptedNumbers('DUPE', 'FRSH'))

        order = assembler.assemble(make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1))).order

        assert order.order_number == 'FRSH'

    def test_numbers_unique_within_business_day(self, assembler, tenant_a, menu_item_a):
        numbers = {
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1))).order.order_number
            for _ in range(20)
        }
        assert len(numbers) == 20


@pytest.mark.django_db
class TestPriceSnapshot:

    def test_promotion_price_used(self, assembler, tenant_a, menu_item_a):
        promotion = Promotion.all_objects.create(tenant=tenant_a, name='Happy Hour')
        PromotionWindow.all_objects.create(
            tenant=tenant_a, promotion=promotion, menu_item=menu_item_a, promo_price=Decimal('7.00'),
            start_at=NOW - timedelta(hours=1), end_at=NOW + timedelta(hours=1),
        )

        order = assembler.assemble(make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=2))).order

        [item] = order.items.all()
        assert item.menu_price == Decimal('7.00')
        assert order.subtotal == Decimal('14.00')

    def test_snapshot_survives_price_and_promotion_changes(self, assembler, tenant_a, menu_item_a):
        promotion = Promotion.all_objects.create(tenant=tenant_a, name='Happy Hour')
        PromotionWindow.all_objects.create(
            tenant=tenant_a, promotion=promotion, menu_item=menu_item_a, promo_price=Decimal('7.00'),
            start_at=NOW - timedelta(hours=1), end_at=NOW + timedelta(hours=1),
        )
        order = assembler.assemble(make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1))).order

        menu_item_a.price = Decimal('99.00')
        menu_item_a.save()
        promotion.is_enabled = False
        promotion.save()

        item = OrderItem.all_objects.get(order=order)
        order.refresh_from_db()
        assert item.menu_price == Decimal('7.00')
        assert order.total_amount == Decimal('7.00')


@pytest.mark.django_db
class TestPostCommitSideEffects:

    def test_signals_only_after_commit(
        self, assembler, tenant_a, tracked_item_a, captured_signals, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=tracked_item_a.id, quantity=1)))

        assert captured_signals == []
        assert len(callbacks) == 1

    def test_order_placed_and_stock_depleted(
        self, assembler, tenant_a, tracked_item_a, captured_signals, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            result = assembler.assemble(make_request(tenant_a, CartLine(menu_id=tracked_item_a.id, quantity=5)))

        names = [name for name, _ in captured_signals]
        assert names == ['order_placed', 'stock_depleted']
        assert captured_signals[0][1]['order'].pk == result.order.pk
        assert captured_signals[1][1]['allocation'].item_id == tracked_item_a.id

    def test_low_stock_signal(
        self, assembler, tenant_a, tracked_item_a, captured_signals, django_capture_on_commit_callbacks
    ):
        tracked_item_a.low_stock_threshold = 3
        tracked_item_a.save()

        with django_capture_on_commit_callbacks(execute=True):
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=tracked_item_a.id, quantity=2)))

        assert [name for name, _ in captured_signals] == ['order_placed', 'low_stock_reached']

    def test_stock_alerts_disabled(
        self, assembler, tenant_a, merchant_settings_a, tracked_item_a, captured_signals,
        django_capture_on_commit_callbacks
    ):
        merchant_settings_a.stock_alert_enabled = False
        merchant_settings_a.save()

        with django_capture_on_commit_callbacks(execute=True):
            assembler.assemble(make_request(tenant_a, CartLine(menu_id=tracked_item_a.id, quantity=5)))

        assert [name for name, _ in captured_signals] == ['order_placed']

    def test_customer_stats_updated(
        self, assembler, tenant_a, customer_a, menu_item_a, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            assembler.assemble(make_request(
                tenant_a, CartLine(menu_id=menu_item_a.id, quantity=3), customer=customer_a
            ))

        customer_a.refresh_from_db()
        assert customer_a.total_orders == 1
        assert customer_a.total_spent == Decimal('30.00')
        assert customer_a.last_order_at == NOW

    def test_failing_receiver_does_not_fail_order(
        self, assembler, tenant_a, menu_item_a, caplog, django_capture_on_commit_callbacks
    ):
        def broken_receiver(sender, **kwargs):
            raise RuntimeError("notification backend down")

        order_placed.connect(broken_receiver, weak=False)
        try:
            with caplog.at_level(logging.ERROR, logger='orders.services.assembly_service'):
                with django_capture_on_commit_callbacks(execute=True):
                    result = assembler.assemble(
                        make_request(tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1))
                    )
        finally:
            order_placed.disconnect(broken_receiver)

        assert Order.all_objects.filter(pk=result.order.pk).exists()
        assert 'notification backend down' in caplog.text

    def test_failing_customer_stats_logged(
        self, assembler, tenant_a, customer_a, menu_item_a, monkeypatch, caplog,
        django_capture_on_commit_callbacks
    ):
        def broken(*args, **kwargs):
            raise RuntimeError("stats unavailable")

        monkeypatch.setattr('orders.services.assembly_service.CustomerService.record_order', broken)

        with caplog.at_level(logging.ERROR, logger='orders.services.assembly_service'):
            with django_capture_on_commit_callbacks(execute=True):
                result = assembler.assemble(make_request(
                    tenant_a, CartLine(menu_id=menu_item_a.id, quantity=1), customer=customer_a
                ))

        assert Order.all_objects.filter(pk=result.order.pk).exists()
        assert 'Failed to update customer stats' in caplog.text
        assert Customer.all_objects.get(pk=customer_a.pk).total_orders == 0

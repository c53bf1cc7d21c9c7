"""
Concurrent Access Tests

Checkouts racing for the same stock must never oversell. Each thread opens
its own database connection, so these tests need a database with real
row-level concurrency and are skipped on SQLite. Point the settings at
PostgreSQL to run them:

    POSTGRES_DB=orders POSTGRES_USER=postgres pytest backend/core_backend/tests/test_concurrent_access.py

These tests use threading to simulate real-world concurrent access patterns.
"""
import pytest
import uuid
from decimal import Decimal
from threading import Thread, Barrier

from django.db import connection, transaction

from cart.types import Cart, CartLine
from inventory.services import InventoryLedger, StockRequirement, MENU
from orders.exceptions import InsufficientStockError, OrderAssemblyError
from orders.models import Order
from orders.services import PosOrderService
from products.models import MenuItem
from tenant.models import Tenant
from users.models import User

pytestmark = pytest.mark.skipif(
    connection.vendor == 'sqlite',
    reason="SQLite serialises writers; concurrency tests need PostgreSQL",
)


def make_tenant():
    code = uuid.uuid4().hex[:6].upper()
    return Tenant.objects.create(name=f"Test Tenant {code}", slug=f"test-{code.lower()}", code=code, is_active=True)


def run_concurrently(count, target):
    """Start ``count`` threads on ``target(thread_id)`` behind a barrier and wait for all."""
    barrier = Barrier(count)

    def runner(thread_id):
        try:
            barrier.wait()
            target(thread_id)
        finally:
            connection.close()

    threads = [Thread(target=runner, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


@pytest.mark.django_db(transaction=True)
class TestConcurrentStockDecrement:

    def test_conditional_decrement_prevents_overselling(self):
        """
        Scenario:
        - Item has 10 units in stock
        - 3 checkouts simultaneously take 4 units each (12 total)
        - Expected: 2 succeed (8 units), 1 fails, 2 units remain
        """
        tenant = make_tenant()
        item = MenuItem.all_objects.create(
            tenant=tenant, name="Brownie", price=Decimal('4.00'), track_stock=True, stock_qty=10
        )
        requirement = StockRequirement(kind=MENU, item_id=item.id, name=item.name, quantity=4)

        results = []
        errors = []

        def take_four(thread_id):
            try:
                with transaction.atomic():
                    InventoryLedger().allocate([requirement])
                results.append(f"thread_{thread_id}_success")
            except InsufficientStockError as e:
                errors.append(f"thread_{thread_id}_error: {e}")

        run_concurrently(3, take_four)

        item.refresh_from_db()
        assert len(results) == 2, f"Expected 2 successful decrements, got {len(results)}. Errors: {errors}"
        assert len(errors) == 1
        assert "Insufficient stock" in errors[0]
        assert item.stock_qty == 2

    def test_concurrent_orders_for_last_units(self):
        """
        Scenario:
        - 3 units left, 6 staff ring up one unit each at the same moment
        - Expected: exactly 3 orders, stock 0 and the item deactivated
        """
        tenant = make_tenant()
        item = MenuItem.all_objects.create(
            tenant=tenant, name="Cheesecake", price=Decimal('7.00'), track_stock=True, stock_qty=3
        )
        staff = [
            User.objects.create_user(
                username=f"cashier_{tenant.code}_{i}", password="password123", tenant=tenant, is_pos_staff=True
            )
            for i in range(6)
        ]

        placed = []
        rejected = []

        def ring_up(thread_id):
            cart = Cart(order_type='TAKEAWAY', lines=(CartLine(menu_id=item.id, quantity=1),))
            try:
                result = PosOrderService().create_order(cart, staff[thread_id])
                placed.append(result.order.order_number)
            except OrderAssemblyError as e:
                # Losers see either the lost decrement or the deactivated item
                rejected.append(e.code)

        run_concurrently(6, ring_up)

        item.refresh_from_db()
        assert len(placed) == 3, f"Expected 3 orders, got {len(placed)}"
        assert len(rejected) == 3
        assert set(rejected) <= {'INSUFFICIENT_STOCK', 'ITEM_UNAVAILABLE'}
        assert len(set(placed)) == 3
        assert item.stock_qty == 0
        assert item.is_active is False
        assert Order.all_objects.filter(tenant=tenant).count() == 3

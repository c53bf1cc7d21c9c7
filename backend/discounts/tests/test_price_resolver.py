"""
PriceResolver tests: time-windowed promotional pricing.
"""
import logging
import pytest
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from discounts.models import Promotion, PromotionWindow
from discounts.services import PriceResolver

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def promotion_a(tenant_a):
    return Promotion.all_objects.create(tenant=tenant_a, name='Lunch Special')


def add_window(promotion, item, price, start, end):
    return PromotionWindow.all_objects.create(
        tenant=promotion.tenant,
        promotion=promotion,
        menu_item=item,
        promo_price=Decimal(price),
        start_at=start,
        end_at=end,
    )


@pytest.mark.django_db
class TestPriceResolver:

    def test_list_price_without_promotion(self, menu_item_a):
        assert PriceResolver().effective_price(menu_item_a, NOW) == Decimal('10.00')

    def test_active_window_price(self, menu_item_a, promotion_a):
        add_window(promotion_a, menu_item_a, '7.50', NOW - timedelta(hours=1), NOW + timedelta(hours=1))

        assert PriceResolver().effective_price(menu_item_a, NOW) == Decimal('7.50')

    def test_window_bounds_are_inclusive(self, menu_item_a, promotion_a):
        add_window(promotion_a, menu_item_a, '7.50', NOW, NOW + timedelta(hours=1))
        resolver = PriceResolver()

        assert resolver.effective_price(menu_item_a, NOW) == Decimal('7.50')
        assert resolver.effective_price(menu_item_a, NOW + timedelta(hours=1)) == Decimal('7.50')
        assert resolver.effective_price(menu_item_a, NOW + timedelta(hours=1, seconds=1)) == Decimal('10.00')

    def test_expired_and_future_windows_ignored(self, menu_item_a, promotion_a):
        add_window(promotion_a, menu_item_a, '5.00', NOW - timedelta(days=2), NOW - timedelta(days=1))
        add_window(promotion_a, menu_item_a, '6.00', NOW + timedelta(days=1), NOW + timedelta(days=2))

        assert PriceResolver().effective_price(menu_item_a, NOW) == Decimal('10.00')

    def test_disabled_promotion_ignored(self, menu_item_a, promotion_a):
        add_window(promotion_a, menu_item_a, '7.50', NOW - timedelta(hours=1), NOW + timedelta(hours=1))
        promotion_a.is_enabled = False
        promotion_a.save()

        assert PriceResolver().effective_price(menu_item_a, NOW) == Decimal('10.00')

    def test_overlapping_windows_pick_earliest_start_and_warn(self, menu_item_a, promotion_a, caplog):
        add_window(promotion_a, menu_item_a, '8.00', NOW - timedelta(minutes=30), NOW + timedelta(hours=1))
        add_window(promotion_a, menu_item_a, '6.00', NOW - timedelta(hours=2), NOW + timedelta(hours=1))

        with caplog.at_level(logging.WARNING, logger='discounts.services'):
            price = PriceResolver().effective_price(menu_item_a, NOW)

        assert price == Decimal('6.00')
        assert '2 promotion windows active' in caplog.text

    def test_effective_prices_batch(self, menu_item_a, tracked_item_a, promotion_a):
        add_window(promotion_a, tracked_item_a, '4.00', NOW - timedelta(hours=1), NOW + timedelta(hours=1))

        prices = PriceResolver().effective_prices([menu_item_a, tracked_item_a], NOW)

        assert prices == {menu_item_a.id: Decimal('10.00'), tracked_item_a.id: Decimal('4.00')}

    def test_effective_prices_empty(self):
        assert PriceResolver().effective_prices([], NOW) == {}

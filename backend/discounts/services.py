import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable

from django.utils import timezone

from .models import PromotionWindow

logger = logging.getLogger(__name__)


class PriceResolver:
    """
    Resolves the unit price a menu item sells at, at a given instant.

    A window is active when its promotion is enabled and
    ``start_at <= now <= end_at``. The first active window by
    (``start_at``, id) wins; overlapping windows are a configuration
    mistake and are logged, not rejected.
    """

    def _active_windows(self, menu_item_ids, now):
        # all_objects: callers pass items that were already tenant-scoped
        return (
            PromotionWindow.all_objects
            .filter(
                menu_item_id__in=list(menu_item_ids),
                promotion__is_enabled=True,
                start_at__lte=now,
                end_at__gte=now,
            )
            .order_by('start_at', 'id')
        )

    def effective_price(self, menu_item, now=None) -> Decimal:
        return self.effective_prices([menu_item], now)[menu_item.id]

    def effective_prices(self, menu_items: Iterable, now=None) -> Dict[int, Decimal]:
        """
        Effective price for each item, keyed by item id, in a single query.

        Items without an active window keep their list price.
        """
        now = now or timezone.now()
        items = {item.id: item for item in menu_items}
        prices = {item_id: item.price for item_id, item in items.items()}
        if not items:
            return prices

        windows_by_item = defaultdict(list)
        for window in self._active_windows(items.keys(), now):
            windows_by_item[window.menu_item_id].append(window)

        for item_id, windows in windows_by_item.items():
            if len(windows) > 1:
                logger.warning(
                    f"{len(windows)} promotion windows active for menu item {item_id} at "
                    f"{now.isoformat()}; using window {windows[0].id}"
                )
            prices[item_id] = windows[0].promo_price

        return prices

"""
Stock consistency for order assembly.

``InventoryLedger`` never takes row locks. Each decrement is a single
conditional UPDATE (``stock_qty >= q``) whose affected-row count is the only
thing that decides success, so two writers racing for the last unit cannot
both win. Everything here must run inside the caller's transaction: a later
failure in the same order rolls every earlier decrement back.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, List, Optional

from django.db.models import F

from orders.exceptions import InsufficientStockError
from products.models import MenuItem, AddonItem
from .models import StockMovement

logger = logging.getLogger(__name__)

MENU = StockMovement.ItemKind.MENU
ADDON = StockMovement.ItemKind.ADDON

_MODELS = {
    MENU: MenuItem,
    ADDON: AddonItem,
}


@dataclass(frozen=True)
class StockRequirement:
    """Total units one order needs from a single stock-tracked item."""
    kind: str
    item_id: int
    name: str
    quantity: int
    low_stock_threshold: Optional[int] = None


@dataclass(frozen=True)
class StockAllocation:
    kind: str
    item_id: int
    name: str
    quantity: int
    quantity_before: int
    quantity_after: int
    depleted: bool
    low_stock: bool
    threshold: Optional[int] = None


class InventoryLedger:

    @staticmethod
    def aggregate(lines: Iterable) -> List[StockRequirement]:
        """
        Sum required quantities per tracked item across the whole cart.

        Menu items contribute the line quantity; addons contribute their own
        quantity (not multiplied by the line quantity). Menu items and addons
        are aggregated separately even when ids collide. Untracked items
        produce no requirement. Result order is (kind, id).
        """
        totals = OrderedDict()

        def add(kind, item, quantity):
            if not item.is_stock_tracked:
                return
            key = (kind, item.id)
            if key in totals:
                totals[key]['quantity'] += quantity
            else:
                totals[key] = {
                    'name': item.name,
                    'quantity': quantity,
                    'threshold': item.low_stock_threshold,
                }

        for line in lines:
            add(MENU, line.menu_item, line.quantity)
            for addon in line.addons:
                add(ADDON, addon.addon_item, addon.quantity)

        return [
            StockRequirement(
                kind=kind,
                item_id=item_id,
                name=data['name'],
                quantity=data['quantity'],
                low_stock_threshold=data['threshold'],
            )
            for (kind, item_id), data in sorted(totals.items(), key=lambda entry: entry[0])
        ]

    def _read_stock(self, model, item_id):
        return model.all_objects.filter(pk=item_id).values_list('stock_qty', flat=True).first()

    def allocate(self, requirements: Iterable[StockRequirement], default_threshold=None) -> List[StockAllocation]:
        """
        Decrement stock for every requirement or raise.

        For each requirement: read the current quantity and fail fast when it
        is short, then decrement with ``WHERE stock_qty >= q``. Zero affected
        rows means another order got there first, which is reported exactly
        like a failed read check.

        Raises:
            InsufficientStockError
        """
        allocations = []
        for requirement in requirements:
            allocations.append(self._allocate_one(requirement, default_threshold))
        return allocations

    def _allocate_one(self, requirement, default_threshold):
        model = _MODELS[requirement.kind]
        quantity = requirement.quantity

        available = self._read_stock(model, requirement.item_id)
        if available is None or available < quantity:
            logger.info(
                f"Stock check failed for {requirement.name}: required {quantity}, available {available}"
            )
            raise InsufficientStockError(requirement.name)

        updated = model.all_objects.filter(
            pk=requirement.item_id,
            stock_qty__gte=quantity,
        ).update(stock_qty=F('stock_qty') - quantity)

        if updated != 1:
            logger.warning(
                f"Conditional decrement lost a race for {requirement.name} "
                f"(required {quantity}, read {available})"
            )
            raise InsufficientStockError(requirement.name)

        after = self._read_stock(model, requirement.item_id)
        before = after + quantity

        # Out of stock items stop being orderable; restocking never re-activates here
        depleted = after <= 0
        if depleted:
            model.all_objects.filter(pk=requirement.item_id, stock_qty__lte=0).update(is_active=False)
            logger.info(f"{requirement.name} is out of stock and was deactivated")

        threshold = requirement.low_stock_threshold
        if threshold is None:
            threshold = default_threshold
        low_stock = (
            not depleted
            and threshold is not None
            and threshold > 0
            and before > threshold >= after
        )

        return StockAllocation(
            kind=requirement.kind,
            item_id=requirement.item_id,
            name=requirement.name,
            quantity=quantity,
            quantity_before=before,
            quantity_after=after,
            depleted=depleted,
            low_stock=low_stock,
            threshold=threshold,
        )

    @staticmethod
    def record_movements(allocations: Iterable[StockAllocation], order) -> List[StockMovement]:
        return StockMovement.all_objects.bulk_create([
            StockMovement(
                tenant_id=order.tenant_id,
                order=order,
                operation_type='ORDER_DEDUCTION',
                item_kind=allocation.kind,
                item_id=allocation.item_id,
                item_name=allocation.name,
                quantity_change=-allocation.quantity,
                previous_quantity=allocation.quantity_before,
                new_quantity=allocation.quantity_after,
            )
            for allocation in allocations
        ])

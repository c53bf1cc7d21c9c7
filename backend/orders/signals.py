"""
Order and stock events.

Sent by the order assembler after the order transaction commits, never
from inside it. Receivers must not assume they can abort the order.

    order_placed(sender, order)
    stock_depleted(sender, tenant, allocation)
    low_stock_reached(sender, tenant, allocation)

``allocation`` is an ``inventory.services.StockAllocation``.
"""
from django.dispatch import Signal

order_placed = Signal()
stock_depleted = Signal()
low_stock_reached = Signal()

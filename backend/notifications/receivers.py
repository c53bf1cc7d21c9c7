"""
Queue merchant notifications for order and stock events.

These run after the order transaction has committed. Failing to queue a
notification is logged and otherwise ignored.
"""
import logging

from django.dispatch import receiver

from orders.signals import low_stock_reached, order_placed, stock_depleted
from .tasks import notify_low_stock, notify_new_order, notify_stock_out

logger = logging.getLogger(__name__)


@receiver(order_placed, dispatch_uid="notifications_new_order")
def queue_new_order_notification(sender, order, **kwargs):
    try:
        notify_new_order.delay(str(order.pk))
    except Exception:
        logger.exception(f"Could not queue new order notification for {order.order_number}")


@receiver(stock_depleted, dispatch_uid="notifications_stock_out")
def queue_stock_out_notification(sender, tenant, allocation, **kwargs):
    try:
        notify_stock_out.delay(str(tenant.pk), allocation.kind, allocation.item_id, allocation.name)
    except Exception:
        logger.exception(f"Could not queue stock-out notification for {allocation.name}")


@receiver(low_stock_reached, dispatch_uid="notifications_low_stock")
def queue_low_stock_notification(sender, tenant, allocation, **kwargs):
    try:
        notify_low_stock.delay(
            str(tenant.pk),
            allocation.kind,
            allocation.item_id,
            allocation.name,
            allocation.quantity_after,
            allocation.threshold,
        )
    except Exception:
        logger.exception(f"Could not queue low stock notification for {allocation.name}")

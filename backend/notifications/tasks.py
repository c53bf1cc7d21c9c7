"""
Merchant notification tasks.

Queued by ``notifications.receivers`` once an order has committed. A failing
task is retried and then logged; it never affects the order that triggered it.
"""
from celery import shared_task
import logging

from orders.models import Order
from tenant.models import Tenant
from .models import MerchantNotification

logger = logging.getLogger(__name__)

NEW_ORDER_TITLES = {
    Order.OrderSource.POS: "New POS order",
    Order.OrderSource.ONLINE: "New online order",
    Order.OrderSource.RESERVATION: "Reservation accepted",
    Order.OrderSource.GROUP: "New group order",
}


@shared_task(bind=True, max_retries=3, default_retry_delay=30)
def notify_new_order(self, order_id):
    """
    Args:
        order_id: UUID of the committed order

    Returns:
        dict: Status and the notification id
    """
    try:
        order = Order.all_objects.select_related('tenant').get(pk=order_id)
    except Order.DoesNotExist:
        logger.error(f"Order {order_id} not found for new order notification")
        return {"status": "failed", "error": "Order not found", "order_id": str(order_id)}

    try:
        notification = MerchantNotification.all_objects.create(
            tenant=order.tenant,
            category=MerchantNotification.Category.NEW_ORDER,
            title=NEW_ORDER_TITLES.get(order.source, "New order"),
            message=(
                f"Order {order.order_number} ({order.get_order_type_display()}) "
                f"total {order.total_amount}"
            ),
            metadata={
                "order_id": str(order.pk),
                "order_number": order.order_number,
                "source": order.source,
                "total": str(order.total_amount),
            },
        )
    except Exception as exc:
        logger.error(f"Error creating new order notification for {order_id}: {exc}")
        raise self.retry(exc=exc)

    return {"status": "completed", "notification_id": notification.pk}


def _create_stock_notification(tenant_id, category, title, message, metadata):
    tenant = Tenant.objects.filter(pk=tenant_id).first()
    if tenant is None:
        logger.error(f"Tenant {tenant_id} not found for {category} notification")
        return None
    return MerchantNotification.all_objects.create(
        tenant=tenant,
        category=category,
        title=title,
        message=message,
        metadata=metadata,
    )


@shared_task(bind=True, max_retries=3, default_retry_delay=30)
def notify_stock_out(self, tenant_id, item_kind, item_id, item_name):
    try:
        notification = _create_stock_notification(
            tenant_id,
            MerchantNotification.Category.STOCK_OUT,
            title=f"{item_name} is out of stock",
            message=f"{item_name} sold out and has been hidden from the menu until it is restocked.",
            metadata={"item_kind": item_kind, "item_id": item_id},
        )
    except Exception as exc:
        logger.error(f"Error creating stock-out notification for {item_name}: {exc}")
        raise self.retry(exc=exc)

    if notification is None:
        return {"status": "failed", "error": "Tenant not found"}
    return {"status": "completed", "notification_id": notification.pk}


@shared_task(bind=True, max_retries=3, default_retry_delay=30)
def notify_low_stock(self, tenant_id, item_kind, item_id, item_name, quantity, threshold):
    try:
        notification = _create_stock_notification(
            tenant_id,
            MerchantNotification.Category.LOW_STOCK,
            title=f"{item_name} is running low",
            message=f"Only {quantity} left (alert threshold {threshold}).",
            metadata={
                "item_kind": item_kind,
                "item_id": item_id,
                "quantity": quantity,
                "threshold": threshold,
            },
        )
    except Exception as exc:
        logger.error(f"Error creating low stock notification for {item_name}: {exc}")
        raise self.retry(exc=exc)

    if notification is None:
        return {"status": "failed", "error": "Tenant not found"}
    return {"status": "completed", "notification_id": notification.pk}

import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from settings.models import FulfillmentMode
from tenant.managers import TenantManager


class Order(models.Model):
    """
    A placed order and its price snapshot.

    Orders are only ever created by ``orders.services.OrderAssembler``; the
    line items, fee components and totals are fixed at that point and are
    not recomputed when menu prices or promotions change later.
    """

    class OrderStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")  # Waiting for the merchant to accept
        ACCEPTED = "ACCEPTED", _("Accepted")
        IN_PROGRESS = "IN_PROGRESS", _("In Progress")
        READY = "READY", _("Ready")
        COMPLETED = "COMPLETED", _("Completed")
        CANCELLED = "CANCELLED", _("Cancelled")

    class OrderSource(models.TextChoices):
        POS = "POS", _("Point of Sale")
        ONLINE = "ONLINE", _("Online")
        RESERVATION = "RESERVATION", _("Reservation")
        GROUP = "GROUP", _("Group Order")

    FINAL_STATUSES = (OrderStatus.READY, OrderStatus.COMPLETED, OrderStatus.CANCELLED)
    ACTIVE_STATUSES = (OrderStatus.PENDING, OrderStatus.ACCEPTED, OrderStatus.IN_PROGRESS)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='orders'
    )
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    order_number = models.CharField(max_length=20)
    business_date = models.DateField(
        help_text=_("Merchant-local calendar day the order number is unique within")
    )
    order_type = models.CharField(max_length=10, choices=FulfillmentMode.choices)
    source = models.CharField(max_length=12, choices=OrderSource.choices, default=OrderSource.ONLINE)
    status = models.CharField(
        max_length=12, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )
    table_number = models.CharField(max_length=20, blank=True, null=True)
    notes = models.TextField(blank=True)

    # --- Financial Fields ---
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    tax_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    service_charge_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    packaging_fee_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    delivery_fee_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    # --- Scheduling ---
    is_scheduled = models.BooleanField(default=False)
    scheduled_date = models.DateField(null=True, blank=True)
    scheduled_time = models.TimeField(null=True, blank=True)

    # --- Lifecycle ---
    placed_at = models.DateTimeField(default=timezone.now, db_index=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ["-placed_at"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'business_date', 'order_number'],
                name='unique_order_number_per_business_day'
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'status', 'placed_at']),
            models.Index(fields=['tenant', 'order_type', 'status']),
        ]

    def __str__(self):
        return f"Order {self.order_number} ({self.get_status_display()})"

    @property
    def is_final(self):
        return self.status in self.FINAL_STATUSES


class OrderItem(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='order_items'
    )
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        'products.MenuItem',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
        help_text=_("Kept for reference only; name and price below are the snapshot.")
    )

    # Price snapshot
    menu_name = models.CharField(max_length=200)
    menu_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Unit price at the time of sale, promotions applied."),
    )
    quantity = models.PositiveIntegerField(default=1)
    subtotal = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Unit price times quantity plus all addon subtotals."),
    )
    notes = models.TextField(
        blank=True, help_text=_("Customer notes, e.g., 'no onions'")
    )

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['tenant', 'order']),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.menu_name}"


class OrderItemAddon(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='order_item_addons'
    )
    order_item = models.ForeignKey(OrderItem, on_delete=models.CASCADE, related_name="addons")
    addon_item = models.ForeignKey(
        'products.AddonItem',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_item_addons",
    )
    addon_name = models.CharField(max_length=200)
    addon_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1)
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.quantity} x {self.addon_name}"

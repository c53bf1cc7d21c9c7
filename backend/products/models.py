from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from tenant.managers import TenantManager


class OrderableQuerySet(models.QuerySet):
    def not_deleted(self):
        return self.filter(deleted_at__isnull=True)

    def orderable(self):
        """Items a customer can currently put in a cart."""
        return self.filter(deleted_at__isnull=True, is_active=True)


# Tenant-filtered manager that also exposes the queryset helpers above
OrderableManager = TenantManager.from_queryset(OrderableQuerySet)


class StockTrackedItem(models.Model):
    """
    Fields shared by everything that can be sold: menu items and addons.

    ``stock_qty`` is only meaningful when ``track_stock`` is on; a NULL
    quantity means the item is not tracked even if the flag is set. Stock is
    decremented exclusively by ``inventory.services.InventoryLedger``.
    """
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Orderable right now. Switched off automatically when tracked stock runs out."
    )
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    track_stock = models.BooleanField(default=False)
    stock_qty = models.IntegerField(
        null=True,
        blank=True,
        help_text="Units on hand. NULL means untracked."
    )
    low_stock_threshold = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Overrides the merchant default low-stock threshold."
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrderableManager()
    all_objects = models.Manager()

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    @property
    def is_stock_tracked(self):
        return self.track_stock and self.stock_qty is not None

    def soft_delete(self):
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at', 'updated_at'])


class MenuItem(StockTrackedItem):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='menu_items'
    )

    class Meta(StockTrackedItem.Meta):
        indexes = [
            models.Index(fields=['tenant', 'is_active']),
        ]


class AddonItem(StockTrackedItem):
    """An extra (sauce, topping, side) that only augments one menu item."""
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='addon_items'
    )
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.CASCADE,
        related_name='addons'
    )

    class Meta(StockTrackedItem.Meta):
        indexes = [
            models.Index(fields=['tenant', 'menu_item']),
        ]

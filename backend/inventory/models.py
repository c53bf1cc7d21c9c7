from django.db import models
from django.utils.translation import gettext_lazy as _
from tenant.managers import TenantManager


class StockMovement(models.Model):
    """
    Audit trail of stock changes.

    Order deductions are written inside the same transaction as the stock
    decrement they describe, so a rolled-back order leaves no movement rows.
    """

    class ItemKind(models.TextChoices):
        MENU = 'MENU', _('Menu Item')
        ADDON = 'ADDON', _('Addon')

    OPERATION_CHOICES = [
        ('ORDER_DEDUCTION', _('Order Deduction')),
        ('ADJUSTMENT', _('Manual Adjustment')),
    ]

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='stock_movements'
    )
    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_movements'
    )
    operation_type = models.CharField(
        max_length=20,
        choices=OPERATION_CHOICES,
        default='ORDER_DEDUCTION',
    )
    item_kind = models.CharField(max_length=10, choices=ItemKind.choices)
    item_id = models.BigIntegerField(help_text=_("MenuItem or AddonItem id, depending on item_kind"))
    item_name = models.CharField(max_length=200)
    quantity_change = models.IntegerField(
        help_text=_("Change in quantity (negative for deductions)")
    )
    previous_quantity = models.IntegerField()
    new_quantity = models.IntegerField()
    timestamp = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Stock Movement")
        verbose_name_plural = _("Stock Movements")
        ordering = ['-timestamp', '-id']
        indexes = [
            models.Index(fields=['tenant', 'item_kind', 'item_id', '-timestamp']),
        ]

    def __str__(self):
        return f"{self.item_name}: {self.previous_quantity} -> {self.new_quantity}"

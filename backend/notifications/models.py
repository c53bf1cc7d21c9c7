from django.db import models
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager


class MerchantNotification(models.Model):
    """An entry in the merchant dashboard's notification feed."""

    class Category(models.TextChoices):
        NEW_ORDER = "NEW_ORDER", _("New Order")
        STOCK_OUT = "STOCK_OUT", _("Out of Stock")
        LOW_STOCK = "LOW_STOCK", _("Low Stock")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    category = models.CharField(max_length=12, choices=Category.choices)
    title = models.CharField(max_length=200)
    message = models.TextField()
    metadata = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tenant', 'is_read', 'created_at']),
        ]

    def __str__(self):
        return f"[{self.category}] {self.title}"

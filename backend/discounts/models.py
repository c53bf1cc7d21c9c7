from django.db import models
from django.core.exceptions import ValidationError
from decimal import Decimal
from django.core.validators import MinValueValidator
from tenant.managers import TenantManager


class Promotion(models.Model):
    """
    A named promotion. Its windows carry the actual promo prices; switching
    ``is_enabled`` off deactivates every window at once.
    """

    tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE, related_name='promotions')
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    is_enabled = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()  # Bypass tenant filter

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'name'],
                name='unique_promotion_name_per_tenant'
            ),
        ]

    def __str__(self):
        return self.name


class PromotionWindow(models.Model):
    """A promo price for one menu item, valid from ``start_at`` to ``end_at`` inclusive."""

    tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE, related_name='promotion_windows')
    promotion = models.ForeignKey(Promotion, on_delete=models.CASCADE, related_name='windows')
    menu_item = models.ForeignKey(
        'products.MenuItem',
        on_delete=models.CASCADE,
        related_name='promotion_windows'
    )
    promo_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    start_at = models.DateTimeField()
    end_at = models.DateTimeField()

    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ["start_at", "id"]
        indexes = [
            models.Index(fields=['tenant', 'menu_item', 'start_at', 'end_at']),
        ]

    def __str__(self):
        return f"{self.promotion} - {self.menu_item} @ {self.promo_price}"

    def clean(self):
        super().clean()
        if self.start_at and self.end_at and self.end_at < self.start_at:
            raise ValidationError({'end_at': 'End must not be before start.'})

    def is_active_at(self, moment):
        return self.promotion.is_enabled and self.start_at <= moment <= self.end_at

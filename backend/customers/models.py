"""
Customers of a merchant.

Customers never log in to this service. A customer row is found or created
from the contact details on an order, and carries lifetime stats that are
updated after each order commits.
"""
from decimal import Decimal

from django.db import models

from core_backend.utils.pii import PIIProtection
from tenant.managers import TenantManager


class Customer(models.Model):

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='customers'
    )
    name = models.CharField(max_length=200, blank=True)
    email = models.EmailField(
        blank=True,
        db_index=True,
        help_text="Stored lower-cased; the first lookup key for repeat customers"
    )
    phone = models.CharField(
        max_length=30,
        blank=True,
        db_index=True,
        help_text="Second lookup key when no email matches"
    )

    total_orders = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    last_order_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tenant', 'email']),
            models.Index(fields=['tenant', 'phone']),
        ]

    def __str__(self):
        if self.email:
            return PIIProtection.mask_email(self.email)
        if self.phone:
            return PIIProtection.mask_phone(self.phone)
        return f"Customer #{self.pk}"

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        self.phone = (self.phone or '').strip()
        super().save(*args, **kwargs)

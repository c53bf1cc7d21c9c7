from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager


class Reservation(models.Model):
    """
    A table booking, optionally with items ordered ahead.

    ``preorder`` holds the cart the customer picked when booking, in the same
    camelCase shape as a checkout cart (``items``, ``notes``). It is only
    priced and stock-checked when staff accept the reservation; until then it
    reserves nothing.
    """

    class ReservationStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        ACCEPTED = "ACCEPTED", _("Accepted")
        CANCELLED = "CANCELLED", _("Cancelled")
        COMPLETED = "COMPLETED", _("Completed")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='reservations'
    )
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reservations',
    )
    party_size = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    reservation_date = models.DateField(help_text=_("Merchant-local date"))
    reservation_time = models.TimeField(help_text=_("Merchant-local time"))
    table_number = models.CharField(max_length=50, blank=True, null=True)
    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=10,
        choices=ReservationStatus.choices,
        default=ReservationStatus.PENDING,
        db_index=True,
    )
    preorder = models.JSONField(null=True, blank=True)
    order = models.OneToOneField(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reservation',
    )
    accepted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['reservation_date', 'reservation_time']
        indexes = [
            models.Index(fields=['tenant', 'reservation_date', 'status']),
        ]

    def __str__(self):
        return f"Reservation {self.pk} for {self.party_size} on {self.reservation_date} {self.reservation_time:%H:%M}"

    @property
    def preorder_items(self):
        preorder = self.preorder or {}
        items = preorder.get('items') if isinstance(preorder, dict) else None
        return items if isinstance(items, list) else []

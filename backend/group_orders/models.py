from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from settings.models import FulfillmentMode
from tenant.managers import TenantManager


class GroupOrderSession(models.Model):
    """
    A shared cart that several people fill from their own devices.

    The host submits it once everyone is done; the participants' sub-carts
    are merged into a single order and the session is closed.
    """

    class SessionStatus(models.TextChoices):
        OPEN = "OPEN", _("Open")
        LOCKED = "LOCKED", _("Locked")  # Submission in progress
        SUBMITTED = "SUBMITTED", _("Submitted")
        CANCELLED = "CANCELLED", _("Cancelled")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='group_order_sessions'
    )
    session_code = models.CharField(max_length=12)
    order_type = models.CharField(max_length=10, choices=FulfillmentMode.choices)
    table_number = models.CharField(max_length=20, blank=True, null=True)
    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=10,
        choices=SessionStatus.choices,
        default=SessionStatus.OPEN,
    )
    order = models.OneToOneField(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='group_session',
    )
    expires_at = models.DateTimeField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'session_code'],
                name='unique_group_session_code_per_tenant'
            ),
        ]

    def __str__(self):
        return f"Group order {self.session_code} ({self.get_status_display()})"

    def save(self, *args, **kwargs):
        self.session_code = (self.session_code or '').upper()
        super().save(*args, **kwargs)

    def is_expired(self, now=None):
        return self.expires_at <= (now or timezone.now())


class GroupOrderParticipant(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='group_order_participants'
    )
    session = models.ForeignKey(
        GroupOrderSession,
        on_delete=models.CASCADE,
        related_name='participants'
    )
    name = models.CharField(max_length=100)
    device_id = models.CharField(max_length=100)
    is_host = models.BooleanField(default=False)
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='group_participations',
    )
    cart_items = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Participant's sub-cart: a list of {menuId, quantity, notes, addons}")
    )
    joined_at = models.DateTimeField(default=timezone.now)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['joined_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['session', 'device_id'],
                name='unique_participant_device_per_session'
            ),
        ]

    def __str__(self):
        return f"{self.name}{' (host)' if self.is_host else ''}"

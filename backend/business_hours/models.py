from django.db import models
from django.core.exceptions import ValidationError
from tenant.managers import TenantManager
from settings.models import FulfillmentMode


DAYS_OF_WEEK = [
    (0, 'Monday'),
    (1, 'Tuesday'),
    (2, 'Wednesday'),
    (3, 'Thursday'),
    (4, 'Friday'),
    (5, 'Saturday'),
    (6, 'Sunday'),
]


class OpeningHours(models.Model):
    """Regular weekly opening hours for one day of the week"""

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='opening_hours'
    )
    day_of_week = models.IntegerField(
        choices=DAYS_OF_WEEK,
        help_text='Day of the week (0=Monday, 6=Sunday)'
    )
    open_time = models.TimeField(null=True, blank=True)
    close_time = models.TimeField(
        null=True,
        blank=True,
        help_text='Exclusive. A close time at or before the open time runs past midnight.'
    )
    is_closed = models.BooleanField(
        default=False,
        help_text='Is the business closed this day?'
    )
    is_24_hours = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = 'Opening Hours'
        verbose_name_plural = 'Opening Hours'
        ordering = ['day_of_week']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'day_of_week'],
                name='unique_opening_hours_per_day'
            ),
        ]

    def __str__(self):
        day_name = dict(DAYS_OF_WEEK)[self.day_of_week]
        if self.is_closed:
            return f"{day_name}: Closed"
        if self.is_24_hours:
            return f"{day_name}: Open 24 hours"
        return f"{day_name}: {self.open_time} - {self.close_time}"

    def clean(self):
        if not self.is_closed and not self.is_24_hours:
            if self.open_time is None or self.close_time is None:
                raise ValidationError("Open and close times are required unless closed or open 24 hours")


class SpecialHours(models.Model):
    """
    Date-specific override of the weekly opening hours.

    When a row exists for a date, the weekly hours are not consulted at all
    for that date. Per-mode fields can switch a fulfillment mode off for the
    day or narrow its window; they never widen it.
    """

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='special_hours'
    )
    date = models.DateField(
        help_text='Date for special hours'
    )
    name = models.CharField(
        max_length=200,
        blank=True,
        help_text='Reason for special hours (e.g., "Christmas", "Staff Training")'
    )
    is_closed = models.BooleanField(
        default=False,
        help_text='Is the business closed on this date?'
    )
    open_time = models.TimeField(null=True, blank=True)
    close_time = models.TimeField(null=True, blank=True)

    is_dine_in_enabled = models.BooleanField(default=True)
    is_takeaway_enabled = models.BooleanField(default=True)
    is_delivery_enabled = models.BooleanField(default=True)
    dine_in_start_time = models.TimeField(null=True, blank=True)
    dine_in_end_time = models.TimeField(null=True, blank=True)
    takeaway_start_time = models.TimeField(null=True, blank=True)
    takeaway_end_time = models.TimeField(null=True, blank=True)
    delivery_start_time = models.TimeField(null=True, blank=True)
    delivery_end_time = models.TimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = 'Special Hours'
        verbose_name_plural = 'Special Hours'
        ordering = ['date']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'date'],
                name='unique_special_hours_per_date'
            ),
        ]

    def __str__(self):
        if self.is_closed:
            return f"{self.date}: Closed ({self.name})" if self.name else f"{self.date}: Closed"
        return f"{self.date}: Special Hours ({self.name})" if self.name else f"{self.date}: Special Hours"

    def clean(self):
        if (self.open_time is None) != (self.close_time is None):
            raise ValidationError("Special hours need both an open and a close time, or neither")

    def is_mode_enabled(self, mode):
        return {
            FulfillmentMode.DINE_IN: self.is_dine_in_enabled,
            FulfillmentMode.TAKEAWAY: self.is_takeaway_enabled,
            FulfillmentMode.DELIVERY: self.is_delivery_enabled,
        }.get(mode, False)

    def get_mode_window(self, mode):
        prefix = {
            FulfillmentMode.DINE_IN: 'dine_in',
            FulfillmentMode.TAKEAWAY: 'takeaway',
            FulfillmentMode.DELIVERY: 'delivery',
        }[mode]
        return (
            getattr(self, f'{prefix}_start_time'),
            getattr(self, f'{prefix}_end_time'),
        )


class ModeSchedule(models.Model):
    """Per-day window for one fulfillment mode"""

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='mode_schedules'
    )
    mode = models.CharField(max_length=20, choices=FulfillmentMode.choices)
    day_of_week = models.IntegerField(choices=DAYS_OF_WEEK)
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = 'Mode Schedule'
        verbose_name_plural = 'Mode Schedules'
        ordering = ['mode', 'day_of_week']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'mode', 'day_of_week'],
                name='unique_mode_schedule_per_day'
            ),
        ]

    def __str__(self):
        day_name = dict(DAYS_OF_WEEK)[self.day_of_week]
        return f"{self.get_mode_display()} {day_name}: {self.start_time} - {self.end_time}"

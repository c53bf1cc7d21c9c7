"""
Store and fulfillment-mode availability.

``AvailabilityService`` answers two independent questions for an arbitrary
calendar date and wall-clock time in the merchant's timezone:

* is the store open? (manual override, then special hours, then weekly hours)
* is a fulfillment mode (dine-in / takeaway / delivery) available?

Reservation acceptance and scheduled orders validate against a future
date/time, so nothing in here reads "now" unless asked to.
"""
from dataclasses import dataclass
from datetime import datetime, date, time
from typing import Optional, Tuple, Union

from django.utils import timezone

from orders.exceptions import StoreClosedError, ModeUnavailableError
from settings.config import get_merchant_settings, get_merchant_timezone
from settings.models import FulfillmentMode
from tenant.managers import get_current_tenant
from .models import OpeningHours, SpecialHours, ModeSchedule

# Sentinel: "look the special-hour row up by date"
UNSET = object()


@dataclass(frozen=True)
class StoreStatus:
    is_open: bool
    reason: str = ''


@dataclass(frozen=True)
class ModeStatus:
    is_available: bool
    reason: str = ''


def is_time_within(check_time: time, start: time, end: time) -> bool:
    """
    True when ``start <= check_time < end``.

    A window whose end is not after its start runs past midnight.
    """
    if start < end:
        return start <= check_time < end
    return check_time >= start or check_time < end


class AvailabilityService:
    """Service class for store-open and mode-availability decisions"""

    def __init__(self, tenant=None, merchant_settings=None):
        self.tenant = tenant or get_current_tenant()
        self._merchant_settings = merchant_settings

    @property
    def merchant_settings(self):
        if self._merchant_settings is None:
            self._merchant_settings = get_merchant_settings(self.tenant)
        return self._merchant_settings

    # ------------------------------------------------------------------
    # Parsing helpers
    # ------------------------------------------------------------------

    @staticmethod
    def parse_date(value: Union[str, date, datetime]) -> date:
        """
        Parse a calendar date.

        Strings are read as ``YYYY-MM-DD`` (anything after the first ten
        characters, such as a time or offset, is ignored) so the weekday is
        a property of the calendar date alone and never of the server clock.
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        text = str(value).strip()[:10]
        try:
            return datetime.strptime(text, '%Y-%m-%d').date()
        except ValueError:
            raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")

    @staticmethod
    def parse_time(value: Union[str, time]) -> time:
        if isinstance(value, time):
            return value
        text = str(value).strip()
        for fmt in ('%H:%M:%S', '%H:%M'):
            try:
                return datetime.strptime(text, fmt).time()
            except ValueError:
                continue
        raise ValueError(f"Invalid time '{value}', expected HH:MM")

    def local_now(self, now: Optional[datetime] = None) -> Tuple[date, time]:
        """Current (date, time) on the merchant's wall clock."""
        now = now or timezone.now()
        local = now.astimezone(get_merchant_timezone(self.merchant_settings))
        return local.date(), local.time().replace(microsecond=0)

    # ------------------------------------------------------------------
    # Store open
    # ------------------------------------------------------------------

    def is_store_open(self, check_date, check_time, special_hour=UNSET) -> StoreStatus:
        check_date = self.parse_date(check_date)
        check_time = self.parse_time(check_time)
        merchant = self.merchant_settings

        # Manual override wins over every schedule
        if merchant.is_manual_override:
            if not merchant.is_open:
                return StoreStatus(False, 'manually closed')
            return StoreStatus(True, 'manually open')

        special = self._resolve_special_hour(check_date, special_hour)
        if special is not None:
            return self._store_status_from_special(special, check_time)

        return self._store_status_from_weekly_hours(check_date, check_time)

    def _store_status_from_special(self, special, check_time) -> StoreStatus:
        if special.is_closed:
            reason = f"closed for {special.name}" if special.name else 'closed today'
            return StoreStatus(False, reason)

        if special.open_time is not None and special.close_time is not None:
            if is_time_within(check_time, special.open_time, special.close_time):
                return StoreStatus(True, f"open ({special.name or 'special hours'})")
            return StoreStatus(
                False,
                f"outside special hours {special.open_time:%H:%M} - {special.close_time:%H:%M}"
            )

        # Special day without its own window: open all day
        return StoreStatus(True, f"open ({special.name or 'special hours'})")

    def _store_status_from_weekly_hours(self, check_date, check_time) -> StoreStatus:
        rows = list(OpeningHours.all_objects.filter(tenant=self.tenant))
        if not rows:
            return StoreStatus(True, 'no opening hours configured')

        today = next((row for row in rows if row.day_of_week == check_date.weekday()), None)
        if today is None or today.is_closed:
            return StoreStatus(False, 'closed today')
        if today.is_24_hours:
            return StoreStatus(True, 'open 24 hours')
        if today.open_time is None or today.close_time is None:
            return StoreStatus(False, 'closed today')

        if is_time_within(check_time, today.open_time, today.close_time):
            return StoreStatus(True, 'open')
        return StoreStatus(
            False,
            f"outside opening hours {today.open_time:%H:%M} - {today.close_time:%H:%M}"
        )

    # ------------------------------------------------------------------
    # Mode availability
    # ------------------------------------------------------------------

    def is_mode_available(self, mode, check_date, check_time, special_hour=UNSET) -> ModeStatus:
        """
        Decide whether a fulfillment mode is available at ``check_date`` /
        ``check_time``.

        Independent of the store-open decision: a manually opened store
        still cannot take orders for a mode that is switched off.
        """
        if mode not in FulfillmentMode.values:
            return ModeStatus(False, f"unknown order type '{mode}'")

        check_date = self.parse_date(check_date)
        check_time = self.parse_time(check_time)
        merchant = self.merchant_settings
        label = FulfillmentMode(mode).label

        if not merchant.is_mode_enabled(mode):
            return ModeStatus(False, f"{label} is not available")

        special = self._resolve_special_hour(check_date, special_hour)
        if special is not None and not special.is_mode_enabled(mode):
            return ModeStatus(False, f"{label} is not available on {check_date.isoformat()}")

        base_window = self._base_mode_window(mode, check_date)
        if base_window is not None and not is_time_within(check_time, *base_window):
            start, end = base_window
            return ModeStatus(False, f"{label} is available {start:%H:%M} - {end:%H:%M}")

        # Special-hour window can only narrow the base window
        if special is not None:
            start, end = special.get_mode_window(mode)
            if start is not None and end is not None and not is_time_within(check_time, start, end):
                return ModeStatus(
                    False,
                    f"{label} is available {start:%H:%M} - {end:%H:%M} on {check_date.isoformat()}"
                )

        return ModeStatus(True)

    def _base_mode_window(self, mode, check_date) -> Optional[Tuple[time, time]]:
        merchant = self.merchant_settings

        if merchant.per_day_mode_schedule_enabled:
            schedule = ModeSchedule.all_objects.filter(
                tenant=self.tenant,
                mode=mode,
                day_of_week=check_date.weekday(),
                is_active=True,
            ).first()
            if schedule is not None:
                return schedule.start_time, schedule.end_time
            # No row for this weekday: the global window still applies

        start, end = merchant.get_mode_window(mode)
        if start is None or end is None:
            return None
        return start, end

    # ------------------------------------------------------------------
    # Assembly hook
    # ------------------------------------------------------------------

    def check(self, mode, check_date, check_time):
        """
        Raise when the store or the mode is unavailable at the target time.

        Raises:
            StoreClosedError
            ModeUnavailableError
        """
        check_date = self.parse_date(check_date)
        check_time = self.parse_time(check_time)
        special = self.get_special_hour(check_date)

        store = self.is_store_open(check_date, check_time, special_hour=special)
        if not store.is_open:
            raise StoreClosedError(
                f"Store is closed on {check_date.isoformat()} at {check_time:%H:%M} ({store.reason})"
            )

        mode_status = self.is_mode_available(mode, check_date, check_time, special_hour=special)
        if not mode_status.is_available:
            raise ModeUnavailableError(mode_status.reason[:1].upper() + mode_status.reason[1:])

    def get_special_hour(self, check_date):
        """Special-hour row for a date, or None."""
        return SpecialHours.all_objects.filter(
            tenant=self.tenant, date=self.parse_date(check_date)
        ).first()

    def _resolve_special_hour(self, check_date, special_hour):
        if special_hour is not UNSET:
            return special_hour
        return self.get_special_hour(check_date)

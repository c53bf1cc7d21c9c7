"""
Customer-facing wait time estimates.

The base preparation time per (merchant, order type) is the median of recent
placed-to-ready durations. Computing it scans up to 60 orders, so it is kept
in a Django cache alias (``prep_estimates``) for a short TTL; the estimate
itself (queue position, elapsed time) is always computed fresh.
"""
import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime
from statistics import median
from typing import Optional

from django.conf import settings
from django.core.cache import caches
from django.utils import timezone

from orders.models import Order
from settings.config import get_merchant_settings, get_merchant_timezone

logger = logging.getLogger(__name__)

DEFAULT_PREP_MINUTES = 20
MAX_ESTIMATE_MINUTES = 60
SAMPLE_SIZE = 60
MIN_SAMPLES = 5


def clamp(value, low, high):
    return max(low, min(high, value))


def round_half_up(value):
    """Round to the nearest integer, halves towards +infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def minutes_between(start, end):
    return (end - start).total_seconds() / 60


@dataclass(frozen=True)
class WaitTimeEstimate:
    min_minutes: int
    max_minutes: int
    capped_at_60: bool
    queue_ahead: int
    queue_position: Optional[int]
    base_prep_minutes: Optional[int]
    status: str
    is_scheduled: bool = False

    def to_dict(self):
        return asdict(self)


class PrepTimeEstimator:
    """
    Args:
        cache: Django cache used for base prep minutes (default ``caches['prep_estimates']``)
        ttl: seconds a base prep value stays cached
        clock: returns the current aware datetime
    """

    def __init__(self, cache=None, ttl=None, clock=timezone.now):
        self.cache = cache if cache is not None else caches['prep_estimates']
        self.ttl = ttl if ttl is not None else getattr(settings, 'PREP_ESTIMATE_CACHE_TTL', 120)
        self.clock = clock

    @staticmethod
    def cache_key(tenant_id, order_type):
        return f"prep:{tenant_id}:{order_type}"

    def compute_base_prep_minutes(self, tenant, order_type) -> int:
        """
        Median placed-to-ready minutes over the most recent completed orders.

        Samples outside 2-120 minutes are treated as bad data. Fewer than
        five usable samples falls back to the default.
        """
        recent = (
            Order.all_objects
            .filter(tenant=tenant, order_type=order_type, status=Order.OrderStatus.COMPLETED)
            .exclude(ready_at__isnull=True, completed_at__isnull=True)
            .order_by('-placed_at')
            .values_list('placed_at', 'ready_at', 'completed_at')[:SAMPLE_SIZE]
        )

        samples = []
        for placed_at, ready_at, completed_at in recent:
            end = ready_at or completed_at
            minutes = minutes_between(placed_at, end)
            if 2 <= minutes <= 120:
                samples.append(minutes)

        if len(samples) >= MIN_SAMPLES:
            return clamp(round_half_up(median(samples)), 5, MAX_ESTIMATE_MINUTES)
        return DEFAULT_PREP_MINUTES

    def base_prep_minutes(self, tenant, order_type) -> int:
        key = self.cache_key(tenant.id, order_type)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        value = self.compute_base_prep_minutes(tenant, order_type)
        self.cache.set(key, value, self.ttl)
        logger.debug(f"Cached base prep {value}m for {key}")
        return value

    @staticmethod
    def queue_ahead(order) -> int:
        return Order.all_objects.filter(
            tenant_id=order.tenant_id,
            order_type=order.order_type,
            status__in=Order.ACTIVE_STATUSES,
            placed_at__lt=order.placed_at,
        ).count()

    def _scheduled_at(self, order) -> Optional[datetime]:
        if not (order.is_scheduled and order.scheduled_date and order.scheduled_time):
            return None
        tz = get_merchant_timezone(get_merchant_settings(order.tenant))
        return tz.localize(datetime.combine(order.scheduled_date, order.scheduled_time))

    def estimate(self, order) -> WaitTimeEstimate:
        status = order.status
        if status in Order.FINAL_STATUSES:
            return WaitTimeEstimate(
                min_minutes=0, max_minutes=0, capped_at_60=False,
                queue_ahead=0, queue_position=None, base_prep_minutes=None,
                status=status,
            )

        base = self.base_prep_minutes(order.tenant, order.order_type)
        now = self.clock()
        waiting = status in (Order.OrderStatus.PENDING, Order.OrderStatus.ACCEPTED)

        ahead = self.queue_ahead(order) if waiting else 0
        position = ahead + 1 if waiting else None

        # Scheduled orders centre on the scheduled time, ignoring time already waited
        scheduled_at = self._scheduled_at(order)
        if scheduled_at is not None and scheduled_at > now and waiting:
            until = clamp(round_half_up(minutes_between(now, scheduled_at)), 0, MAX_ESTIMATE_MINUTES)
            slack = clamp(round_half_up(base * 0.25), 2, 15)
            min_minutes = clamp(until - slack, 0, MAX_ESTIMATE_MINUTES)
            max_minutes = clamp(until + slack, min_minutes, MAX_ESTIMATE_MINUTES)
            return WaitTimeEstimate(
                min_minutes=min_minutes, max_minutes=max_minutes,
                capped_at_60=max_minutes >= MAX_ESTIMATE_MINUTES,
                queue_ahead=0, queue_position=None, base_prep_minutes=base,
                status=status, is_scheduled=True,
            )

        if status == Order.OrderStatus.PENDING:
            multiplier = ahead + 1
        elif status == Order.OrderStatus.ACCEPTED:
            multiplier = max(1, math.ceil((ahead + 1) * 0.7))
        else:
            multiplier = 1

        total = clamp(round_half_up(base * multiplier), 5, MAX_ESTIMATE_MINUTES)

        # IN_PROGRESS has no start timestamp; the last update is the best proxy
        started = order.updated_at if status == Order.OrderStatus.IN_PROGRESS else order.placed_at
        elapsed = max(0, minutes_between(started, now))
        remaining = clamp(round_half_up(total - elapsed), 0, MAX_ESTIMATE_MINUTES)

        if remaining <= 0:
            return WaitTimeEstimate(
                min_minutes=0, max_minutes=0,
                capped_at_60=total >= MAX_ESTIMATE_MINUTES,
                queue_ahead=ahead, queue_position=position, base_prep_minutes=base,
                status=status,
            )

        min_minutes = clamp(round_half_up(remaining * 0.75), 1, MAX_ESTIMATE_MINUTES)
        max_minutes = clamp(round_half_up(remaining * 1.25), min_minutes, MAX_ESTIMATE_MINUTES)
        return WaitTimeEstimate(
            min_minutes=min_minutes, max_minutes=max_minutes,
            capped_at_60=max_minutes >= MAX_ESTIMATE_MINUTES,
            queue_ahead=ahead, queue_position=position, base_prep_minutes=base,
            status=status,
        )

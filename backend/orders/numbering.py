"""
Short, human-friendly order numbers.

Numbers are four characters from ``A-Z0-9`` (``7Q2X``), optionally prefixed
with the merchant code (``WKH-7Q2X``). They only need to be unique within a
merchant's business day, which keeps them short enough to call out at the
counter. The database constraint on (tenant, business_date, order_number)
is the final word; the assembler retries when two writers pick the same
code concurrently.
"""
import logging
import random
import string
import time
from datetime import timezone as dt_timezone

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 4
BASE36 = string.digits + string.ascii_uppercase


def business_date_for(moment, tz):
    """Merchant-local calendar day for an aware datetime."""
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment, dt_timezone.utc)
    return moment.astimezone(tz).date()


def to_base36(number):
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36[remainder])
    return ''.join(reversed(digits))


class OrderNumberGenerator:
    """
    Args:
        rng: ``random.Random``-like object (``choice``); seeded in tests
        clock_ms: returns the current epoch time in milliseconds, for the fallback
        max_attempts: random codes tried before falling back
    """

    def __init__(self, rng=None, clock_ms=None, max_attempts=None):
        self.rng = rng or random.SystemRandom()
        self.clock_ms = clock_ms or (lambda: int(time.time() * 1000))
        self.max_attempts = max_attempts or getattr(settings, 'ORDER_NUMBER_MAX_ATTEMPTS', 10)

    def _random_code(self):
        return ''.join(self.rng.choice(ALPHABET) for _ in range(CODE_LENGTH))

    @staticmethod
    def _with_prefix(code, prefix):
        return f"{prefix.upper()}-{code}" if prefix else code

    def _is_taken(self, tenant, business_date, number):
        from .models import Order
        return Order.all_objects.filter(
            tenant=tenant, business_date=business_date, order_number=number
        ).exists()

    def fallback(self, prefix=None):
        """Last six base36 digits of the epoch milliseconds."""
        return self._with_prefix(to_base36(self.clock_ms())[-6:], prefix)

    def generate(self, tenant, business_date, prefix=None):
        for _ in range(self.max_attempts):
            number = self._with_prefix(self._random_code(), prefix)
            if not self._is_taken(tenant, business_date, number):
                return number

        number = self.fallback(prefix)
        logger.warning(
            f"No free order number for merchant {tenant.code} on {business_date} after "
            f"{self.max_attempts} attempts; using fallback {number}"
        )
        return number

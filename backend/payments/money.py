"""
Monetary precision helpers.

Every amount stored on an order is a ``Decimal`` with two places. Fee
components are rounded independently before they are summed, and anything
that has to be split (group-order bill shares) is split in integer minor
units so the parts add up to the whole exactly.

Rounding is half away from zero (``ROUND_HALF_UP`` on Decimals), so
``round2("2.345") == Decimal("2.35")``.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Union

Number = Union[Decimal, str, int, float]

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(amount: Number) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        # Convert float to string first to avoid binary precision artifacts
        amount = str(amount)
    return Decimal(amount)


def round2(amount: Number) -> Decimal:
    """
    Round to 2 decimal places, halves away from zero.

    Examples:
        >>> round2("10.125")
        Decimal('10.13')
        >>> round2(1.6)
        Decimal('1.60')
    """
    return to_decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def percentage_of(amount: Number, percentage: Number) -> Decimal:
    """``round2(amount * percentage / 100)``"""
    return round2(to_decimal(amount) * to_decimal(percentage) / Decimal("100"))


def to_minor(amount: Number) -> int:
    """
    Convert to minor units (cents) after rounding.

    Examples:
        >>> to_minor("10.127")
        1013
    """
    return int((round2(amount) * 100).to_integral_value())


def from_minor(minor: int) -> Decimal:
    """
    Examples:
        >>> from_minor(1013)
        Decimal('10.13')
    """
    return (Decimal(minor) / 100).quantize(TWO_PLACES)


def allocate_minor(weights: List[int], total_minor: int) -> List[int]:
    """
    Allocate ``total_minor`` across items proportionally by ``weights``.

    Largest-remainder method in integer arithmetic:

    1. every item gets ``floor(weight * total / total_weight)``
    2. the cents left over go one each to the items with the largest
       remainders, ties broken by position

    Guarantees ``sum(result) == total_minor`` and the same output for the
    same input.

    Examples:
        >>> allocate_minor([100, 100, 100], 100)
        [34, 33, 33]
        >>> allocate_minor([6000, 4000], 1000)
        [600, 400]
    """
    total_weight = sum(weights)
    if total_weight <= 0 or total_minor == 0:
        return [0] * len(weights)

    floors = []
    remainders = []
    for index, weight in enumerate(weights):
        quotient, remainder = divmod(weight * total_minor, total_weight)
        floors.append(quotient)
        remainders.append((remainder, index))

    leftover = total_minor - sum(floors)
    remainders.sort(key=lambda pair: (-pair[0], pair[1]))

    result = floors[:]
    for _, index in remainders[:leftover]:
        result[index] += 1
    return result


def allocate(weights: List[Number], total: Number) -> List[Decimal]:
    """Decimal front-end for ``allocate_minor``; weights are money amounts."""
    shares = allocate_minor([to_minor(weight) for weight in weights], to_minor(total))
    return [from_minor(share) for share in shares]


def validate_minor_sum(components: List[int], expected_total: int, context: str = "") -> None:
    """
    Raise ValueError unless the components add up to ``expected_total``.

    Examples:
        >>> validate_minor_sum([50, 30, 21], 100)
        Traceback (most recent call last):
        ValueError: Minor unit sum mismatch: expected 100, got 101 (diff: +1)
    """
    actual = sum(components)
    diff = actual - expected_total
    if diff:
        sign = "+" if diff > 0 else ""
        raise ValueError(
            f"Minor unit sum mismatch{' ' + context if context else ''}: "
            f"expected {expected_total}, got {actual} (diff: {sign}{diff})"
        )

"""
Output field conventions shared by every API serializer.

Identifiers are always rendered as strings (UUIDs and integer ids alike) and
money as JSON numbers rounded to two places. Totals are still computed and
stored as Decimals; the float only exists in the response body.
"""
from rest_framework import serializers

from payments.money import round2


class IdField(serializers.Field):
    """Read-only id rendered as a string; None stays None."""

    def __init__(self, **kwargs):
        kwargs['read_only'] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        if value is None:
            return None
        return str(getattr(value, 'pk', value))


class MoneyField(serializers.Field):
    """Read-only Decimal rendered as a float with two decimal places."""

    def __init__(self, **kwargs):
        kwargs['read_only'] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        if value is None:
            return None
        return float(round2(value))

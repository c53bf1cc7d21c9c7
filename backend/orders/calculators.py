"""
Order fee calculation.

``FeeCalculator`` turns a subtotal and a merchant's fee configuration into
the fee components stored on an order. Every component is rounded to two
places on its own before the total is summed, so

    total == subtotal + tax + service_charge + packaging_fee + delivery_fee

holds exactly on the stored values.

Usage:
    from orders.calculators import FeeCalculator
    fees = FeeCalculator.compute(Decimal("16.00"), merchant_settings, "DELIVERY",
                                 delivery_fee=Decimal("4.00"))
    fees.total  # Decimal('21.60') with 10% tax
"""

from dataclasses import dataclass
from decimal import Decimal

from payments.money import ZERO, percentage_of, round2
from settings.models import FulfillmentMode


@dataclass(frozen=True)
class FeeBreakdown:
    subtotal: Decimal
    tax: Decimal
    service_charge: Decimal
    packaging_fee: Decimal
    delivery_fee: Decimal
    total: Decimal

    def components(self):
        """Fee components in the order they are split across group-order participants."""
        return {
            'tax': self.tax,
            'service_charge': self.service_charge,
            'packaging_fee': self.packaging_fee,
            'delivery_fee': self.delivery_fee,
        }


class FeeCalculator:

    @staticmethod
    def compute(subtotal, merchant_settings, order_type, delivery_fee=ZERO) -> FeeBreakdown:
        """
        Args:
            subtotal: Sum of line subtotals
            merchant_settings: ``MerchantSettings`` row (read only)
            order_type: ``FulfillmentMode`` value
            delivery_fee: Caller-supplied fee, only charged on DELIVERY orders

        Returns:
            FeeBreakdown
        """
        subtotal = round2(subtotal)

        tax = ZERO
        if merchant_settings.enable_tax:
            tax = percentage_of(subtotal, merchant_settings.tax_percentage)

        service_charge = ZERO
        if merchant_settings.enable_service_charge:
            service_charge = percentage_of(subtotal, merchant_settings.service_charge_percentage)

        packaging_fee = ZERO
        if order_type == FulfillmentMode.TAKEAWAY and merchant_settings.enable_packaging_fee:
            packaging_fee = round2(merchant_settings.packaging_fee_amount)

        delivery = ZERO
        if order_type == FulfillmentMode.DELIVERY and delivery_fee:
            delivery = round2(delivery_fee)

        total = subtotal + tax + service_charge + packaging_fee + delivery
        return FeeBreakdown(
            subtotal=subtotal,
            tax=tax,
            service_charge=service_charge,
            packaging_fee=packaging_fee,
            delivery_fee=delivery,
            total=total,
        )

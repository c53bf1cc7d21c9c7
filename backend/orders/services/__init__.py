"""
Orders services package.

- OrderAssembler: the single transactional pipeline every order goes through
- PosOrderService: staff orders from the point of sale
- PublicOrderService: customer orders from the public storefront
- PrepTimeEstimator: wait time estimates for placed orders

Reservation acceptance and group-order submission live in their own apps
and also go through OrderAssembler.
"""

from .assembly_service import (
    AssemblyRequest,
    AssemblyResult,
    OrderAssembler,
    PricedAddon,
    PricedLine,
)
from .pos_service import PosOrderService
from .public_order_service import PublicOrderService
from .wait_time_service import PrepTimeEstimator, WaitTimeEstimate

__all__ = [
    # Assembly
    'AssemblyRequest',
    'AssemblyResult',
    'OrderAssembler',
    'PricedAddon',
    'PricedLine',
    # Adapters
    'PosOrderService',
    'PublicOrderService',
    # Wait time
    'PrepTimeEstimator',
    'WaitTimeEstimate',
]

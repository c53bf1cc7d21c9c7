"""
Orders views package.
"""

from .pos_views import PosOrderCreateView
from .public_views import OrderWaitTimeView, PublicOrderCreateView

__all__ = [
    'PosOrderCreateView',
    'PublicOrderCreateView',
    'OrderWaitTimeView',
]

"""
Core backend base components.

API views in every app subclass one of these so tenant context and
authentication are handled the same way everywhere.
"""

from .views import StaffAPIView, PublicAPIView
from .serializers import IdField, MoneyField

__all__ = [
    'StaffAPIView',
    'PublicAPIView',
    'IdField',
    'MoneyField',
]

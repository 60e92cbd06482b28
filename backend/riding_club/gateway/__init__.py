"""
Persistence gateway: remote store, local fallback store, and the tiered
wrapper that chooses between them.
"""

from .base import BookingGateway
from .local import LocalStore
from .remote import SqlStore
from .tiered import TieredGateway

__all__ = ["BookingGateway", "LocalStore", "SqlStore", "TieredGateway"]

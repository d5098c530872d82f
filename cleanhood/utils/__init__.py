"""Utilities package"""

from .pagination import PaginationParams
from .dependencies import get_pagination_params, get_notifier, ensure_success, ensure_self_or_admin

__all__ = [
    "PaginationParams",
    "get_pagination_params",
    "get_notifier",
    "ensure_success",
    "ensure_self_or_admin",
]

"""
Central re-exports for the kibctl data models.
"""
from .saved_object import DashboardRecord

__all__ = [
    "DashboardRecord",
]

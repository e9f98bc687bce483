"""
Dashboard views
"""

from .manager import DashboardManager

__all__ = ["DashboardManager"]

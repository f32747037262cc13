"""
Dashboard module package exports.

- DashboardController: home page with monthly revenue and the last
  seven days of sales.
"""

from .controller import DashboardController

__all__ = ["DashboardController"]

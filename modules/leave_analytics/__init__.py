"""
Leave Analytics Module.

Leave record store, record table views and the analytics aggregations
(monthly trend, overall distribution, per-employee summaries).
"""

from modules.leave_analytics.leave_analytics_module import LeaveAnalyticsModule, create_module

__all__ = ["LeaveAnalyticsModule", "create_module"]

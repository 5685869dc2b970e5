# services package

from .reports import rent_roll_report, arrears_report, vacancy_report
from .dashboard import dashboard_stats, property_stats, property_summaries, monthly_income_trend
from .accounting import tenant_balance, cumulative_arrears

__all__ = [
    "rent_roll_report", "arrears_report", "vacancy_report",
    "dashboard_stats", "property_stats", "property_summaries", "monthly_income_trend",
    "tenant_balance", "cumulative_arrears",
]

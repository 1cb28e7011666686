"""Domain models, filters and report aggregation for the live-ops console."""

from .aggregation import (
    compute_category_totals,
    compute_cross_metric_report,
    compute_monthly_series,
    product_options,
    selectable_stores,
    summarize_cross_report,
)
from .filters import (
    FilterParams,
    filter_cross_report,
    filter_daily_reports,
    filter_expenses,
    filter_records,
)
from .models import (
    ALL_STORES_ID,
    COST_CATEGORIES,
    UNKNOWN_PRODUCT,
    AggregatedReportRow,
    CategoryTotals,
    CrossReportMetrics,
    DailyTeamReport,
    ExpenseCategory,
    ExpenseLineItem,
    ExpenseRecord,
    LiveReport,
    MonthBucket,
    Personnel,
    ProductLineItem,
    Store,
    VideoMetric,
)
from .normalizer import normalize_expense, total_quantity

__all__ = [
    "ALL_STORES_ID",
    "COST_CATEGORIES",
    "UNKNOWN_PRODUCT",
    "AggregatedReportRow",
    "CategoryTotals",
    "CrossReportMetrics",
    "DailyTeamReport",
    "ExpenseCategory",
    "ExpenseLineItem",
    "ExpenseRecord",
    "FilterParams",
    "LiveReport",
    "MonthBucket",
    "Personnel",
    "ProductLineItem",
    "Store",
    "VideoMetric",
    "compute_category_totals",
    "compute_cross_metric_report",
    "compute_monthly_series",
    "filter_cross_report",
    "filter_daily_reports",
    "filter_expenses",
    "filter_records",
    "normalize_expense",
    "product_options",
    "selectable_stores",
    "summarize_cross_report",
    "total_quantity",
]

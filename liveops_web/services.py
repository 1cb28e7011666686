"""Business logic helpers turning record collections into report payloads."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from liveops_common import (
    COST_CATEGORIES,
    AggregatedReportRow,
    DailyTeamReport,
    ExpenseCategory,
    ExpenseRecord,
    FilterParams,
    LiveReport,
    Store,
    VideoMetric,
    compute_category_totals,
    compute_cross_metric_report,
    compute_monthly_series,
    filter_cross_report,
    filter_daily_reports,
    filter_expenses,
    normalize_expense,
    product_options,
    selectable_stores,
    summarize_cross_report,
    total_quantity,
)
from liveops_common.models import PERIOD_YEAR, UNKNOWN_PRODUCT_LABEL

EXPENSE_FACETS = ("period_type",)
TEAM_REPORT_FACETS = ("stores", "products")


def categories_for_select() -> Iterable[ExpenseCategory]:
    """Return categories presented in the expense form."""

    return COST_CATEGORIES


def serialize_expense(expense: ExpenseRecord) -> Dict[str, Any]:
    """Return a JSON-ready expense including its normalized breakdown."""

    normalized = normalize_expense(expense)
    payload = asdict(expense)
    payload["date"] = expense.date.isoformat()
    payload["by_category"] = normalized.by_category
    payload["total"] = normalized.total
    return payload


def build_expense_dashboard(
    expenses: Sequence[ExpenseRecord], params: FilterParams
) -> Dict[str, Any]:
    """Filter ``expenses`` and compute the totals cards and monthly chart."""

    filtered = filter_expenses(expenses, params)
    totals = compute_category_totals(filtered)
    monthly = compute_monthly_series(filtered)
    return {
        "expenses": [serialize_expense(expense) for expense in filtered],
        "totals": {"by_category": totals.by_category, "total": totals.grand_total},
        "monthly": [
            {
                "key": bucket.key,
                "month": bucket.label,
                "by_category": bucket.by_category,
                "total": bucket.total,
            }
            for bucket in monthly
        ],
    }


def serialize_report_row(row: AggregatedReportRow) -> Dict[str, Any]:
    payload = asdict(row)
    payload["id"] = row.id
    payload["date"] = row.date.isoformat()
    return payload


def serialize_daily_report(
    report: DailyTeamReport, store_names: Mapping[str, str]
) -> Dict[str, Any]:
    payload = asdict(report)
    payload["date"] = report.date.isoformat()
    payload["store_name"] = store_names.get(report.store_id, report.store_id)
    payload["total_quantity"] = total_quantity(report)
    return payload


def filtered_cross_report(
    videos: Sequence[VideoMetric],
    live_reports: Sequence[LiveReport],
    stores: Sequence[Store],
    params: FilterParams,
    *,
    distinct_koc: bool = False,
) -> List[AggregatedReportRow]:
    rows = compute_cross_metric_report(
        videos, live_reports, stores, distinct_koc=distinct_koc
    )
    return filter_cross_report(rows, params)


def build_team_dashboard(
    *,
    videos: Sequence[VideoMetric],
    live_reports: Sequence[LiveReport],
    stores: Sequence[Store],
    daily_reports: Sequence[DailyTeamReport],
    params: FilterParams,
    distinct_koc: bool = False,
) -> Dict[str, Any]:
    """Aggregate the metric feeds and filter both report tables."""

    rows = filtered_cross_report(
        videos, live_reports, stores, params, distinct_koc=distinct_koc
    )
    pickable = selectable_stores(stores)
    store_names = {store.id: store.name for store in pickable}
    daily = filter_daily_reports(daily_reports, params, pickable)
    return {
        "rows": [serialize_report_row(row) for row in rows],
        "metrics": asdict(summarize_cross_report(rows)),
        "daily_reports": [serialize_daily_report(report, store_names) for report in daily],
        "products": product_options(daily_reports, videos),
        "stores": [asdict(store) for store in pickable],
    }


def expense_export_rows(expenses: Iterable[ExpenseRecord]) -> List[Dict[str, Any]]:
    """Flatten expenses into bilingual, field-labelled spreadsheet rows."""

    rows = []
    for expense in expenses:
        normalized = normalize_expense(expense)
        row: Dict[str, Any] = {
            "Ngày (日期)": expense.date.isoformat(),
            "Hạch toán (会计)": expense.accounting,
            "Kỳ hạch toán (会计期间)": (
                "THEO NĂM" if expense.period_type == PERIOD_YEAR else "THEO THÁNG"
            ),
        }
        for category in COST_CATEGORIES:
            row[category.label] = normalized.by_category[category.code]
        row["DUYỆT GẤP (紧急审批)"] = "Có" if expense.is_urgent else "Không"
        row["TỔNG CHI PHÍ (总成本)"] = normalized.total
        row["Người chi (付款人)"] = expense.payer
        row["Người nhận (收款人)"] = expense.receiver
        row["Mô tả (描述)"] = expense.description
        rows.append(row)
    return rows


def cross_report_export_rows(
    rows: Iterable[AggregatedReportRow],
) -> List[Dict[str, Any]]:
    """Flatten cross-report rows into bilingual, field-labelled rows."""

    return [
        {
            "Ngày tháng (日期)": row.date.isoformat(),
            "Sản phẩm (产品)": row.product_name or row.product_id or UNKNOWN_PRODUCT_LABEL,
            "Cửa hàng (店铺)": row.store_name or row.store_id,
            "TỔNG GMV (GMV 总额)": row.total_gmv,
            "GMV VIDEO (视频 GMV)": row.video_gmv,
            "SỐ LƯỢNG ĐƠN VIDEO (订单数量(视频))": row.video_orders,
            "GMV LIVESTREAM (直播 GMV)": row.livestream_gmv,
            "SỐ LƯỢNG ĐƠN LIVESTREAM (订单数量(直播))": row.livestream_orders,
            "SỐ LƯỢNG KOC HỢP TÁC VIDEO (mới) (合作视频的 KOC 数量(新增))": (
                row.new_koc_video_count
            ),
            "SỐ LƯỢNG KOC HỢP TÁC LIVESTREAM (mới) (合作直播的 KOC 数量(新增))": (
                row.new_koc_livestream_count
            ),
        }
        for row in rows
    ]


def render_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """Serialize labelled rows to CSV text, header taken from the first row."""

    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()))
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()

"""Category totals, monthly series and the video/livestream cross report.

Every function here is a pure reduction over an already filtered
collection: inputs are not modified and each call builds fresh output.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .models import (
    ALL_STORES_ID,
    UNKNOWN_PRODUCT,
    UNKNOWN_PRODUCT_LABEL,
    AggregatedReportRow,
    CategoryTotals,
    CrossReportMetrics,
    DailyTeamReport,
    ExpenseRecord,
    LiveReport,
    MonthBucket,
    Store,
    VideoMetric,
)
from .normalizer import empty_buckets, normalize_expense

RowKey = Tuple[date, str, str]


def compute_category_totals(expenses: Iterable[ExpenseRecord]) -> CategoryTotals:
    """Sum every cost category and the grand total across ``expenses``."""

    totals = CategoryTotals(by_category=empty_buckets())
    for expense in expenses:
        normalized = normalize_expense(expense)
        for code, amount in normalized.by_category.items():
            totals.by_category[code] += amount
        totals.grand_total += normalized.total
    return totals


def compute_monthly_series(expenses: Iterable[ExpenseRecord]) -> List[MonthBucket]:
    """Group ``expenses`` by calendar month, oldest month first.

    Buckets are ordered numerically by ``(year, month)``; the ``MM/YYYY``
    label is only for display.
    """

    buckets: Dict[Tuple[int, int], MonthBucket] = {}
    for expense in expenses:
        key = (expense.date.year, expense.date.month)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = MonthBucket(year=key[0], month=key[1], by_category=empty_buckets())
            buckets[key] = bucket
        normalized = normalize_expense(expense)
        for code, amount in normalized.by_category.items():
            bucket.by_category[code] += amount
        bucket.total += normalized.total
    return [buckets[key] for key in sorted(buckets)]


def _calendar_day(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return date.fromisoformat(value.split("T")[0])
    return value


def compute_cross_metric_report(
    videos: Iterable[VideoMetric],
    live_reports: Iterable[LiveReport],
    stores: Iterable[Store] = (),
    *,
    distinct_koc: bool = False,
) -> List[AggregatedReportRow]:
    """Join video and livestream results by (date, product, store).

    Live reports have no product dimension and always land on the
    :data:`UNKNOWN_PRODUCT` key for their channel. Records pointing at the
    :data:`ALL_STORES_ID` sentinel are skipped.

    By default the KOC columns are a 0/1 presence flag per row. With
    ``distinct_koc`` they count distinct person-in-charge / host names.
    """

    store_names = {store.id: store.name for store in stores if store.id != ALL_STORES_ID}
    rows: Dict[RowKey, AggregatedReportRow] = {}
    video_kocs: Dict[RowKey, Set[str]] = {}
    live_kocs: Dict[RowKey, Set[str]] = {}

    def row_for(day: date, product_id: Optional[str], store_id: str) -> RowKey:
        product = product_id or UNKNOWN_PRODUCT
        key = (day, product, store_id)
        if key not in rows:
            rows[key] = AggregatedReportRow(
                date=day,
                product_id=product,
                product_name=product_id or UNKNOWN_PRODUCT_LABEL,
                store_id=store_id,
                store_name=store_names.get(store_id, store_id),
            )
        return key

    for video in videos:
        if video.store_id == ALL_STORES_ID:
            continue
        key = row_for(_calendar_day(video.upload_date), video.product_id, video.store_id)
        row = rows[key]
        row.video_gmv += video.sales or 0
        row.video_orders += video.orders or 0
        if video.person_in_charge:
            video_kocs.setdefault(key, set()).add(video.person_in_charge)

    for live in live_reports:
        if live.channel_id == ALL_STORES_ID:
            continue
        key = row_for(_calendar_day(live.date), None, live.channel_id)
        row = rows[key]
        row.livestream_gmv += live.gmv or 0
        row.livestream_orders += live.orders or 0
        if live.host_name:
            live_kocs.setdefault(key, set()).add(live.host_name)

    for key, row in rows.items():
        if distinct_koc:
            row.new_koc_video_count = len(video_kocs.get(key, ()))
            row.new_koc_livestream_count = len(live_kocs.get(key, ()))
        else:
            row.new_koc_video_count = 1 if key in video_kocs else 0
            row.new_koc_livestream_count = 1 if key in live_kocs else 0
        row.total_gmv = row.video_gmv + row.livestream_gmv
    return list(rows.values())


def summarize_cross_report(rows: Iterable[AggregatedReportRow]) -> CrossReportMetrics:
    """Sum the headline metrics shown above the cross report."""

    metrics = CrossReportMetrics()
    for row in rows:
        metrics.total_gmv += row.total_gmv
        metrics.video_gmv += row.video_gmv
        metrics.video_orders += row.video_orders
        metrics.livestream_gmv += row.livestream_gmv
        metrics.livestream_orders += row.livestream_orders
        metrics.new_koc_video_count += row.new_koc_video_count
        metrics.new_koc_livestream_count += row.new_koc_livestream_count
    return metrics


def product_options(
    daily_reports: Iterable[DailyTeamReport], videos: Iterable[VideoMetric]
) -> List[str]:
    """Distinct product names from daily reports and videos, first seen first."""

    seen: Dict[str, None] = {}
    for report in daily_reports:
        for item in report.products:
            if item.product_name:
                seen.setdefault(item.product_name, None)
    for video in videos:
        if video.product_id:
            seen.setdefault(video.product_id, None)
    return list(seen)


def selectable_stores(stores: Iterable[Store]) -> List[Store]:
    """Stores offered in pickers; the ``"all"`` sentinel is never one of them."""

    return [store for store in stores if store.id != ALL_STORES_ID]

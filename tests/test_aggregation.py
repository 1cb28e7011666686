"""Unit tests for category totals, monthly series and the cross report."""

from __future__ import annotations

from datetime import date, datetime

from liveops_common import (
    DailyTeamReport,
    ExpenseLineItem,
    ExpenseRecord,
    LiveReport,
    ProductLineItem,
    Store,
    VideoMetric,
    compute_category_totals,
    compute_cross_metric_report,
    compute_monthly_series,
    product_options,
    selectable_stores,
    summarize_cross_report,
)


def test_category_totals_mix_itemized_and_legacy_records():
    itemized = ExpenseRecord(
        date=date(2024, 3, 1),
        line_items=[ExpenseLineItem("LƯƠNG", 100000), ExpenseLineItem("BẾP", 50000)],
    )
    legacy = ExpenseRecord(date=date(2024, 3, 2), salary_cost=20000)

    totals = compute_category_totals([itemized, legacy])

    assert totals.by_category == {
        "LƯƠNG": 120000,
        "VĂN PHÒNG": 0,
        "BẾP": 50000,
        "CSKH": 0,
        "KHO": 0,
        "KHÁC": 0,
    }
    assert totals.grand_total == 170000


def test_category_totals_of_nothing_are_zero():
    totals = compute_category_totals([])
    assert totals.grand_total == 0
    assert set(totals.by_category.values()) == {0}


def test_monthly_series_orders_across_year_boundary():
    expenses = [
        ExpenseRecord(date=date(2024, 2, 3), line_items=[ExpenseLineItem("KHO", 10)]),
        ExpenseRecord(date=date(2023, 12, 30), office_cost=5),
        ExpenseRecord(date=date(2024, 1, 15), line_items=[ExpenseLineItem("CSKH", 7)]),
        ExpenseRecord(date=date(2024, 2, 20), line_items=[ExpenseLineItem("???", 1)]),
    ]

    series = compute_monthly_series(expenses)

    assert [bucket.label for bucket in series] == ["12/2023", "01/2024", "02/2024"]
    assert [bucket.key for bucket in series] == ["2023-12", "2024-01", "2024-02"]
    february = series[-1]
    assert february.by_category["KHO"] == 10
    assert february.by_category["KHÁC"] == 1
    assert february.total == 11
    assert series[0].by_category["VĂN PHÒNG"] == 5


def test_monthly_series_sorts_numerically_not_by_label():
    expenses = [
        ExpenseRecord(date=date(2024, 11, 1), other_cost=1),
        ExpenseRecord(date=date(2024, 2, 1), other_cost=1),
    ]
    assert [b.label for b in compute_monthly_series(expenses)] == ["02/2024", "11/2024"]


def test_video_and_live_rows_stay_separate_by_product():
    videos = [
        VideoMetric(
            upload_date=datetime(2024, 3, 5, 14, 30),
            product_id="P1",
            store_id="S1",
            person_in_charge="Hà",
            sales=500000,
            orders=3,
        )
    ]
    lives = [
        LiveReport(date=date(2024, 3, 5), channel_id="S1", host_name="Tú", gmv=200000, orders=1)
    ]

    rows = compute_cross_metric_report(videos, lives, [Store("S1", "Shop One")])

    assert len(rows) == 2
    by_product = {row.product_id: row for row in rows}
    video_row = by_product["P1"]
    live_row = by_product["unknown"]
    assert video_row.total_gmv == 500000
    assert video_row.video_orders == 3
    assert video_row.new_koc_video_count == 1
    assert video_row.store_name == "Shop One"
    assert live_row.total_gmv == 200000
    assert live_row.livestream_orders == 1
    assert live_row.new_koc_livestream_count == 1
    assert live_row.product_name == "Chưa xác định"
    assert live_row.id == "2024-03-05_unknown_S1"


def test_productless_video_merges_with_live_report():
    videos = [VideoMetric(upload_date=datetime(2024, 3, 5), store_id="S9", sales=100)]
    lives = [LiveReport(date=date(2024, 3, 5), channel_id="S9", gmv=50.5, orders=None)]

    rows = compute_cross_metric_report(videos, lives)

    assert len(rows) == 1
    row = rows[0]
    assert row.video_gmv == 100
    assert row.livestream_gmv == 50.5
    assert row.total_gmv == row.video_gmv + row.livestream_gmv
    assert row.livestream_orders == 0
    assert row.store_name == "S9"
    assert row.new_koc_video_count == 0
    assert row.new_koc_livestream_count == 0


def test_koc_indicator_is_flag_unless_distinct_requested():
    videos = [
        VideoMetric(upload_date=datetime(2024, 3, 5), store_id="S1", product_id="P1",
                    person_in_charge=name, sales=1)
        for name in ("An", "Bình", "An")
    ]

    flagged = compute_cross_metric_report(videos, [])
    assert flagged[0].new_koc_video_count == 1

    distinct = compute_cross_metric_report(videos, [], distinct_koc=True)
    assert distinct[0].new_koc_video_count == 2
    assert distinct[0].video_gmv == 3


def test_all_stores_sentinel_is_never_aggregated():
    videos = [VideoMetric(upload_date=datetime(2024, 3, 5), store_id="all", sales=10)]
    lives = [LiveReport(date=date(2024, 3, 5), channel_id="all", gmv=10)]
    assert compute_cross_metric_report(videos, lives, [Store("all", "Tất cả")]) == []


def test_summarize_cross_report_sums_every_column():
    videos = [
        VideoMetric(upload_date=datetime(2024, 3, 5), store_id="S1", product_id="P1",
                    person_in_charge="An", sales=100, orders=2),
        VideoMetric(upload_date=datetime(2024, 3, 6), store_id="S1", product_id="P1",
                    sales=40, orders=1),
    ]
    lives = [LiveReport(date=date(2024, 3, 5), channel_id="S1", host_name="Tú", gmv=60, orders=4)]
    metrics = summarize_cross_report(compute_cross_metric_report(videos, lives))
    assert metrics.total_gmv == 200
    assert metrics.video_gmv == 140
    assert metrics.video_orders == 3
    assert metrics.livestream_gmv == 60
    assert metrics.livestream_orders == 4
    assert metrics.new_koc_video_count == 1
    assert metrics.new_koc_livestream_count == 1


def test_product_options_keep_first_seen_order():
    reports = [
        DailyTeamReport(
            date=date(2024, 3, 5),
            store_id="S1",
            products=[ProductLineItem("Son", 1), ProductLineItem("", 2), ProductLineItem("Kem", 1)],
        )
    ]
    videos = [
        VideoMetric(upload_date=datetime(2024, 3, 5), store_id="S1", product_id="Kem"),
        VideoMetric(upload_date=datetime(2024, 3, 5), store_id="S1", product_id="P9"),
    ]
    assert product_options(reports, videos) == ["Son", "Kem", "P9"]


def test_selectable_stores_drop_sentinel():
    stores = [Store("all", "Tất cả"), Store("S1", "Shop One")]
    assert selectable_stores(stores) == [Store("S1", "Shop One")]

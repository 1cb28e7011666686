"""Unit tests for date, facet and search filtering."""

from __future__ import annotations

from datetime import date

import pytest

from liveops_common import (
    AggregatedReportRow,
    DailyTeamReport,
    ExpenseRecord,
    FilterParams,
    Store,
    filter_cross_report,
    filter_daily_reports,
    filter_expenses,
)
from liveops_common.filters import number_text


@pytest.fixture()
def expenses():
    return [
        ExpenseRecord(
            date=date(2024, 3, 10),
            description="Chi phí bếp tháng 3",
            payer="Lan",
            period_type="MONTH",
            id=1,
        ),
        ExpenseRecord(
            date=date(2024, 3, 31),
            receiver="Công ty Điện lực",
            accounting="TK-642",
            period_type="YEAR",
            id=2,
        ),
        ExpenseRecord(date=date(2024, 2, 28), payer="Minh", id=3),
    ]


def test_search_and_date_range_both_apply(expenses):
    params = FilterParams(
        date_from=date(2024, 3, 1), date_to=date(2024, 3, 31), search="bếp"
    )
    assert [expense.id for expense in filter_expenses(expenses, params)] == [1]

    outside = FilterParams(
        date_from=date(2024, 4, 1), date_to=date(2024, 4, 30), search="bếp"
    )
    assert filter_expenses(expenses, outside) == []


def test_upper_bound_is_inclusive(expenses):
    params = FilterParams(date_from=date(2024, 3, 1), date_to=date(2024, 3, 31))
    assert {expense.id for expense in filter_expenses(expenses, params)} == {1, 2}


def test_search_is_case_insensitive_over_text_fields(expenses):
    assert [e.id for e in filter_expenses(expenses, FilterParams(search="ĐIỆN"))] == [2]
    assert [e.id for e in filter_expenses(expenses, FilterParams(search="tk-642"))] == [2]
    assert [e.id for e in filter_expenses(expenses, FilterParams(search="2024-02"))] == [3]


def test_blank_search_imposes_no_restriction(expenses):
    assert len(filter_expenses(expenses, FilterParams(search="   "))) == 3


def test_search_keeps_surrounding_spaces(expenses):
    assert [e.id for e in filter_expenses(expenses, FilterParams(search=" bếp"))] == [1]
    assert filter_expenses(expenses, FilterParams(search="tháng 3 ")) == []


def test_results_are_newest_first(expenses):
    assert [e.id for e in filter_expenses(expenses, FilterParams())] == [2, 1, 3]


def test_empty_selection_means_unrestricted(expenses):
    unrestricted = filter_expenses(expenses, FilterParams())
    assert filter_expenses(expenses, FilterParams(selections={"period_type": []})) == unrestricted
    yearly = filter_expenses(expenses, FilterParams(selections={"period_type": ["YEAR"]}))
    assert [expense.id for expense in yearly] == [2]


def test_filter_is_idempotent(expenses):
    params = FilterParams(
        date_from=date(2024, 2, 1),
        date_to=date(2024, 3, 31),
        selections={"period_type": ["MONTH"]},
        search="a",
    )
    once = filter_expenses(expenses, params)
    assert filter_expenses(once, params) == once


def test_filter_does_not_mutate_input(expenses):
    original = list(expenses)
    filter_expenses(expenses, FilterParams(search="bếp"))
    assert expenses == original


def _row(day, product_id, product_name, store_id, store_name, video_gmv=0.0):
    return AggregatedReportRow(
        date=day,
        product_id=product_id,
        product_name=product_name,
        store_id=store_id,
        store_name=store_name,
        video_gmv=video_gmv,
        total_gmv=video_gmv,
    )


def test_cross_report_product_facet_matches_id_or_name():
    rows = [
        _row(date(2024, 3, 5), "P1", "P1", "S1", "Shop One", 500000),
        _row(date(2024, 3, 5), "unknown", "Chưa xác định", "S2", "Shop Two"),
    ]
    by_name = filter_cross_report(
        rows, FilterParams(selections={"products": ["Chưa xác định"]})
    )
    assert [row.store_id for row in by_name] == ["S2"]
    by_store = filter_cross_report(rows, FilterParams(selections={"stores": ["S1"]}))
    assert [row.product_id for row in by_store] == ["P1"]


def test_cross_report_search_matches_rendered_gmv():
    rows = [_row(date(2024, 3, 5), "P1", "P1", "S1", "Shop One", 500000)]
    assert filter_cross_report(rows, FilterParams(search="500000")) == rows
    assert filter_cross_report(rows, FilterParams(search="500000.0")) == []


def test_number_text_drops_integral_fraction():
    assert number_text(1500.0) == "1500"
    assert number_text(12.5) == "12.5"
    assert number_text(None) == "0"


def test_daily_reports_filter_by_store_and_store_name_search():
    stores = [Store("S1", "Kho Hà Nội"), Store("S2", "Kho Sài Gòn")]
    reports = [
        DailyTeamReport(date=date(2024, 3, 1), store_id="S1", shift="Ca 1", id=1),
        DailyTeamReport(date=date(2024, 3, 2), store_id="S2", account="acc-live", id=2),
        DailyTeamReport(date=date(2024, 3, 3), store_id="", id=3),
    ]
    selected = filter_daily_reports(
        reports, FilterParams(selections={"stores": ["S1", "S2"]}), stores
    )
    assert [report.id for report in selected] == [2, 1]

    by_name = filter_daily_reports(reports, FilterParams(search="sài gòn"), stores)
    assert [report.id for report in by_name] == [2]

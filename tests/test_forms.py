"""Unit tests for form and query parsing helpers."""

from __future__ import annotations

from datetime import date

from werkzeug.datastructures import MultiDict

from liveops_web.forms import (
    parse_daily_report_form,
    parse_expense_form,
    parse_filter_args,
)


def test_parse_expense_form_success():
    """A well-formed itemized expense passes validation."""

    result, errors = parse_expense_form(
        {
            "date": "2024-03-10",
            "line_items": [
                {"category": "BẾP", "amount": "1.250.000"},
                {"category": "KHO", "amount": 300000},
            ],
            "payer": "Lan",
            "description": "Chi phí bếp tháng 3",
            "is_urgent": "on",
        }
    )
    assert not errors
    assert result is not None
    assert [item.amount for item in result.line_items] == [1250000.0, 300000.0]
    assert result.period_type == "MONTH"
    assert result.period_value == "2024-03"
    assert result.is_urgent is True
    assert result.salary_cost is None


def test_parse_expense_form_requires_date():
    result, errors = parse_expense_form({})
    assert result is None
    assert any("Date" in error for error in errors)


def test_parse_expense_form_rejects_negative_amounts():
    result, errors = parse_expense_form(
        {
            "date": "2024-03-10",
            "line_items": [{"category": "BẾP", "amount": -5}],
            "salary_cost": "abc",
        }
    )
    assert result is None
    assert len(errors) == 2


def test_parse_expense_form_checks_period_value():
    result, errors = parse_expense_form(
        {"date": "2024-03-10", "period_type": "YEAR", "period_value": "2024-03"}
    )
    assert result is None
    assert errors == ["Yearly period must be YYYY."]

    result, errors = parse_expense_form(
        {"date": "2024-03-10", "period_type": "year", "period_value": "2024"}
    )
    assert not errors
    assert result.period_type == "YEAR"


def test_parse_expense_form_validates_attachment():
    _, errors = parse_expense_form(
        {"date": "2024-03-10", "attachment": "file:///etc/passwd"}
    )
    assert errors == ["Attachment must be an image or a link."]

    _, errors = parse_expense_form(
        {"date": "2024-03-10", "attachment": "data:image/png;base64," + "A" * 100},
        max_attachment_bytes=50,
    )
    assert len(errors) == 1


def test_parse_daily_report_form_success():
    result, errors = parse_daily_report_form(
        {
            "date": "2024-03-05",
            "store_id": "S1",
            "session": "chieu",
            "hours": "4",
            "salary": 250000,
            "products": [{"product_name": "Son", "quantity": "3"}],
        }
    )
    assert not errors
    assert result.session == "CHIEU"
    assert result.hours == 4.0
    assert result.products[0].quantity == 3


def test_parse_daily_report_form_errors():
    result, errors = parse_daily_report_form(
        {"session": "NIGHT", "products": [{"product_name": "Son", "quantity": 1.5}]}
    )
    assert result is None
    assert len(errors) == 4


def test_parse_filter_args_defaults_to_current_month():
    params, errors = parse_filter_args(MultiDict(), today=date(2024, 3, 17))
    assert not errors
    assert params.date_from == date(2024, 3, 1)
    assert params.date_to == date(2024, 3, 17)
    assert params.search == ""


def test_parse_filter_args_reads_multi_select():
    args = MultiDict(
        [
            ("date_from", "2024-01-01"),
            ("date_to", "2024-01-31"),
            ("stores", "S1"),
            ("stores", "S2"),
            ("products", ""),
            ("q", "bếp"),
        ]
    )
    params, errors = parse_filter_args(args, ("stores", "products"))
    assert not errors
    assert params.selections == {"stores": ["S1", "S2"], "products": []}
    assert params.search == "bếp"


def test_parse_filter_args_rejects_bad_dates():
    params, errors = parse_filter_args(MultiDict({"date_to": "31/01/2024"}))
    assert params is None
    assert errors == ["date_to must be YYYY-MM-DD."]


def test_parse_number_rejects_non_finite_amounts():
    for raw in ("nan", "NaN", "inf", "-Infinity", float("nan")):
        result, errors = parse_expense_form(
            {"date": "2024-03-10", "line_items": [{"category": "BẾP", "amount": raw}]}
        )
        assert result is None
        assert errors == ["Line item 1 amount must be a non-negative number."]

    result, errors = parse_expense_form({"date": "2024-03-10", "office_cost": "inf"})
    assert result is None
    assert len(errors) == 1

    result, errors = parse_daily_report_form(
        {"date": "2024-03-05", "store_id": "S1", "session": "SANG", "hours": "inf", "salary": "nan"}
    )
    assert result is None
    assert errors == [
        "Hours must be a non-negative number.",
        "Salary must be a non-negative number.",
    ]


def test_list_fields_must_be_lists():
    result, errors = parse_expense_form({"date": "2024-03-10", "line_items": 5})
    assert result is None
    assert errors == ["Line items must be a list."]

    result, errors = parse_daily_report_form(
        {"date": "2024-03-05", "store_id": "S1", "session": "SANG", "products": True}
    )
    assert result is None
    assert errors == ["Products must be a list."]


def test_parse_daily_report_form_rejects_all_stores():
    result, errors = parse_daily_report_form(
        {"date": "2024-03-05", "store_id": "all", "session": "SANG"}
    )
    assert result is None
    assert errors == ["Store must be a single store, not all stores."]

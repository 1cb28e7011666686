"""HTTP routes for expense tracking."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, Response, abort, current_app, jsonify, request
from sqlalchemy.exc import NoResultFound, SQLAlchemyError

from liveops_common import filter_expenses

from .. import get_record_store
from ..forms import parse_expense_form, parse_filter_args
from ..services import (
    EXPENSE_FACETS,
    build_expense_dashboard,
    categories_for_select,
    expense_export_rows,
    render_csv,
    serialize_expense,
)
from . import (
    LOAD_FAILED,
    SAVE_FAILED,
    store_failure,
    submitted_data,
    validation_failure,
)

expenses_bp = Blueprint("expenses", __name__, url_prefix="/expenses")


@expenses_bp.get("")
def list_expenses() -> Response:
    """Return filtered expenses with category totals and the monthly series."""

    params, errors = parse_filter_args(request.args, EXPENSE_FACETS)
    if errors or params is None:
        return validation_failure(errors)
    try:
        expenses = get_record_store().list_expenses()
    except SQLAlchemyError:
        return store_failure(LOAD_FAILED)
    payload = build_expense_dashboard(expenses, params)
    payload["categories"] = [
        {"code": category.code, "label": category.label}
        for category in categories_for_select()
    ]
    return jsonify(payload)


@expenses_bp.post("")
def create_expense() -> Response:
    """Validate and store a new expense."""

    expense, errors = parse_expense_form(
        submitted_data(),
        max_attachment_bytes=current_app.config["MAX_ATTACHMENT_BYTES"],
    )
    if errors or expense is None:
        return validation_failure(errors)
    try:
        saved = get_record_store().create_expense(expense)
    except SQLAlchemyError:
        return store_failure(SAVE_FAILED)
    return (
        jsonify({"message": "Đã thêm thu chi mới", "expense": serialize_expense(saved)}),
        201,
    )


@expenses_bp.put("/<int:expense_id>")
def update_expense(expense_id: int) -> Response:
    """Overwrite an expense with a validated submission."""

    expense, errors = parse_expense_form(
        submitted_data(),
        max_attachment_bytes=current_app.config["MAX_ATTACHMENT_BYTES"],
    )
    if errors or expense is None:
        return validation_failure(errors)
    try:
        get_record_store().update_expense(expense_id, expense)
    except NoResultFound:
        abort(404)
    except SQLAlchemyError:
        return store_failure(SAVE_FAILED)
    return jsonify({"message": "Đã cập nhật thu chi"})


@expenses_bp.delete("/<int:expense_id>")
def delete_expense(expense_id: int) -> Response:
    try:
        get_record_store().delete_expense(expense_id)
    except NoResultFound:
        abort(404)
    except SQLAlchemyError:
        return store_failure("Có lỗi xảy ra khi xóa thu chi")
    return jsonify({"message": "Đã xóa thu chi"})


@expenses_bp.get("/export.csv")
def export_expenses() -> Response:
    """Download the filtered expenses as labelled CSV rows."""

    params, errors = parse_filter_args(request.args, EXPENSE_FACETS)
    if errors or params is None:
        return validation_failure(errors)
    try:
        expenses = get_record_store().list_expenses()
    except SQLAlchemyError:
        return store_failure(LOAD_FAILED)
    body = render_csv(expense_export_rows(filter_expenses(expenses, params)))
    filename = f"expense-management-{date.today().isoformat()}.csv"
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

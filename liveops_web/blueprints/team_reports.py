"""HTTP routes for the livestream team report and daily shift reports."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, Response, abort, current_app, jsonify, request
from sqlalchemy.exc import NoResultFound, SQLAlchemyError

from .. import get_record_store
from ..forms import parse_daily_report_form, parse_filter_args
from ..services import (
    TEAM_REPORT_FACETS,
    build_team_dashboard,
    cross_report_export_rows,
    filtered_cross_report,
    render_csv,
)
from . import (
    LOAD_FAILED,
    SAVE_FAILED,
    store_failure,
    submitted_data,
    validation_failure,
)

team_reports_bp = Blueprint("team_reports", __name__, url_prefix="/team-reports")


@team_reports_bp.get("")
def team_dashboard() -> Response:
    """Return the video/livestream cross report and the daily report table."""

    params, errors = parse_filter_args(request.args, TEAM_REPORT_FACETS)
    if errors or params is None:
        return validation_failure(errors)
    store = get_record_store()
    try:
        videos = store.list_video_metrics()
        live_reports = store.list_live_reports()
        stores = store.list_stores()
        daily_reports = store.list_daily_team_reports()
    except SQLAlchemyError:
        return store_failure(LOAD_FAILED)
    return jsonify(
        build_team_dashboard(
            videos=videos,
            live_reports=live_reports,
            stores=stores,
            daily_reports=daily_reports,
            params=params,
            distinct_koc=current_app.config["DISTINCT_KOC_COUNT"],
        )
    )


@team_reports_bp.post("/daily")
def create_daily_report() -> Response:
    report, errors = parse_daily_report_form(
        submitted_data(),
        max_attachment_bytes=current_app.config["MAX_ATTACHMENT_BYTES"],
    )
    if errors or report is None:
        return validation_failure(errors)
    try:
        saved = get_record_store().create_daily_team_report(report)
    except SQLAlchemyError:
        return store_failure(SAVE_FAILED)
    return jsonify({"message": "Đã thêm báo cáo mới", "id": saved.id}), 201


@team_reports_bp.put("/daily/<int:report_id>")
def update_daily_report(report_id: int) -> Response:
    report, errors = parse_daily_report_form(
        submitted_data(),
        max_attachment_bytes=current_app.config["MAX_ATTACHMENT_BYTES"],
    )
    if errors or report is None:
        return validation_failure(errors)
    try:
        get_record_store().update_daily_team_report(report_id, report)
    except NoResultFound:
        abort(404)
    except SQLAlchemyError:
        return store_failure(SAVE_FAILED)
    return jsonify({"message": "Đã cập nhật báo cáo"})


@team_reports_bp.delete("/daily/<int:report_id>")
def delete_daily_report(report_id: int) -> Response:
    try:
        get_record_store().delete_daily_team_report(report_id)
    except NoResultFound:
        abort(404)
    except SQLAlchemyError:
        return store_failure("Có lỗi xảy ra khi xóa báo cáo")
    return jsonify({"message": "Đã xóa báo cáo"})


@team_reports_bp.get("/export.csv")
def export_team_report() -> Response:
    """Download the filtered cross report as labelled CSV rows."""

    params, errors = parse_filter_args(request.args, TEAM_REPORT_FACETS)
    if errors or params is None:
        return validation_failure(errors)
    store = get_record_store()
    try:
        rows = filtered_cross_report(
            store.list_video_metrics(),
            store.list_live_reports(),
            store.list_stores(),
            params,
            distinct_koc=current_app.config["DISTINCT_KOC_COUNT"],
        )
    except SQLAlchemyError:
        return store_failure(LOAD_FAILED)
    filename = f"team-cd-report-{date.today().isoformat()}.csv"
    return Response(
        render_csv(cross_report_export_rows(rows)),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

"""Form parsing and validation helpers."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from liveops_common import (
    DailyTeamReport,
    ExpenseLineItem,
    ExpenseRecord,
    FilterParams,
    ProductLineItem,
)
from liveops_common.models import (
    ALL_STORES_ID,
    COST_CATEGORIES,
    PERIOD_MONTH,
    PERIOD_TYPES,
    PERIOD_YEAR,
    SESSIONS,
)

DATE_INPUT_FORMAT = "%Y-%m-%d"
DEFAULT_MAX_ATTACHMENT_BYTES = 5 * 1024 * 1024

# Vietnamese-formatted amounts use "." as the thousands separator: 1.250.000
_GROUPED_NUMBER = re.compile(r"^\d{1,3}(\.\d{3})+$")
_MONTH_VALUE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
_YEAR_VALUE = re.compile(r"^\d{4}$")


def _parse_date(raw: Any) -> Optional[date]:
    try:
        return datetime.strptime(str(raw or "").strip(), DATE_INPUT_FORMAT).date()
    except ValueError:
        return None


def _parse_number(raw: Any) -> Optional[float]:
    """Return ``raw`` as a float, ``None`` when it is not numeric."""

    if raw is None or raw == "":
        return 0.0
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        number = float(raw)
    else:
        text = str(raw).strip()
        if _GROUPED_NUMBER.match(text):
            text = text.replace(".", "")
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"on", "true", "1", "yes"}
    return bool(value)


def _check_attachment(raw: str, max_bytes: int, errors: List[str]) -> None:
    if not raw:
        return
    if not (raw.startswith("data:image") or raw.startswith(("http://", "https://"))):
        errors.append("Attachment must be an image or a link.")
    elif len(raw.encode("utf-8")) > max_bytes:
        errors.append(
            f"Attachment must not exceed {max_bytes // (1024 * 1024)}MB."
        )


def parse_expense_form(
    data: Mapping[str, Any], *, max_attachment_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES
) -> Tuple[Optional[ExpenseRecord], List[str]]:
    """Validate an expense submission.

    Returns a tuple of ``(result, errors)``. ``result`` is ``None`` when
    validation fails.
    """

    errors: List[str] = []
    expense_date = _parse_date(data.get("date"))
    if expense_date is None:
        errors.append("Date is required and must be YYYY-MM-DD.")

    period_type = _text(data, "period_type").upper() or PERIOD_MONTH
    period_value = _text(data, "period_value")
    if period_type not in PERIOD_TYPES:
        errors.append("Period type must be MONTH or YEAR.")
    elif not period_value and expense_date is not None:
        period_value = (
            f"{expense_date:%Y-%m}" if period_type == PERIOD_MONTH else f"{expense_date:%Y}"
        )
    elif period_type == PERIOD_MONTH and not _MONTH_VALUE.match(period_value):
        errors.append("Monthly period must be YYYY-MM.")
    elif period_type == PERIOD_YEAR and not _YEAR_VALUE.match(period_value):
        errors.append("Yearly period must be YYYY.")

    line_items: List[ExpenseLineItem] = []
    raw_items = data.get("line_items") or []
    if not isinstance(raw_items, (list, tuple)):
        errors.append("Line items must be a list.")
        raw_items = []
    for index, entry in enumerate(raw_items, start=1):
        if not isinstance(entry, Mapping):
            errors.append(f"Line item {index} is malformed.")
            continue
        amount = _parse_number(entry.get("amount"))
        if amount is None or amount < 0:
            errors.append(f"Line item {index} amount must be a non-negative number.")
            continue
        line_items.append(
            ExpenseLineItem(category=_text(entry, "category"), amount=amount)
        )

    legacy = {}
    for category in COST_CATEGORIES:
        raw = data.get(category.legacy_field)
        if raw is None or raw == "":
            legacy[category.legacy_field] = None
            continue
        amount = _parse_number(raw)
        if amount is None or amount < 0:
            errors.append(f"{category.label} must be a non-negative number.")
        legacy[category.legacy_field] = amount

    attachment = _text(data, "attachment")
    _check_attachment(attachment, max_attachment_bytes, errors)

    if errors:
        return None, errors

    return (
        ExpenseRecord(
            date=expense_date,
            line_items=line_items,
            period_type=period_type,
            period_value=period_value,
            payer=_text(data, "payer"),
            receiver=_text(data, "receiver"),
            accounting=_text(data, "accounting"),
            description=_text(data, "description"),
            attachment=attachment,
            is_urgent=_flag(data.get("is_urgent")),
            **legacy,
        ),
        [],
    )


def parse_daily_report_form(
    data: Mapping[str, Any], *, max_attachment_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES
) -> Tuple[Optional[DailyTeamReport], List[str]]:
    """Validate a daily team report submission."""

    errors: List[str] = []
    report_date = _parse_date(data.get("date"))
    if report_date is None:
        errors.append("Date is required and must be YYYY-MM-DD.")

    store_id = _text(data, "store_id")
    if not store_id:
        errors.append("Store is required.")
    elif store_id == ALL_STORES_ID:
        errors.append("Store must be a single store, not all stores.")

    session = _text(data, "session").upper()
    if session not in SESSIONS:
        errors.append("Session must be one of SANG, CHIEU or TOI.")

    hours = _parse_number(data.get("hours"))
    if hours is None or hours < 0:
        errors.append("Hours must be a non-negative number.")
    salary = _parse_number(data.get("salary"))
    if salary is None or salary < 0:
        errors.append("Salary must be a non-negative number.")

    products: List[ProductLineItem] = []
    raw_products = data.get("products") or []
    if not isinstance(raw_products, (list, tuple)):
        errors.append("Products must be a list.")
        raw_products = []
    for index, entry in enumerate(raw_products, start=1):
        if not isinstance(entry, Mapping):
            errors.append(f"Product {index} is malformed.")
            continue
        quantity = _parse_number(entry.get("quantity"))
        if quantity is None or quantity < 0 or not quantity.is_integer():
            errors.append(f"Product {index} quantity must be a non-negative integer.")
            continue
        products.append(
            ProductLineItem(product_name=_text(entry, "product_name"), quantity=int(quantity))
        )

    attachment = _text(data, "attachment")
    _check_attachment(attachment, max_attachment_bytes, errors)

    if errors:
        return None, errors

    return (
        DailyTeamReport(
            date=report_date,
            store_id=store_id,
            session=session,
            shift=_text(data, "shift"),
            hours=hours,
            salary=salary,
            account=_text(data, "account"),
            person_in_charge=_text(data, "person_in_charge"),
            admin=_text(data, "admin"),
            products=products,
            attachment=attachment,
        ),
        [],
    )


def parse_filter_args(
    args: Mapping[str, Any],
    facets: Sequence[str] = (),
    *,
    today: Optional[date] = None,
) -> Tuple[Optional[FilterParams], List[str]]:
    """Build :class:`FilterParams` from query-string arguments.

    The date range defaults to the first day of the current month through
    ``today``. Multi-valued facets are read with ``getlist`` when ``args`` is
    a :class:`~werkzeug.datastructures.MultiDict`.
    """

    errors: List[str] = []
    today = today or date.today()
    bounds = {}
    for name, default in (("date_from", today.replace(day=1)), ("date_to", today)):
        raw = args.get(name)
        if not raw:
            bounds[name] = default
            continue
        parsed = _parse_date(raw)
        if parsed is None:
            errors.append(f"{name} must be YYYY-MM-DD.")
        bounds[name] = parsed

    selections = {}
    for facet in facets:
        if hasattr(args, "getlist"):
            values = args.getlist(facet)
        else:
            raw = args.get(facet) or []
            values = [raw] if isinstance(raw, str) else list(raw)
        selections[facet] = [value for value in values if value and value != "ALL"]

    if errors:
        return None, errors

    return (
        FilterParams(
            date_from=bounds["date_from"],
            date_to=bounds["date_to"],
            selections=selections,
            search=str(args.get("q") or ""),
        ),
        [],
    )

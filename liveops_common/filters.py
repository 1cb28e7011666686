"""Date-range, facet and free-text filtering over record collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import (
    Callable,
    Dict,
    Generic,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

from .models import (
    AggregatedReportRow,
    DailyTeamReport,
    ExpenseRecord,
    Store,
)

T = TypeVar("T")

DateLike = Union[date, datetime]


@dataclass(slots=True)
class FilterParams:
    """User-chosen filter values.

    ``selections`` maps a facet name to the accepted values. An empty or
    missing selection leaves that facet unrestricted.
    """

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    selections: Dict[str, Sequence[str]] = field(default_factory=dict)
    search: str = ""


@dataclass(slots=True)
class FilterSpec(Generic[T]):
    """Describes how an entity exposes its date, facets and searchable text."""

    date_of: Callable[[T], Optional[DateLike]]
    facets: Mapping[str, Callable[[T], Iterable[Optional[str]]]]
    search_fields: Sequence[Callable[[T], Optional[str]]]
    newest_first: bool = False


def _as_timestamp(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def _sort_key(value: Optional[DateLike]) -> datetime:
    return datetime.min if value is None else _as_timestamp(value)


def _in_range(value: Optional[DateLike], params: FilterParams) -> bool:
    if params.date_from is None and params.date_to is None:
        return True
    if value is None:
        return False
    stamp = _as_timestamp(value)
    if params.date_from is not None and stamp < datetime.combine(
        params.date_from, time.min
    ):
        return False
    if params.date_to is not None and stamp > datetime.combine(
        params.date_to, time.max
    ):
        return False
    return True


def _matches_facets(record, params: FilterParams, spec: FilterSpec) -> bool:
    for name, selected in params.selections.items():
        if not selected or name not in spec.facets:
            continue
        accepted = set(selected)
        if not any(value in accepted for value in spec.facets[name](record)):
            return False
    return True


def _matches_search(record, needle: str, spec: FilterSpec) -> bool:
    for extract in spec.search_fields:
        text = extract(record)
        if text and needle in text.lower():
            return True
    return False


def filter_records(
    records: Iterable[T], params: FilterParams, spec: FilterSpec[T]
) -> List[T]:
    """Return the records that pass every predicate in ``params``.

    Input records are never modified. When ``spec.newest_first`` is set the
    result is ordered by date, most recent first.
    """

    needle = params.search.lower() if params.search.strip() else ""
    result = [
        record
        for record in records
        if _in_range(spec.date_of(record), params)
        and _matches_facets(record, params, spec)
        and (not needle or _matches_search(record, needle, spec))
    ]
    if spec.newest_first:
        result.sort(key=lambda record: _sort_key(spec.date_of(record)), reverse=True)
    return result


def number_text(value) -> str:
    """Render a number the way it is displayed, without a trailing ``.0``."""

    number = float(value or 0)
    return str(int(number)) if number.is_integer() else repr(number)


EXPENSE_FILTER: FilterSpec[ExpenseRecord] = FilterSpec(
    date_of=lambda expense: expense.date,
    facets={"period_type": lambda expense: [expense.period_type]},
    search_fields=[
        lambda expense: expense.date.isoformat(),
        lambda expense: expense.accounting,
        lambda expense: expense.payer,
        lambda expense: expense.receiver,
        lambda expense: expense.description,
    ],
    newest_first=True,
)

CROSS_REPORT_FILTER: FilterSpec[AggregatedReportRow] = FilterSpec(
    date_of=lambda row: row.date,
    facets={
        "stores": lambda row: [row.store_id],
        "products": lambda row: [row.product_id, row.product_name],
    },
    search_fields=[
        lambda row: row.date.isoformat(),
        lambda row: row.product_name,
        lambda row: row.store_name,
        lambda row: number_text(row.total_gmv),
        lambda row: number_text(row.video_gmv),
        lambda row: number_text(row.livestream_gmv),
    ],
)


def daily_report_filter(stores: Iterable[Store]) -> FilterSpec[DailyTeamReport]:
    """Build the daily-report filter; search resolves store names via ``stores``."""

    names = {store.id: store.name for store in stores}
    return FilterSpec(
        date_of=lambda report: report.date,
        facets={"stores": lambda report: [report.store_id or None]},
        search_fields=[
            lambda report: report.date.isoformat(),
            lambda report: names.get(report.store_id),
            lambda report: report.person_in_charge,
            lambda report: report.account,
            lambda report: report.shift,
        ],
        newest_first=True,
    )


def filter_expenses(
    expenses: Iterable[ExpenseRecord], params: FilterParams
) -> List[ExpenseRecord]:
    return filter_records(expenses, params, EXPENSE_FILTER)


def filter_daily_reports(
    reports: Iterable[DailyTeamReport],
    params: FilterParams,
    stores: Iterable[Store] = (),
) -> List[DailyTeamReport]:
    return filter_records(reports, params, daily_report_filter(stores))


def filter_cross_report(
    rows: Iterable[AggregatedReportRow], params: FilterParams
) -> List[AggregatedReportRow]:
    return filter_records(rows, params, CROSS_REPORT_FILTER)

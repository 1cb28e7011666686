"""Reduce expense and daily-report records to canonical line items.

An expense record is resolved exactly once into either an
:class:`ItemizedCosts` or a :class:`LegacyCosts` breakdown. Aggregation code
only ever consumes the :class:`NormalizedExpense` produced from that
breakdown, so the two storage shapes sum identically and are never mixed
within one record.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from .models import (
    CATEGORY_CODES,
    COST_CATEGORIES,
    OTHER_CATEGORY,
    DailyTeamReport,
    ExpenseLineItem,
    ExpenseRecord,
)


@dataclass(frozen=True, slots=True)
class ItemizedCosts:
    """Breakdown taken from a record's line-item list."""

    items: Tuple[ExpenseLineItem, ...]


@dataclass(frozen=True, slots=True)
class LegacyCosts:
    """Breakdown taken from the named ``*_cost`` fields, keyed by category."""

    amounts: Tuple[Tuple[str, Optional[float]], ...]


CostBreakdown = Union[ItemizedCosts, LegacyCosts]


@dataclass(slots=True)
class NormalizedExpense:
    """Category buckets and grand total for a single expense record."""

    by_category: Dict[str, float]
    total: float


def empty_buckets() -> Dict[str, float]:
    """Return a zeroed bucket for every known cost category."""

    return {code: 0.0 for code in CATEGORY_CODES}


def canonical_category(label: Optional[str]) -> str:
    """Map a free-text category label onto a known category code.

    Blank or unrecognised labels fold into :data:`OTHER_CATEGORY`.
    """

    cleaned = (label or "").strip()
    return cleaned if cleaned in CATEGORY_CODES else OTHER_CATEGORY


def _amount(value) -> float:
    return float(value) if value else 0.0


def resolve_costs(record: ExpenseRecord) -> CostBreakdown:
    """Pick the breakdown variant for ``record``.

    A non-empty line-item list wins outright; legacy fields are only read
    when the list is empty.
    """

    if record.line_items:
        return ItemizedCosts(items=tuple(record.line_items))
    return LegacyCosts(
        amounts=tuple(
            (category.code, getattr(record, category.legacy_field))
            for category in COST_CATEGORIES
        )
    )


def normalize_expense(record: ExpenseRecord) -> NormalizedExpense:
    """Return per-category sums and the total for one expense record."""

    buckets = empty_buckets()
    breakdown = resolve_costs(record)
    if isinstance(breakdown, ItemizedCosts):
        pairs = [
            (canonical_category(item.category), _amount(item.amount))
            for item in breakdown.items
        ]
    else:
        pairs = [(code, _amount(value)) for code, value in breakdown.amounts]

    total = 0.0
    for code, amount in pairs:
        buckets[code] += amount
        total += amount
    return NormalizedExpense(by_category=buckets, total=total)


def total_quantity(report: DailyTeamReport) -> int:
    """Sum product quantities on a daily team report."""

    return sum(int(item.quantity or 0) for item in report.products)

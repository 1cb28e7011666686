"""Domain models for the live-commerce operations console.

These dataclasses provide a shared representation of expense records, daily
team reports and the video/livestream metrics read from the record store.
They intentionally avoid persistence concerns so the normalizer, filters and
aggregation helpers can be used from the Flask app or from scripts alike.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

PERIOD_MONTH = "MONTH"
PERIOD_YEAR = "YEAR"
PERIOD_TYPES = (PERIOD_MONTH, PERIOD_YEAR)

SESSION_MORNING = "SANG"
SESSION_AFTERNOON = "CHIEU"
SESSION_EVENING = "TOI"
SESSIONS = (SESSION_MORNING, SESSION_AFTERNOON, SESSION_EVENING)

# Store id meaning "every store"; never a selectable store or aggregation key.
ALL_STORES_ID = "all"

# Product key used for metrics that carry no product dimension (live reports,
# videos without a product id).
UNKNOWN_PRODUCT = "unknown"
UNKNOWN_PRODUCT_LABEL = "Chưa xác định"


@dataclass(slots=True)
class ExpenseCategory:
    """Represents a reportable cost category."""

    code: str
    label: str
    legacy_field: str
    description: str = ""


COST_CATEGORIES: List[ExpenseCategory] = [
    ExpenseCategory(
        code="LƯƠNG",
        label="CHI PHÍ LƯƠNG (工资成本)",
        legacy_field="salary_cost",
        description="Salaries and wages.",
    ),
    ExpenseCategory(
        code="VĂN PHÒNG",
        label="CHI PHÍ VĂN PHÒNG (办公室成本)",
        legacy_field="office_cost",
        description="Office rent and supplies.",
    ),
    ExpenseCategory(
        code="BẾP",
        label="CHI PHÍ BẾP (厨房成本)",
        legacy_field="kitchen_cost",
        description="Kitchen and meals.",
    ),
    ExpenseCategory(
        code="CSKH",
        label="CHI PHÍ CSKH (客服成本)",
        legacy_field="customer_service_cost",
        description="Customer service.",
    ),
    ExpenseCategory(
        code="KHO",
        label="CHI PHÍ KHO (仓库成本)",
        legacy_field="warehouse_cost",
        description="Warehouse and logistics.",
    ),
    ExpenseCategory(
        code="KHÁC",
        label="KHÁC (其他)",
        legacy_field="other_cost",
        description="Anything not covered above.",
    ),
]

CATEGORY_CODES = tuple(category.code for category in COST_CATEGORIES)
OTHER_CATEGORY = "KHÁC"


@dataclass(slots=True)
class ExpenseLineItem:
    """Single (category, amount) entry on an expense record."""

    category: str
    amount: Optional[float] = 0.0


@dataclass(slots=True)
class ExpenseRecord:
    """An expense voucher, itemized or in the legacy named-field form.

    The ``line_items`` list supersedes the ``*_cost`` scalar fields whenever
    it is non-empty; the scalars are kept for records created before line
    items existed.
    """

    date: date
    line_items: List[ExpenseLineItem] = field(default_factory=list)
    salary_cost: Optional[float] = None
    office_cost: Optional[float] = None
    kitchen_cost: Optional[float] = None
    customer_service_cost: Optional[float] = None
    warehouse_cost: Optional[float] = None
    other_cost: Optional[float] = None
    period_type: str = PERIOD_MONTH
    period_value: str = ""
    payer: str = ""
    receiver: str = ""
    accounting: str = ""
    description: str = ""
    attachment: str = ""
    is_urgent: bool = False
    id: Optional[int] = None


@dataclass(slots=True)
class ProductLineItem:
    """Quantity of a product handled during a shift."""

    product_name: str
    quantity: Optional[int] = 0


@dataclass(slots=True)
class DailyTeamReport:
    """Per-shift report filed by the livestream team."""

    date: date
    store_id: str
    session: str = SESSION_MORNING
    shift: str = ""
    hours: Optional[float] = 0.0
    salary: Optional[float] = 0.0
    account: str = ""
    person_in_charge: str = ""
    admin: str = ""
    products: List[ProductLineItem] = field(default_factory=list)
    attachment: str = ""
    id: Optional[int] = None


@dataclass(slots=True)
class VideoMetric:
    """Sales attributed to one uploaded video."""

    upload_date: datetime
    store_id: str
    product_id: Optional[str] = None
    person_in_charge: Optional[str] = None
    sales: Optional[float] = 0.0
    orders: Optional[int] = 0
    id: Optional[int] = None


@dataclass(slots=True)
class LiveReport:
    """Result of one livestream session on a channel."""

    date: date
    channel_id: str
    host_name: Optional[str] = None
    gmv: Optional[float] = 0.0
    orders: Optional[int] = 0
    id: Optional[int] = None


@dataclass(slots=True)
class Store:
    id: str
    name: str


@dataclass(slots=True)
class Personnel:
    name: str
    position: str = ""
    id: Optional[int] = None


@dataclass(slots=True)
class CategoryTotals:
    """Per-category sums plus the grand total across a set of expenses."""

    by_category: Dict[str, float]
    grand_total: float = 0.0


@dataclass(slots=True)
class MonthBucket:
    """Category sums for one calendar month."""

    year: int
    month: int
    by_category: Dict[str, float]
    total: float = 0.0

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def label(self) -> str:
        return f"{self.month:02d}/{self.year}"


@dataclass(slots=True)
class AggregatedReportRow:
    """Video and livestream results for one (date, product, store) key."""

    date: date
    product_id: str
    product_name: str
    store_id: str
    store_name: str
    video_gmv: float = 0.0
    video_orders: int = 0
    livestream_gmv: float = 0.0
    livestream_orders: int = 0
    new_koc_video_count: int = 0
    new_koc_livestream_count: int = 0
    total_gmv: float = 0.0

    @property
    def id(self) -> str:
        return f"{self.date.isoformat()}_{self.product_id}_{self.store_id}"


@dataclass(slots=True)
class CrossReportMetrics:
    """Headline sums across a set of :class:`AggregatedReportRow` values."""

    total_gmv: float = 0.0
    video_gmv: float = 0.0
    video_orders: int = 0
    livestream_gmv: float = 0.0
    livestream_orders: int = 0
    new_koc_video_count: int = 0
    new_koc_livestream_count: int = 0

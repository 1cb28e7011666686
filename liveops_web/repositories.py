"""Database access layer backing the record store contract."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoResultFound

from liveops_common import (
    DailyTeamReport,
    ExpenseLineItem,
    ExpenseRecord,
    LiveReport,
    Personnel,
    ProductLineItem,
    Store,
    VideoMetric,
)

from .database import (
    daily_team_reports,
    expenses,
    live_reports,
    personnel,
    session_scope,
    stores,
    video_metrics,
)


class RecordStore:
    """CRUD for expenses and daily reports, reads for the metric feeds."""

    def __init__(self, engine: Engine):
        self._engine = engine

    # Expenses

    def list_expenses(self) -> List[ExpenseRecord]:
        """Return every expense record, newest first."""

        with session_scope(self._engine) as session:
            rows = session.execute(
                select(expenses).order_by(expenses.c.date.desc(), expenses.c.id.desc())
            ).all()
        return [self._row_to_expense(row) for row in rows]

    def create_expense(self, expense: ExpenseRecord) -> ExpenseRecord:
        """Persist a new expense and return it with an ID."""

        with session_scope(self._engine) as session:
            result = session.execute(
                insert(expenses)
                .values(**self._expense_payload(expense))
                .returning(expenses.c.id)
            )
            expense_id = result.scalar_one()
        return replace(expense, id=expense_id)

    def update_expense(self, expense_id: int, expense: ExpenseRecord) -> None:
        """Overwrite an existing expense.

        Raises:
            NoResultFound: When no expense has ``expense_id``.
        """

        with session_scope(self._engine) as session:
            result = session.execute(
                update(expenses)
                .where(expenses.c.id == expense_id)
                .values(**self._expense_payload(expense))
            )
            if result.rowcount == 0:
                raise NoResultFound(f"Expense {expense_id} not found")

    def delete_expense(self, expense_id: int) -> None:
        with session_scope(self._engine) as session:
            result = session.execute(delete(expenses).where(expenses.c.id == expense_id))
            if result.rowcount == 0:
                raise NoResultFound(f"Expense {expense_id} not found")

    # Daily team reports

    def list_daily_team_reports(self) -> List[DailyTeamReport]:
        with session_scope(self._engine) as session:
            rows = session.execute(
                select(daily_team_reports).order_by(
                    daily_team_reports.c.date.desc(), daily_team_reports.c.id.desc()
                )
            ).all()
        return [self._row_to_daily_report(row) for row in rows]

    def create_daily_team_report(self, report: DailyTeamReport) -> DailyTeamReport:
        """Persist a new daily report and return it with an ID."""

        with session_scope(self._engine) as session:
            result = session.execute(
                insert(daily_team_reports)
                .values(**self._daily_report_payload(report))
                .returning(daily_team_reports.c.id)
            )
            report_id = result.scalar_one()
        return replace(report, id=report_id)

    def update_daily_team_report(self, report_id: int, report: DailyTeamReport) -> None:
        with session_scope(self._engine) as session:
            result = session.execute(
                update(daily_team_reports)
                .where(daily_team_reports.c.id == report_id)
                .values(**self._daily_report_payload(report))
            )
            if result.rowcount == 0:
                raise NoResultFound(f"Daily report {report_id} not found")

    def delete_daily_team_report(self, report_id: int) -> None:
        with session_scope(self._engine) as session:
            result = session.execute(
                delete(daily_team_reports).where(daily_team_reports.c.id == report_id)
            )
            if result.rowcount == 0:
                raise NoResultFound(f"Daily report {report_id} not found")

    # Read-only feeds

    def list_video_metrics(self) -> List[VideoMetric]:
        with session_scope(self._engine) as session:
            rows = session.execute(
                select(video_metrics).order_by(video_metrics.c.id)
            ).all()
        return [VideoMetric(**row._mapping) for row in rows]

    def list_live_reports(self) -> List[LiveReport]:
        with session_scope(self._engine) as session:
            rows = session.execute(select(live_reports).order_by(live_reports.c.id)).all()
        return [LiveReport(**row._mapping) for row in rows]

    def list_stores(self) -> List[Store]:
        with session_scope(self._engine) as session:
            rows = session.execute(select(stores).order_by(stores.c.name)).all()
        return [Store(**row._mapping) for row in rows]

    def list_personnel(self) -> List[Personnel]:
        with session_scope(self._engine) as session:
            rows = session.execute(select(personnel).order_by(personnel.c.name)).all()
        return [Personnel(**row._mapping) for row in rows]

    # Ingest helpers for the read-only feeds

    def add_store(self, store: Store) -> Store:
        with session_scope(self._engine) as session:
            session.execute(insert(stores).values(id=store.id, name=store.name))
        return store

    def add_personnel(self, person: Personnel) -> Personnel:
        with session_scope(self._engine) as session:
            result = session.execute(
                insert(personnel)
                .values(name=person.name, position=person.position)
                .returning(personnel.c.id)
            )
            person_id = result.scalar_one()
        return replace(person, id=person_id)

    def add_video_metric(self, video: VideoMetric) -> VideoMetric:
        payload = {
            "upload_date": video.upload_date,
            "store_id": video.store_id,
            "product_id": video.product_id,
            "person_in_charge": video.person_in_charge,
            "sales": video.sales,
            "orders": video.orders,
        }
        with session_scope(self._engine) as session:
            result = session.execute(
                insert(video_metrics).values(**payload).returning(video_metrics.c.id)
            )
            video_id = result.scalar_one()
        return replace(video, id=video_id)

    def add_live_report(self, live: LiveReport) -> LiveReport:
        payload = {
            "date": live.date,
            "channel_id": live.channel_id,
            "host_name": live.host_name,
            "gmv": live.gmv,
            "orders": live.orders,
        }
        with session_scope(self._engine) as session:
            result = session.execute(
                insert(live_reports).values(**payload).returning(live_reports.c.id)
            )
            live_id = result.scalar_one()
        return replace(live, id=live_id)

    @staticmethod
    def _expense_payload(expense: ExpenseRecord) -> Dict[str, Any]:
        return {
            "date": expense.date,
            "line_items": [
                {"category": item.category, "amount": item.amount}
                for item in expense.line_items
            ],
            "salary_cost": expense.salary_cost,
            "office_cost": expense.office_cost,
            "kitchen_cost": expense.kitchen_cost,
            "customer_service_cost": expense.customer_service_cost,
            "warehouse_cost": expense.warehouse_cost,
            "other_cost": expense.other_cost,
            "period_type": expense.period_type,
            "period_value": expense.period_value,
            "payer": expense.payer,
            "receiver": expense.receiver,
            "accounting": expense.accounting,
            "description": expense.description,
            "attachment": expense.attachment,
            "is_urgent": expense.is_urgent,
        }

    @staticmethod
    def _daily_report_payload(report: DailyTeamReport) -> Dict[str, Any]:
        return {
            "date": report.date,
            "store_id": report.store_id,
            "session": report.session,
            "shift": report.shift,
            "hours": report.hours or 0,
            "salary": report.salary or 0,
            "account": report.account,
            "person_in_charge": report.person_in_charge,
            "admin": report.admin,
            "products": [
                {"product_name": item.product_name, "quantity": item.quantity}
                for item in report.products
            ],
            "attachment": report.attachment,
        }

    @staticmethod
    def _row_to_expense(row) -> ExpenseRecord:
        """Convert a SQLAlchemy row to an :class:`ExpenseRecord`."""

        values = row._mapping
        return ExpenseRecord(
            id=values["id"],
            date=values["date"],
            line_items=[
                ExpenseLineItem(
                    category=item.get("category", ""), amount=item.get("amount")
                )
                for item in values["line_items"] or []
            ],
            salary_cost=values["salary_cost"],
            office_cost=values["office_cost"],
            kitchen_cost=values["kitchen_cost"],
            customer_service_cost=values["customer_service_cost"],
            warehouse_cost=values["warehouse_cost"],
            other_cost=values["other_cost"],
            period_type=values["period_type"],
            period_value=values["period_value"],
            payer=values["payer"],
            receiver=values["receiver"],
            accounting=values["accounting"],
            description=values["description"],
            attachment=values["attachment"],
            is_urgent=values["is_urgent"],
        )

    @staticmethod
    def _row_to_daily_report(row) -> DailyTeamReport:
        """Convert a SQLAlchemy row to a :class:`DailyTeamReport`."""

        values = row._mapping
        return DailyTeamReport(
            id=values["id"],
            date=values["date"],
            store_id=values["store_id"],
            session=values["session"],
            shift=values["shift"],
            hours=values["hours"],
            salary=values["salary"],
            account=values["account"],
            person_in_charge=values["person_in_charge"],
            admin=values["admin"],
            products=[
                ProductLineItem(
                    product_name=item.get("product_name", ""),
                    quantity=item.get("quantity"),
                )
                for item in values["products"] or []
            ],
            attachment=values["attachment"],
        )

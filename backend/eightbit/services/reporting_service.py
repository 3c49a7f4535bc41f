# Overview: Service-layer operations for reporting; read-only projections recomputed per call.

from __future__ import annotations

from decimal import Decimal


from ..extensions import db
from ..models import Employee, EmployeePayRate, GameInventory, GameItem
from ..time_utils import to_iso_date

"""
Report views keep the column names and order published for
vw_game_sales_report and vw_employee_payment_history.
"""

GAME_SALES_COLUMNS = ("Game_id", "Game_name", "Game_platform", "Unit_sold", "Price", "Total_Revenue")
PAYMENT_HISTORY_COLUMNS = (
    "Employee_id",
    "Employee_name",
    "Employee_position",
    "Employee_wage",
    "Start_date",
    "End_date",
)

CENT = Decimal("0.01")


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def _money(value) -> str:
    return str(Decimal(value).quantize(CENT))


def game_sales_report() -> list[dict]:
    """
    One row per stocked game with Unit_sold > 0.

    Total_Revenue = Unit_sold * Price, computed in Decimal.
    """
    rows = (
        db.session.query(
            GameInventory.game_id,
            GameItem.name,
            GameItem.platform,
            GameInventory.units_sold,
            GameInventory.price,
        )
        .join(GameItem, GameInventory.game_id == GameItem.id)
        .filter(GameInventory.units_sold > 0)
        .order_by(GameInventory.game_id.asc())
        .all()
    )
    report = []
    for game_id, name, platform, units_sold, price in rows:
        price = Decimal(price)
        report.append(dict(zip(GAME_SALES_COLUMNS, (
            game_id,
            name,
            platform,
            units_sold,
            _money(price),
            _money(price * units_sold),
        ))))
    return report


def employee_payment_history() -> list[dict]:
    full_name = (Employee.first_name + " " + Employee.last_name).label("Employee_name")
    rows = (
        db.session.query(
            Employee.id,
            full_name,
            EmployeePayRate.position,
            EmployeePayRate.wage,
            EmployeePayRate.start_date,
            EmployeePayRate.end_date,
        )
        .join(EmployeePayRate, Employee.id == EmployeePayRate.employee_id)
        .order_by(Employee.id.asc(), EmployeePayRate.start_date.asc())
        .all()
    )
    return [
        dict(zip(PAYMENT_HISTORY_COLUMNS, (
            employee_id,
            name,
            position,
            _money(wage),
            to_iso_date(start_date),
            to_iso_date(end_date),
        )))
        for employee_id, name, position, wage, start_date, end_date in rows
    ]


REPORT_VIEWS = {
    "vw_game_sales_report": (GAME_SALES_COLUMNS, game_sales_report),
    "vw_employee_payment_history": (PAYMENT_HISTORY_COLUMNS, employee_payment_history),
}


def run_view(view_name: str) -> dict:
    if view_name not in REPORT_VIEWS:
        raise ReportError(f"Unknown report view: {view_name}")
    columns, builder = REPORT_VIEWS[view_name]
    rows = builder()
    return {"view": view_name, "columns": list(columns), "rows": rows, "count": len(rows)}

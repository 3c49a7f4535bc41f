from __future__ import annotations

from ..extensions import db
from eightbit.time_utils import to_iso_date


class Employee(db.Model):
    __tablename__ = "Employee"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column("Employee_id", db.Integer, primary_key=True)
    first_name = db.Column("First_name", db.String(256), nullable=False)
    last_name = db.Column("Last_name", db.String(256), nullable=False)
    dob = db.Column("DOB", db.Date, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "dob": to_iso_date(self.dob),
        }


class EmployeePayRate(db.Model):
    """
    Pay history row, keyed by (employee, start date).

    End_date NULL marks the current role. services.staff_service allows at
    most one open row per employee; overlapping closed periods are not checked.
    """
    __tablename__ = "Employee_pay_rate"

    employee_id = db.Column(
        "Employee_id",
        db.Integer,
        db.ForeignKey("Employee.Employee_id", name="fk_Employee_pay_rate_Employee"),
        primary_key=True,
        autoincrement=False,
    )
    start_date = db.Column("Start_date", db.Date, primary_key=True)
    end_date = db.Column("End_date", db.Date, nullable=True)
    wage = db.Column("Employee_wage", db.Numeric(4, 2), nullable=False)
    position = db.Column("Employee_position", db.String(100), nullable=False)

    employee = db.relationship("Employee", backref=db.backref("pay_rates", lazy=True, passive_deletes="all"))

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "start_date": to_iso_date(self.start_date),
            "end_date": to_iso_date(self.end_date),
            "wage": None if self.wage is None else f"{self.wage:.2f}",
            "position": self.position,
        }

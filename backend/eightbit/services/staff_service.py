# Overview: Service-layer operations for employees and their pay history.

"""
Pay history rules

- (Employee_id, Start_date) is the primary key; a duplicate start date is a
  ConstraintViolation.
- At most one open pay rate (End_date NULL) per employee. Adding a second open
  row is refused; close the current one first with close_pay_rate.
- End_date, when set, is not before Start_date.
- Overlap between closed periods is not checked.
"""
from __future__ import annotations

from datetime import date

from ..errors import ConstraintViolation, NotFoundError, ReferentialIntegrityError
from ..extensions import db
from ..models import Employee, EmployeePayRate
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_employee,
    enforce_rules_pay_rate,
    validate_payload,
)
from .concurrency import atomic, lock_for_update

EMPLOYEE_POLICY = ModelValidationPolicy(
    writable_fields={"first_name", "last_name", "dob"},
    required_on_create={"first_name", "last_name", "dob"},
)

PAY_RATE_POLICY = ModelValidationPolicy(
    writable_fields={"employee_id", "start_date", "end_date", "wage", "position"},
    required_on_create={"employee_id", "start_date", "wage", "position"},
)


def create_employee(*, payload: dict) -> dict:
    patch = validate_payload(model=Employee, payload=payload, policy=EMPLOYEE_POLICY, partial=False)
    enforce_rules_employee(patch)

    with atomic() as session:
        employee = Employee(**patch)
        session.add(employee)
        session.flush()
        result = employee.to_dict()
    return result


def get_employee(employee_id: int) -> dict | None:
    employee = db.session.get(Employee, employee_id)
    if not employee:
        return None
    data = employee.to_dict()
    data["pay_rates"] = list_pay_rates(employee_id)
    return data


def list_pay_rates(employee_id: int) -> list[dict]:
    rows = (
        db.session.query(EmployeePayRate)
        .filter(EmployeePayRate.employee_id == employee_id)
        .order_by(EmployeePayRate.start_date.asc())
        .all()
    )
    return [row.to_dict() for row in rows]


def add_pay_rate(*, payload: dict) -> dict:
    """
    Raises:
        ValidationError: bad input, or end_date before start_date
        ReferentialIntegrityError: employee_id does not exist
        ConstraintViolation: duplicate start date, or a second open pay rate
    """
    patch = validate_payload(model=EmployeePayRate, payload=payload, policy=PAY_RATE_POLICY, partial=False)
    enforce_rules_pay_rate(patch)

    with atomic() as session:
        employee = lock_for_update(session.query(Employee).filter(Employee.id == patch["employee_id"])).first()
        if employee is None:
            raise ReferentialIntegrityError(f"Employee {patch['employee_id']} does not exist")

        duplicate = session.get(EmployeePayRate, (patch["employee_id"], patch["start_date"]))
        if duplicate is not None:
            raise ConstraintViolation(
                f"Pay rate starting {patch['start_date'].isoformat()} already exists for employee {employee.id}"
            )

        if patch.get("end_date") is None:
            open_rate = (
                session.query(EmployeePayRate)
                .filter(
                    EmployeePayRate.employee_id == employee.id,
                    EmployeePayRate.end_date.is_(None),
                )
                .first()
            )
            if open_rate is not None:
                raise ConstraintViolation(
                    f"Employee {employee.id} already has an open pay rate starting "
                    f"{open_rate.start_date.isoformat()}"
                )

        rate = EmployeePayRate(**patch)
        session.add(rate)
        session.flush()
        result = rate.to_dict()
    return result


def close_pay_rate(*, employee_id: int, start_date: date, end_date: date) -> dict:
    """
    Set End_date on an open pay rate.

    Raises:
        NotFoundError: no pay rate with that key
        ConstraintViolation: the pay rate is already closed
        ValidationError: end_date before start_date
    """
    if end_date < start_date:
        raise ValidationError("end_date cannot be before start_date")

    with atomic() as session:
        query = session.query(EmployeePayRate).filter(
            EmployeePayRate.employee_id == employee_id,
            EmployeePayRate.start_date == start_date,
        )
        rate = lock_for_update(query).first()
        if rate is None:
            raise NotFoundError(f"No pay rate for employee {employee_id} starting {start_date.isoformat()}")
        if rate.end_date is not None:
            raise ConstraintViolation("Pay rate is already closed")
        rate.end_date = end_date
        session.flush()
        result = rate.to_dict()
    return result

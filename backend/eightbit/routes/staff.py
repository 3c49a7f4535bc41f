# Overview: Flask API routes for employees and pay history.

from flask import Blueprint, request

from ..decorators import require_auth, require_permission
from ..errors import ConstraintViolation, NotFoundError, ReferentialIntegrityError
from ..permissions import MANAGE_STAFF
from ..services import staff_service
from ..time_utils import parse_iso_date
from ..validation import ValidationError

staff_bp = Blueprint("staff", __name__, url_prefix="/api/employees")


@staff_bp.post("")
@require_auth
@require_permission(MANAGE_STAFF)
def create_employee_route():
    payload = request.get_json(silent=True) or {}
    try:
        return staff_service.create_employee(payload=payload), 201
    except ValidationError as e:
        return {"error": str(e)}, 400


@staff_bp.get("/<int:employee_id>")
@require_auth
@require_permission(MANAGE_STAFF)
def get_employee_route(employee_id: int):
    employee = staff_service.get_employee(employee_id)
    if employee is None:
        return {"error": "Employee not found"}, 404
    return employee


@staff_bp.post("/<int:employee_id>/pay-rates")
@require_auth
@require_permission(MANAGE_STAFF)
def add_pay_rate_route(employee_id: int):
    payload = request.get_json(silent=True) or {}
    payload["employee_id"] = employee_id
    try:
        return staff_service.add_pay_rate(payload=payload), 201
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ReferentialIntegrityError as e:
        return {"error": str(e)}, 404
    except ConstraintViolation as e:
        return {"error": str(e)}, 409


@staff_bp.post("/<int:employee_id>/pay-rates/<start_date>/close")
@require_auth
@require_permission(MANAGE_STAFF)
def close_pay_rate_route(employee_id: int, start_date: str):
    payload = request.get_json(silent=True) or {}
    try:
        start = parse_iso_date(start_date)
        end = parse_iso_date(payload.get("end_date"))
    except ValueError:
        return {"error": "Dates must be YYYY-MM-DD"}, 400
    if start is None or end is None:
        return {"error": "start_date and end_date are required"}, 400

    try:
        return staff_service.close_pay_rate(employee_id=employee_id, start_date=start, end_date=end)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConstraintViolation as e:
        return {"error": str(e)}, 409

from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
import re
from eightbit.time_utils import parse_iso_date, parse_iso_datetime

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeMeta


# DECIMAL(9,2) upper bound
MAX_MONEY = Decimal("9999999.99")
# Employee_wage is DECIMAL(4,2)
MAX_WAGE = Decimal("99.99")

STATE_RE = re.compile(r"^[A-Z]{2}$")
PHONE_RE = re.compile(r"^[0-9]{1,11}$")
YEAR_RE = re.compile(r"^[0-9]{4}$")


class ValidationError(ValueError):
    """400-level input problem."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what callers are allowed to set
    - required_on_create: fields required when creating a row
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.column_attrs}


def _coerce_value(key: str, col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{key} must be an integer")
            if 'e' in stripped.lower():
                raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
            if '.' in stripped:
                raise ValidationError(f"{key} must be an integer (no decimals)")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{key} must be an integer")
        if isinstance(value, float):
            raise ValidationError(f"{key} must be an integer, not a decimal")
        raise ValidationError(f"{key} must be an integer")

    # Fixed-point money; floats go through str() so 59.99 stays 59.99
    if isinstance(coltype, Numeric):
        if isinstance(value, bool):
            raise ValidationError(f"{key} must be a decimal number")
        try:
            dec = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
        except InvalidOperation:
            raise ValidationError(f"{key} must be a decimal number")
        if not dec.is_finite():
            raise ValidationError(f"{key} must be a decimal number")
        scale = coltype.scale or 0
        if -dec.as_tuple().exponent > scale:
            raise ValidationError(f"{key} allows at most {scale} decimal places")
        return dec.quantize(Decimal(1).scaleb(-scale))

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        return bool(value)

    # DateTime is checked before Date; both accept ISO-8601 strings
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{key} must be an ISO-8601 datetime")
            if dt is None:
                raise ValidationError(f"{key} must be an ISO-8601 datetime")
            return dt
        raise ValidationError(f"{key} must be a datetime")

    if isinstance(coltype, Date):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                d = parse_iso_date(value)
            except ValueError:
                raise ValidationError(f"{key} must be an ISO-8601 date (YYYY-MM-DD)")
            if d is None:
                raise ValidationError(f"{key} must be an ISO-8601 date (YYYY-MM-DD)")
            return d
        raise ValidationError(f"{key} must be a date")

    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming data against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields, keyed by attribute name.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if payload.get(f) is None)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    attrs = _columns_by_key(model)

    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in attrs:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = attrs[k].columns[0]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(k, col, raw)

        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def _require_non_negative(patch: dict, *fields: str) -> None:
    for field in fields:
        value = patch.get(field)
        if value is not None and value < 0:
            raise ValidationError(f"{field} must be >= 0")


def enforce_rules_address(patch: dict) -> None:
    if "state" in patch:
        patch["state"] = patch["state"].upper()
        if not STATE_RE.match(patch["state"]):
            raise ValidationError("state must be a 2-letter code")


def enforce_rules_customer(patch: dict) -> None:
    if "phone_number" in patch:
        phone = re.sub(r"[\s().+-]", "", patch["phone_number"])
        if not PHONE_RE.match(phone):
            raise ValidationError("phone_number must be 1 to 11 digits")
        patch["phone_number"] = phone


def enforce_rules_game_item(patch: dict) -> None:
    if "release_year" in patch and not YEAR_RE.match(patch["release_year"]):
        raise ValidationError("release_year must be a 4-digit year")
    _require_non_negative(patch, "units_sold")


def enforce_rules_inventory(patch: dict) -> None:
    _require_non_negative(patch, "units_on_hand", "units_sold", "price")
    if patch.get("price") is not None and patch["price"] > MAX_MONEY:
        raise ValidationError(f"price cannot exceed {MAX_MONEY}")


def enforce_rules_invoice(patch: dict) -> None:
    _require_non_negative(patch, "item_amount", "subtotal", "tax")
    for field in ("subtotal", "tax"):
        if patch.get(field) is not None and patch[field] > MAX_MONEY:
            raise ValidationError(f"{field} cannot exceed {MAX_MONEY}")


def enforce_rules_pay_rate(patch: dict) -> None:
    wage = patch.get("wage")
    if wage is not None:
        if wage < 0:
            raise ValidationError("wage must be >= 0")
        if wage > MAX_WAGE:
            raise ValidationError(f"wage cannot exceed {MAX_WAGE}")
    start, end = patch.get("start_date"), patch.get("end_date")
    if start is not None and end is not None and end < start:
        raise ValidationError("end_date cannot be before start_date")


def enforce_rules_employee(patch: dict) -> None:
    dob = patch.get("dob")
    if dob is not None and dob > date.today():
        raise ValidationError("dob cannot be in the future")

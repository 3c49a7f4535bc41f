from flask import Blueprint, jsonify, request

from ..decorators import require_auth, require_permission
from ..permissions import VIEW_AUDIT_LOG, VIEW_REPORTS
from ..services import audit_service, reporting_service


reports_bp = Blueprint("reports", __name__, url_prefix="/api")


@reports_bp.get("/reports/<view_name>")
@require_auth
@require_permission(VIEW_REPORTS)
def report_view(view_name: str):
    try:
        report = reporting_service.run_view(view_name)
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 404


@reports_bp.get("/audit-log")
@require_auth
@require_permission(VIEW_AUDIT_LOG)
def audit_log():
    limit = request.args.get("limit", 100, type=int)
    entries = audit_service.list_audit_entries(
        table_name=request.args.get("table_name"),
        record_id=request.args.get("record_id", type=int),
        action_type=request.args.get("action_type"),
        limit=min(max(limit, 1), 1000),
    )
    return jsonify({"items": entries, "count": len(entries)}), 200

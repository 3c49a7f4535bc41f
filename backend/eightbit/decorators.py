# Overview: Request and permission decorators for API routes.

from functools import wraps
from flask import current_app, request, jsonify, g

from .permissions import role_has_permission


def _is_authenticated() -> bool:
    return hasattr(g, 'principal') and hasattr(g, 'roles')


def require_auth(f):
    """
    Require a bearer token listed in ACCESS_TOKENS.

    Sets the following Flask g attributes:
    - g.principal: acting principal, written to Audit_log.Changed_by
    - g.roles: role names granted to the token

    Returns 401 if the header is missing or the token is unknown.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1].strip()
        grant = current_app.config.get("ACCESS_TOKENS", {}).get(token)

        if not grant or not grant.get("principal"):
            current_app.logger.warning("Rejected token for %s %s", request.method, request.path)
            return jsonify({"error": "Invalid token"}), 401

        g.principal = grant["principal"]
        g.roles = tuple(grant.get("roles", ()))

        return f(*args, **kwargs)

    return decorated_function


def require_permission(permission_code: str):
    """Require a permission granted by one of the caller's roles."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            # Ensure @require_auth was called first
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            if not role_has_permission(g.roles, permission_code):
                current_app.logger.warning(
                    "Permission %s denied for %s on %s", permission_code, g.principal, request.path
                )
                return jsonify({
                    "error": "Permission denied",
                    "required_permission": permission_code,
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator

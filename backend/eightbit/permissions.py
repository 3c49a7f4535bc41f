# Overview: Role and permission definitions for the store API.

"""
Role grants.

game_manager holds exactly the four catalog operations. store_admin adds the
entities that previously had no access-controlled path.

Which bearer token maps to which roles is deployment configuration
(Config.ACCESS_TOKENS), not data in the store.
"""

CREATE_GAME_ITEM = "CREATE_GAME_ITEM"
READ_GAME_ITEM = "READ_GAME_ITEM"
UPDATE_GAME_ITEM = "UPDATE_GAME_ITEM"
DELETE_GAME_ITEM = "DELETE_GAME_ITEM"
MANAGE_CUSTOMERS = "MANAGE_CUSTOMERS"
MANAGE_STAFF = "MANAGE_STAFF"
MANAGE_INVENTORY = "MANAGE_INVENTORY"
VIEW_REPORTS = "VIEW_REPORTS"
VIEW_AUDIT_LOG = "VIEW_AUDIT_LOG"

CATALOG_PERMISSIONS = frozenset({
    CREATE_GAME_ITEM,
    READ_GAME_ITEM,
    UPDATE_GAME_ITEM,
    DELETE_GAME_ITEM,
})

ROLE_PERMISSIONS = {
    "game_manager": CATALOG_PERMISSIONS,
    "store_admin": CATALOG_PERMISSIONS | {
        MANAGE_CUSTOMERS,
        MANAGE_STAFF,
        MANAGE_INVENTORY,
        VIEW_REPORTS,
        VIEW_AUDIT_LOG,
    },
}


def permissions_for_roles(roles) -> set[str]:
    granted: set[str] = set()
    for role in roles or ():
        granted |= ROLE_PERMISSIONS.get(role, frozenset())
    return granted


def role_has_permission(roles, permission_code: str) -> bool:
    return permission_code in permissions_for_roles(roles)

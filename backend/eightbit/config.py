# backend/eightbit/config.py
from __future__ import annotations
import json
import os


def _load_access_tokens(raw: str | None) -> dict:
    """
    Parse EIGHTBIT_ACCESS_TOKENS.

    Expected shape: {"<token>": {"principal": "game_user@localhost", "roles": ["game_manager"]}}
    """
    if not raw:
        return {}
    tokens = json.loads(raw)
    if not isinstance(tokens, dict):
        raise ValueError("EIGHTBIT_ACCESS_TOKENS must be a JSON object")
    return tokens


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///8bit.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Principal written to Audit_log.Changed_by outside an authenticated request
    DEFAULT_PRINCIPAL = os.environ.get("EIGHTBIT_DEFAULT_PRINCIPAL", "system@localhost")

    # Credentials and role grants are deployment data, never schema data
    ACCESS_TOKENS = _load_access_tokens(os.environ.get("EIGHTBIT_ACCESS_TOKENS"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

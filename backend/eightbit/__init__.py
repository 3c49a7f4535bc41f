# backend/eightbit/__init__.py
import logging

from flask import Flask

from .config import Config
from .extensions import db, migrate


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))
    # Report rows keep their published column order
    app.json.sort_keys = False

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably; services
    # registers the catalog audit guard on import
    from . import models  # noqa: F401
    from .services import audit_service  # noqa: F401

    # Register blueprints
    from .routes.catalog import catalog_bp
    from .routes.reports import reports_bp
    from .routes.customers import customers_bp
    from .routes.staff import staff_bp
    from .routes.inventory import inventory_bp

    app.register_blueprint(catalog_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(staff_bp)
    app.register_blueprint(inventory_bp)

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app

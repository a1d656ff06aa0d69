from __future__ import annotations

import importlib
import logging
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS, MAX_SHIFT_HOURS
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .time_entries.controller import register as register_time_entries
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None) -> Flask:
    """Build the Flask app.

    Pass a ready container (in-memory repositories, fixed clock) to skip MySQL.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "SESSION_COOKIE_SECURE", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            max_shift_hours=getattr(settings, "MAX_SHIFT_HOURS", MAX_SHIFT_HOURS),
            blackout_enabled=bool(getattr(settings, "BLACKOUT_ENABLED", True)),
        )

    register_error_handlers(app)
    register_users(app, container)
    register_time_entries(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"ok": True})

    return app

from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .admin.controller import register as register_admin
from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import SCHEMA_PATH, apply_schema, list_tables

logger = logging.getLogger("crew_attendance")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            correction_pin=getattr(settings, "CORRECTION_PIN"),
            timezone=getattr(settings, "VENUE_TIMEZONE"),
            priority_members=getattr(settings, "PRIORITY_MEMBERS", ()),
        )

    register_attendance(app, container)
    register_admin(app, container)

    return app

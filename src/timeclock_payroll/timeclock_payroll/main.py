from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_KIOSK_BADGE_PREFIX, DEFAULT_LONG_RUNNING_HOURS
from .core.logging_config import configure_logging
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_default_rates, list_tables
from .database.connection import DBConfig
from .holidays.controller import register as register_holidays
from .kiosk.controller import register as register_kiosk
from .payroll.controller import register as register_payroll
from .rates.controller import register as register_rates
from .timeclock.controller import register as register_timeclock

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory.

    `container` lets tests inject services built on in-memory repositories;
    otherwise the MySQL-backed container is built from the settings module.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_default_rates(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            long_running_hours=int(getattr(settings, "LONG_RUNNING_SHIFT_HOURS", DEFAULT_LONG_RUNNING_HOURS)),
            badge_prefix=str(getattr(settings, "KIOSK_BADGE_PREFIX", DEFAULT_KIOSK_BADGE_PREFIX)),
        )

    app.extensions["timeclock_payroll"] = container

    register_timeclock(app, container)
    register_rates(app, container)
    register_holidays(app, container)
    register_payroll(app, container)
    register_kiosk(app, container)

    return app

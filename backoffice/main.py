from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module
from config.config import database_uri

from .attendance.controller import register as register_attendance
from .b2b.controller import register as register_b2b
from .container import build_container
from .database.bootstrap import init_schema, seed_demo_data
from .database.extensions import db
from .deliveries.controller import register as register_deliveries
from .finance.controller import register as register_finance
from .inventory.controller import register as register_inventory
from .orders.controller import register as register_orders
from .payroll.controller import register as register_payroll
from .planning.controller import register as register_planning
from .products.controller import register as register_products
from .reports.controller import register as register_reports
from .sales.controller import register as register_sales
from .users.controller import register as register_users
from .users.service import BootstrapAdmin

logger = logging.getLogger("backoffice")

LOG_FORMAT = "[backoffice] %(levelname)s %(name)s: %(message)s"


def configure_logging(debug: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)


def create_app(settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SQLALCHEMY_DATABASE_URI"] = database_uri(db_config, getattr(settings, "DATABASE_URL", None))
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    configure_logging(app.config["DEBUG"])
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    db.init_app(app)

    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
    with app.app_context():
        if auto_init_db:
            tables = init_schema()
            logger.info("schema ready (tables=%d)", len(tables))
        if auto_seed_db:
            seed_demo_data()

    username = getattr(settings, "SUPERADMIN_USERNAME", None)
    password = getattr(settings, "SUPERADMIN_PASSWORD", None)
    container = build_container(
        bootstrap_admin=BootstrapAdmin(username=username, password=password) if username and password else None,
        default_user_password=getattr(settings, "DEFAULT_USER_PASSWORD", "password123"),
        db_retries=int(getattr(settings, "DB_RETRIES", 2)),
        db_retry_delay=float(getattr(settings, "DB_RETRY_DELAY_SECONDS", 1.0)),
    )

    register_users(app, container)
    register_products(app, container)
    register_inventory(app, container)
    register_sales(app, container)
    register_orders(app, container)
    register_deliveries(app, container)
    register_b2b(app, container)
    register_finance(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_planning(app, container)
    register_reports(app, container)

    return app

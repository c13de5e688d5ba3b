from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .core.constants import DEFAULT_API_USER_ID
from .core.exceptions import DomainError, LifecycleError, NotFoundError, ValidationError
from .core.rules import ClockRules
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .container import Container, build_container
from .approvals.controller import register as register_approvals
from .clock.controller import register as register_clock
from .employees.controller import register as register_employees
from .pay_periods.controller import register as register_pay_periods
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).resolve().parents[2]


def register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int):
        return jsonify({"error": message}), status

    @app.errorhandler(ValidationError)
    def _validation(err: ValidationError):
        return _error(str(err), 400)

    @app.errorhandler(NotFoundError)
    def _not_found(err: NotFoundError):
        return _error(str(err), 404)

    @app.errorhandler(LifecycleError)
    def _lifecycle(err: LifecycleError):
        return _error(str(err), 409)

    @app.errorhandler(HTTPException)
    def _http(err: HTTPException):
        return _error(err.description or err.name, err.code or 500)

    @app.errorhandler(DomainError)
    def _domain(err: DomainError):
        logger.error("request failed: %s", err)
        return _error("Internal server error", 500)

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        logger.exception("unhandled error")
        return _error("Internal server error", 500)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

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
            apply_schema(db_config, schema_path=_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_ROOT / "database" / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            rules=ClockRules.from_settings(settings),
            api_user_id=int(getattr(settings, "API_USER_ID", DEFAULT_API_USER_ID)),
        )

    app.extensions["timeclock"] = container
    register_error_handlers(app)
    register_clock(app, container)
    register_employees(app, container)
    register_approvals(app, container)
    register_pay_periods(app, container)
    register_payroll(app, container)

    return app

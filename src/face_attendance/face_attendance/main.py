from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .biometrics.extractor import FaceExtractor
from .common.logging_utils import configure_logging
from .common.web import error_response
from .container import Container, build_container
from .core.exceptions import DomainError, ExtractionUnavailable, InternalError, StoreError
from .core.settings import FacilitySettings
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .reconciliation.controller import register as register_reconciliation
from .reconciliation.scheduler import ReconciliationScheduler

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _preload_models(extractor: FaceExtractor) -> None:
    try:
        extractor.ensure_loaded()
    except ExtractionUnavailable:
        logger.warning("Face models not loaded at startup; will retry on first use")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return error_response(e)

    @app.errorhandler(StoreError)
    def handle_store_error(e: StoreError):
        logger.error("Data store error: %s", e)
        return error_response(InternalError())

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error")
        return error_response(InternalError())


def register_routes(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "API is running"})

    register_employees(app, container)
    register_attendance(app, container)
    register_reconciliation(app, container)
    register_error_handlers(app)


def create_app(*, settings: Any = None, extractor: Optional[FaceExtractor] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    if settings is None:
        settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    db_config = getattr(settings, "DB_CONFIG")
    facility = FacilitySettings.from_module(settings)

    logger.info(
        "db=%s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(db_config=db_config, settings=facility, extractor=extractor)
    app.extensions["face_attendance"] = container

    if bool(getattr(settings, "PRELOAD_MODELS", True)):
        container.verification_executor.submit(_preload_models, container.extractor)

    if facility.scheduler_enabled:
        scheduler = ReconciliationScheduler(container.reconciliation_job, run_at=facility.reconcile_at)
        scheduler.start()
        atexit.register(scheduler.shutdown)

    register_routes(app, container)
    return app

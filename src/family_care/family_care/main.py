from __future__ import annotations

import importlib
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .announcements.controller import register as register_announcements
from .care_logs.controller import register as register_care_logs
from .common.app_logger import get_logger, setup_logging
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS, MAX_UPLOAD_MB
from .database.bootstrap import apply_schema, ensure_sample_staff, list_tables
from .donations.controller import register as register_donations
from .events.controller import register as register_events
from .families.controller import register as register_families
from .imports.controller import register as register_imports
from .organization.controller import register as register_organization
from .staff.controller import register as register_staff
from .uploads.controller import register as register_uploads

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a prebuilt container (tests) to skip MySQL bootstrap entirely.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    max_upload_mb = int(getattr(settings, "MAX_UPLOAD_MB", MAX_UPLOAD_MB))
    app.config["MAX_CONTENT_LENGTH"] = max_upload_mb * 1024 * 1024
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))
    app.json.sort_keys = False

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

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=PROJECT_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            added = ensure_sample_staff(db_config)
            if added:
                logger.info("sample staff created (%d)", added)

        container = build_container(
            db_config=db_config,
            upload_dir=str(getattr(settings, "UPLOAD_DIR")),
            object_dir=str(getattr(settings, "OBJECT_DIR")),
        )

    register_error_handlers(app)
    register_staff(app, container)
    register_families(app, container)
    register_imports(app, container)
    register_care_logs(app, container)
    register_announcements(app, container)
    register_events(app, container)
    register_organization(app, container)
    register_donations(app, container)
    register_uploads(app, container)

    return app

from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container, build_local_store, build_remote_store
from .database.bootstrap import apply_schema
from .logging_config import setup_logging
from .settings.controller import register as register_settings
from .stats.controller import register as register_stats
from .subjects.controller import register as register_subjects
from .timetable.controller import register as register_timetable
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_DIR", "logs"))

    if container is None:
        local_kind = getattr(settings, "LOCAL_STORE", "memory")
        db_config = getattr(settings, "DB_CONFIG", None)
        if local_kind == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)

        container = build_container(
            local_store=build_local_store(local_kind, db_config),
            remote_store=build_remote_store(
                getattr(settings, "REMOTE_STORE", "memory"),
                getattr(settings, "REMOTE_STORE_URL", None),
                getattr(settings, "REMOTE_STORE_TOKEN", None),
            ),
        )
        logger.info("settings=%s local=%s remote=%s", settings_module, local_kind, getattr(settings, "REMOTE_STORE", "memory"))
        atexit.register(container.shutdown)

    app.extensions["class_attendance"] = container

    register_users(app, container)
    register_settings(app, container)
    register_subjects(app, container)
    register_timetable(app, container)
    register_attendance(app, container)
    register_stats(app, container)

    return app

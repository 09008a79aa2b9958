from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone

from flask import Flask, jsonify

from sqlalchemy import event
from sqlalchemy.engine import Engine

from .extensions import db, migrate


@event.listens_for(Engine, "connect")
def _set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    if isinstance(dbapi_connection, sqlite3.Connection):
        cur = dbapi_connection.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.execute("PRAGMA journal_mode=WAL")
        cur.execute("PRAGMA synchronous=NORMAL")
        cur.execute("PRAGMA busy_timeout=30000")
        cur.close()


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger(__name__).setLevel(level)


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object("config.Config")
    if test_config:
        app.config.update(test_config)

    _configure_logging(app)
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if uri.startswith("sqlite:"):
        opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {}))
        ca = dict(opts.get("connect_args", {}))
        ca.setdefault("check_same_thread", False)
        ca.setdefault("timeout", 30)
        opts["connect_args"] = ca
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = opts

    db.init_app(app)
    migrate.init_app(app, db)

    from .models.user import User  # noqa: F401
    from .models.cat import Cat  # noqa: F401
    from .models.photo import Photo  # noqa: F401

    from .errors import register_error_handlers
    register_error_handlers(app)

    from .users.routes import users_bp
    app.register_blueprint(users_bp)

    from .cats.routes import cats_bp
    app.register_blueprint(cats_bp)

    from .photos.routes import photos_bp
    app.register_blueprint(photos_bp)

    from .cli import (
        init_db_cmd,
        reset_db_cmd,
        purge_data_cmd,
        seed_demo_cmd,
        seed_small_cmd,
    )

    app.cli.add_command(init_db_cmd)
    app.cli.add_command(reset_db_cmd)
    app.cli.add_command(purge_data_cmd)
    app.cli.add_command(seed_demo_cmd)
    app.cli.add_command(seed_small_cmd)

    @app.get("/health")
    def health():
        return jsonify(
            status="ok", timestamp=datetime.now(timezone.utc).isoformat()
        )

    @app.teardown_request
    def _teardown_request(_exc):
        try:
            if _exc is not None:
                db.session.rollback()
        finally:
            db.session.remove()

    return app

"""Live-ops console Flask application factory."""

from __future__ import annotations

from typing import Any

from flask import Flask, current_app, g

from .config import AppConfig, load_config
from .database import create_db_engine, init_schema
from .repositories import RecordStore


def create_app(config: AppConfig | None = None) -> Flask:
    """Build and configure the console Flask application instance.

    Args:
        config: Optional :class:`AppConfig` override. When ``None`` the helper
            loads configuration via :func:`load_config`, which honours the
            ``LIVEOPS_*`` environment variables.

    Returns:
        Flask: Fully initialised application. The instance carries a
        SQLAlchemy engine stored on ``app.config['DB_ENGINE']`` for the
        record store.
    """

    app = Flask(__name__, instance_relative_config=True)
    app_config = config or load_config()
    app.config.update(
        SECRET_KEY=app_config.secret_key,
        MAX_CONTENT_LENGTH=app_config.max_content_length,
        MAX_ATTACHMENT_BYTES=app_config.max_attachment_bytes,
        DISTINCT_KOC_COUNT=app_config.distinct_koc_count,
    )
    app.json.sort_keys = False
    app.json.ensure_ascii = False
    engine = create_db_engine(app_config.database_url)
    init_schema(engine)
    app.config["DB_ENGINE"] = engine

    from .blueprints.expenses import expenses_bp
    from .blueprints.lookups import lookups_bp
    from .blueprints.team_reports import team_reports_bp

    app.register_blueprint(expenses_bp)
    app.register_blueprint(team_reports_bp)
    app.register_blueprint(lookups_bp)

    @app.teardown_appcontext
    def teardown(_: Any) -> None:
        g.pop("record_store", None)

    @app.cli.command("init-db")
    def init_db_command() -> None:
        """Initialize the database tables."""

        init_schema(engine)
        import click

        click.echo("Database initialized.")

    return app


def get_record_store() -> RecordStore:
    """Return a record store bound to the active Flask request.

    The instance is cached on :mod:`flask.g` so blueprints share it within a
    request lifecycle.
    """

    if "record_store" not in g:
        g.record_store = RecordStore(current_app.config["DB_ENGINE"])
    return g.record_store


__all__ = ["create_app", "AppConfig", "get_record_store"]

import logging
import os
from typing import Optional

from flask import Flask
from flask_migrate import Migrate
from sqlalchemy import inspect

from validation_models.config import get_config
from validation_models.models.catalog import db
from validation_models.routes.products import products_bp


_LOG_LEVELS = {
    'CRITICAL': logging.CRITICAL,
    'ERROR': logging.ERROR,
    'WARNING': logging.WARNING,
    'INFO': logging.INFO,
    'DEBUG': logging.DEBUG,
    'NOTSET': logging.NOTSET,
}

migrate = Migrate()


def configure_logging():
    """Configure application logging once, respecting existing handlers."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_name = os.getenv('APP_LOG_LEVEL', 'INFO').upper()
    level = _LOG_LEVELS.get(level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )


def _ensure_schema(application: Flask) -> None:
    """Create SQLite tables on startup; other databases must be migrated."""

    database_uri = application.config.get("SQLALCHEMY_DATABASE_URI", "")
    with application.app_context():
        if database_uri.startswith("sqlite:"):
            sqlite_path = database_uri.partition("sqlite:///")[2]
            sqlite_dir = os.path.dirname(sqlite_path)
            if sqlite_dir:
                os.makedirs(sqlite_dir, exist_ok=True)
            db.create_all()
            return

        inspector = inspect(db.engine)
        if not inspector.has_table("product"):
            raise RuntimeError(
                "The database schema is missing. "
                "Run your migrations (e.g. `flask --app validation_models.main db upgrade`)."
            )


def create_app(config: Optional[object] = None) -> Flask:
    """Build the reference catalog application.

    ``config`` is any object accepted by ``app.config.from_object``; it
    defaults to :func:`validation_models.config.get_config`.
    """

    configure_logging()

    app = Flask(__name__)
    app.config.from_object(config if config is not None else get_config())
    # Projections are ordered; keep the declared field order on the wire.
    app.json.sort_keys = False

    db.init_app(app)
    migrate.init_app(app, db)
    _ensure_schema(app)

    app.register_blueprint(products_bp, url_prefix='/api')
    logging.getLogger(__name__).info(
        "Catalog API ready (database=%s)", app.config.get("SQLALCHEMY_DATABASE_URI")
    )
    return app


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=5001, debug=application.config.get("DEBUG", False))

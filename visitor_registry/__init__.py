# visitor_registry/__init__.py
from __future__ import annotations

import logging
import os
import sys
from typing import Any, Optional

import click
from flask import Flask, jsonify
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from werkzeug.middleware.proxy_fix import ProxyFix

from .errors import register_error_handlers
from .extensions import cors, db
from .routes import contact_bp, health_bp
from .services import VisitorRegistrationHandler, VisitorStore

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",  # React dev server
    "http://localhost:5173",  # Vite dev server
    "https://codedevja.github.io",  # frontend on GitHub Pages
]


# --- Config ------------------------------------------------------------------
def _get_allowed_origins(app: Flask) -> list[str]:
    """Default CORS allow-list plus any extra origins from config."""
    extra = app.config.get("CORS_ALLOWED_ORIGINS") or ""
    extra_list = [o.strip() for o in extra.split(",") if o.strip()]
    return sorted(set(DEFAULT_ALLOWED_ORIGINS + extra_list))


def _load_config(app: Flask, config_object: Optional[str | Any]) -> None:
    if config_object is None:
        config_object = os.getenv("CONFIG_CLASS", "visitor_registry.config.Config")

    if isinstance(config_object, str):
        # load "package.ClassName"
        module, _, cls = config_object.rpartition(".")
        conf = getattr(__import__(module, fromlist=[cls]), cls) if module else config_object
        app.config.from_object(conf)
    else:
        app.config.from_object(config_object)

    app.config.setdefault("POSTGRES_CONN_STRING", "")
    app.config.setdefault("API_PREFIX", "/api")
    app.config.setdefault("LOG_LEVEL", "INFO")


def _configure_logging(app: Flask) -> None:
    """JSON logs to stdout."""
    level = str(app.config["LOG_LEVEL"]).upper()
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt='{"ts":"%(asctime)s","level":"%(levelname)s","msg":"%(message)s","name":"%(name)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _configure_cors(app: Flask) -> None:
    """Let the listed frontends call the API with credentials."""
    cors.init_app(
        app,
        resources={app.config["API_PREFIX"] + "/*": {"origins": _get_allowed_origins(app)}},
        supports_credentials=True,
        allow_headers="*",
    )


def _configure_proxy(app: Flask) -> None:
    """Respect X-Forwarded-* from the hosting platform's proxy."""
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore


def _init_database(app: Flask) -> None:
    conn_string = app.config["POSTGRES_CONN_STRING"]
    if not conn_string:
        app.logger.error(
            "POSTGRES_CONN_STRING is not set; visitor registrations will fail until it is configured."
        )
    elif _usable_database_url(app, conn_string):
        app.config["SQLALCHEMY_DATABASE_URI"] = conn_string
        db.init_app(app)

    app.extensions["visitor_registration"] = VisitorRegistrationHandler(
        conn_string,
        logger=app.logger,
        engine_factory=(lambda: db.engine) if _database_ready(app) else None,
    )


def _usable_database_url(app: Flask, conn_string: str) -> bool:
    """Parse the URL and load its dialect so a bad value cannot stop the app from booting."""
    try:
        make_url(conn_string).get_dialect()
    except ArgumentError as e:
        app.logger.error(
            "POSTGRES_CONN_STRING is not a usable SQLAlchemy URL (%s); visitor registrations will fail.", e
        )
        return False
    return True


def _database_ready(app: Flask) -> bool:
    return "sqlalchemy" in app.extensions


def _register_blueprints(app: Flask) -> None:
    prefix = app.config["API_PREFIX"]
    for bp in (contact_bp, health_bp):
        app.register_blueprint(bp, url_prefix=prefix)
        app.logger.debug("Registered blueprint %s at %s", bp.name, prefix)


def _register_cli(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Create the visitors table if it does not exist."""
        if not app.config["POSTGRES_CONN_STRING"]:
            raise click.ClickException("POSTGRES_CONN_STRING is not configured.")
        if not _database_ready(app):
            raise click.ClickException("POSTGRES_CONN_STRING is not a usable SQLAlchemy URL.")
        store = VisitorStore(db.engine)
        try:
            with store.engine.connect() as connection:
                store.ensure_schema(connection)
                connection.commit()
        except SQLAlchemyError as e:
            raise click.ClickException(f"Could not create the visitors table: {e}") from e
        click.echo(f"Table '{store.table.name}' is ready.")


# --- Application Factory ------------------------------------------------------
def create_app(config_object: Optional[str | Any] = None) -> Flask:
    """
    Standard Flask application factory.

    `config_object` may be:
      - a config object or class
      - dotted path to a config class (e.g., "visitor_registry.config.Config")
      - None (then CONFIG_CLASS env or visitor_registry.config.Config)
    """
    app = Flask(__name__)

    _load_config(app, config_object)

    # Core middleware/logging/CORS
    _configure_logging(app)
    _configure_proxy(app)
    _configure_cors(app)

    _init_database(app)
    _register_blueprints(app)
    _register_cli(app)
    register_error_handlers(app)

    @app.get("/")
    def root():
        return jsonify(
            {"service": "visitor-registry", "message": f"See {app.config['API_PREFIX']}/health"}
        ), 200

    return app

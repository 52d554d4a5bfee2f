import os
from pathlib import Path

from flask import Flask, redirect, url_for

from .extensions import db, migrate
from .utils.category_search import highlight_match
from .utils.pagination import build_pagination_links, build_pagination_url


def create_app(test_config=None):
    app = Flask(__name__, instance_relative_config=True)

    default_sqlite_path = Path(app.instance_path) / "catalog.sqlite"

    database_uri = os.environ.get("DATABASE_URI", "")
    if not database_uri.strip():
        database_uri = f"sqlite:///{default_sqlite_path}"

    secret_key = os.environ.get("SECRET_KEY")
    if not secret_key or not secret_key.strip():
        secret_key = "dev-secret-key"

    app.config.from_mapping(
        SECRET_KEY=secret_key,
        SQLALCHEMY_DATABASE_URI=database_uri,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )

    # Ensure the instance folder exists so SQLite can create the database file.
    default_sqlite_path.parent.mkdir(parents=True, exist_ok=True)

    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    register_extensions(app)
    register_blueprints(app)
    register_commands(app)

    @app.context_processor
    def inject_pagination_helpers():
        return {
            "build_pagination_links": build_pagination_links,
            "pagination_build_url": build_pagination_url,
        }

    app.add_template_filter(highlight_match, "highlight")

    @app.route("/")
    def index():
        return redirect(url_for("categories.list_categories"))

    return app


def register_extensions(app: Flask) -> None:
    db.init_app(app)
    migrate.init_app(app, db)


def register_blueprints(app: Flask) -> None:
    from .views import categories

    app.register_blueprint(categories.bp)


def register_commands(app: Flask) -> None:
    from .models import ensure_seed_data
    from .extensions import db

    @app.cli.command("seed")
    def seed() -> None:
        """Seed the database with the factory categories."""
        ensure_seed_data()
        print("Seed data ensured.")

    @app.cli.command("init-db")
    def init_db() -> None:
        """Create database tables based on the current models."""
        db.create_all()
        print("Database tables created.")

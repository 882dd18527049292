import logging
import os
from datetime import datetime

from flask import Flask, render_template, request
from dotenv import load_dotenv

from app.lunchly.config import load_config
from app.lunchly.db import init_db, teardown_db_session
from app.lunchly.errors import ErrorKind, StoreError
from app.lunchly.models import Base  # noqa: F401  (must load before any module models)
from app.lunchly.routes import bp as routes_bp
from app.lunchly.modules.customers.admin import bp as customers_bp
from app.lunchly.modules.reservations.admin import bp as reservations_bp

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONSTRAINT_VIOLATION: 500,
    ErrorKind.CONNECTION_FAILURE: 500,
}

MESSAGE_BY_KIND = {
    ErrorKind.CONSTRAINT_VIOLATION: "The change could not be saved. Check that all required fields are filled in.",
    ErrorKind.CONNECTION_FAILURE: "The database is unavailable right now. Please try again shortly.",
}


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_mapping(load_config())

    from app.lunchly.security import ensure_csrf_token, validate_csrf

    @app.context_processor
    def _inject_csrf() -> dict:
        return {"csrf_token": ensure_csrf_token()}

    @app.template_filter("datetimeformat")
    def _datetimeformat_filter(value, format: str = "%Y-%m-%d %H:%M") -> str:
        if value is None:
            return "—"
        if isinstance(value, datetime):
            return value.strftime(format)
        return str(value)

    @app.before_request
    def _csrf_guard():
        if request.path.startswith(("/static/", "/health", "/healthz")):
            return None
        ensure_csrf_token()
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            if not validate_csrf(request):
                return render_template("errors/400.html", message="CSRF token missing or invalid."), 400

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(reservations_bp)

    app.teardown_appcontext(teardown_db_session)

    @app.errorhandler(StoreError)
    def _err_store(e: StoreError):  # type: ignore[no-redef]
        status = STATUS_BY_KIND.get(e.kind, 500)
        if status == 404:
            app.logger.info("Not found: %s (%s)", e.message, request.path)
            return render_template("errors/404.html", message=e.message), 404
        app.logger.error("Store failure (%s) on %s %s", e.kind.value, request.method, request.path, exc_info=e)
        return render_template("errors/500.html", message=MESSAGE_BY_KIND.get(e.kind)), status

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        return render_template("errors/404.html", message=None), 404

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 on %s %s", request.method, request.path)
        return render_template("errors/500.html", message=None), 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app

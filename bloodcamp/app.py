import logging
import os
import hmac
import secrets

from flask import Flask, abort, request, session
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from .shared.passwords import hash_password
from .shared.time import fmt_dt, fmt_date


def create_app():
    app = Flask(__name__, template_folder="templates")
    app.secret_key = os.getenv("SECRET_KEY", "dev")
    app.config["PREFERRED_URL_SCHEME"] = "https"
    app.jinja_env.filters["fmt_dt"] = fmt_dt
    app.jinja_env.filters["fmt_date"] = fmt_date

    def generate_csrf_token():
        token = session.get("_csrf_token")
        if not token:
            token = secrets.token_hex(16)
            session["_csrf_token"] = token
        return token

    app.jinja_env.globals["csrf_token"] = generate_csrf_token

    @app.before_request
    def check_csrf_token():
        # the JSON email function is called cross-origin and carries no form
        if request.method != "POST" or request.blueprint == "functions":
            return None
        expected = session.get("_csrf_token")
        supplied = request.form.get("csrf_token") or ""
        if not expected or not hmac.compare_digest(supplied.encode(), expected.encode()):
            app.logger.warning(f"[CSRF-REJECT] path={request.path}")
            abort(400)
        return None

    DB_USER = os.getenv("DB_USER", "bloodcamp")
    DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
    DB_HOST = os.getenv("DB_HOST", "db")
    DB_NAME = os.getenv("DB_NAME", "bloodcamp")
    DATABASE_URL = os.getenv(
        "DATABASE_URL",
        f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@{DB_HOST}/{DB_NAME}",
    )

    app.config["SQLALCHEMY_DATABASE_URI"] = DATABASE_URL
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["CAMP_TIMEZONE"] = os.getenv("CAMP_TIMEZONE", "Asia/Kolkata")

    app.config["ADMIN_USERNAME"] = os.getenv("ADMIN_USERNAME", "admin")
    app.config["ADMIN_PASSWORD_HASH"] = _resolve_admin_hash()
    app.config["ADMIN_MAX_ATTEMPTS"] = int(os.getenv("ADMIN_MAX_ATTEMPTS", "3"))
    app.config["ADMIN_LOCKOUT_MINUTES"] = int(os.getenv("ADMIN_LOCKOUT_MINUTES", "15"))
    app.config["ADMIN_SESSION_HOURS"] = int(os.getenv("ADMIN_SESSION_HOURS", "8"))

    static_dir = os.path.join(app.root_path, "static")
    app.config["CERTIFICATE_LAYOUT"] = os.getenv("CERTIFICATE_LAYOUT", "centered")
    app.config["CERTIFICATE_BACKGROUND"] = os.getenv(
        "CERTIFICATE_BACKGROUND",
        os.path.join(static_dir, "certificates", "ivf-blood-donation.png"),
    )
    app.config["CERTIFICATE_FONT"] = os.getenv(
        "CERTIFICATE_FONT", os.path.join(static_dir, "fonts", "ivffont.ttf")
    )

    if not app.config["ADMIN_PASSWORD_HASH"]:
        logging.warning(
            "[AUTH] no admin password configured; admin login is disabled"
        )

    db.init_app(app)

    @app.get("/health")
    def health():  # pragma: no cover - simple healthcheck
        return "OK", 200

    from .routes.registration import bp as registration_bp
    from .routes.auth import bp as auth_bp
    from .routes.admin import bp as admin_bp
    from .routes.functions import bp as functions_bp

    app.register_blueprint(registration_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(functions_bp)

    return app


def _resolve_admin_hash() -> str | None:
    """Prefer a pre-computed hash; fall back to hashing ADMIN_PASSWORD once."""

    configured = os.getenv("ADMIN_PASSWORD_HASH")
    if configured:
        return configured
    plain = os.getenv("ADMIN_PASSWORD")
    if plain:
        return hash_password(plain)
    return None

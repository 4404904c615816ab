# backend/app.py

import logging
import os
from datetime import timedelta

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from .. import aggregation
from . import db, records
from .auth import auth_bp, json_body
from .config import load_settings
from .errors import ValidationError, register_error_handlers
from .guard import auth_required

logger = logging.getLogger("finance-backend")

API_PREFIX = "/api"
# Flask keys a caller may set directly; everything else goes through Settings
FLASK_KEYS = ("TESTING", "DEBUG", "PROPAGATE_EXCEPTIONS")


# ---------------- Record Endpoints ----------------
def register_record_routes(app, kind):
    """GET/POST /api/<table> and DELETE /api/<table>/<id> for one record kind."""

    @auth_required
    def list_records(owner_id):
        return jsonify(records.list_by_owner(kind, owner_id))

    @auth_required
    def create_record(owner_id):
        record = records.create(kind, owner_id, json_body())
        return jsonify(record), 201

    @auth_required
    def delete_record(record_id, owner_id):
        records.delete_by_owner_and_id(kind, owner_id, record_id)
        return jsonify({"message": f"{kind.name.capitalize()} deleted"})

    base = f"{API_PREFIX}/{kind.table}"
    app.add_url_rule(base, f"list_{kind.table}", list_records, methods=["GET"])
    app.add_url_rule(base, f"create_{kind.table}", create_record, methods=["POST"])
    app.add_url_rule(f"{base}/<int:record_id>", f"delete_{kind.table}", delete_record, methods=["DELETE"])


# ---------------- Flask App Factory ----------------
def create_app(config=None):
    """
    Build the API. `config` overrides environment settings (JWT_SECRET_KEY,
    DB_PATH, TOKEN_EXPIRES_HOURS, CORS_ORIGINS, LOG_LEVEL) and may set the
    Flask flags in FLASK_KEYS.
    """
    settings = load_settings(config)

    logging.basicConfig(level=settings.log_level)

    app = Flask(__name__)
    app.config.update({k: v for k, v in (config or {}).items() if k in FLASK_KEYS})
    app.config["DB_PATH"] = settings.db_path
    app.config["JWT_SECRET_KEY"] = settings.jwt_secret_key
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = (
        timedelta(hours=settings.token_expires_hours) if settings.token_expires_hours else False
    )
    app.json.sort_keys = False
    app.settings = settings
    JWTManager(app)

    # CORS
    CORS(app, resources={r"/api/*": {"origins": settings.cors_origins}})

    register_error_handlers(app)
    app.register_blueprint(auth_bp, url_prefix=API_PREFIX)
    for kind in records.KINDS.values():
        register_record_routes(app, kind)

    # Initialize DB
    db.init_db(settings.db_path)
    logger.info(f"Database initialized at {settings.db_path}")

    app.teardown_appcontext(db.close_db)

    # ---------------- Core Endpoints ----------------
    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.route(f"{API_PREFIX}/summary", methods=["GET"])
    @auth_required
    def summary(owner_id):
        try:
            window = aggregation.parse_window(
                request.args.get("window"), request.args.get("start"), request.args.get("end")
            )
        except ValueError as e:
            raise ValidationError(str(e))

        result = aggregation.summarize(
            records.list_by_owner(records.EXPENSE, owner_id),
            records.list_by_owner(records.INCOME, owner_id),
            records.list_by_owner(records.INVESTMENT, owner_id),
            window,
        )
        return jsonify(result.to_dict())

    return app


# ---------------- Run ----------------
if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))

import logging
import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from marketplace.config import Config
from marketplace.db import db
from marketplace.errors import MarketplaceError
from marketplace.init_db import ensure_admin
from marketplace.routes.admin import bp as admin_bp
from marketplace.routes.auth import bp as auth_bp
from marketplace.routes.listings import bp as listings_bp
from marketplace.routes.orders import bp as orders_bp
from marketplace.routes.requests import bp as requests_bp
from marketplace.utils.responses import err


def register_error_handlers(app: Flask):
    @app.errorhandler(MarketplaceError)
    def handle_domain_error(e: MarketplaceError):
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return err(e.name.lower().replace(" ", "_"), e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        db.session.rollback()
        app.logger.exception("unhandled error: %s", e)
        return err("internal_error", str(e), 500)


def create_app(overrides=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    app.config["BOOTSTRAP_ADMIN"] = True
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(level=app.config["LOG_LEVEL"])

    db.init_app(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(listings_bp)
    app.register_blueprint(requests_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(admin_bp)
    register_error_handlers(app)

    @app.after_request
    def add_cors_headers(resp):
        resp.headers["Access-Control-Allow-Origin"] = "*"
        resp.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        resp.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return resp

    @app.get("/")
    def root():
        return jsonify(service="marketplace", status="ok")

    @app.get("/health")
    def health():
        return jsonify(ok=True), 200

    with app.app_context():
        db.create_all()
        if app.config["BOOTSTRAP_ADMIN"]:
            ensure_admin(
                db.session,
                app.config["ADMIN_NAME"],
                app.config["ADMIN_EMAIL"],
                app.config["ADMIN_PASSWORD"],
            )

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 8000)), debug=True)

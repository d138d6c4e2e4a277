import logging
import time
from collections.abc import Mapping

from flask import Flask, g, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import Config, engine_options
from .errors import ApiError
from .extensions import db
from .routes import bp
from .routes_scheduling import bp_scheduling


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_object(Config)
    app.config.from_envvar("APP_SETTINGS", silent=True)
    if isinstance(config_object, Mapping):
        app.config.from_mapping(config_object)
    elif config_object:
        app.config.from_object(config_object)

    app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", engine_options(app.config))

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)

    CORS(app,
         origins=app.config["CORS_ORIGINS"],
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )

    register_request_hooks(app)
    register_security_headers(app)
    register_error_handlers(app)

    app.register_blueprint(bp)
    app.register_blueprint(bp_scheduling)

    return app


def register_request_hooks(app):
    @app.before_request
    def start_deadline():
        g.request_deadline = time.monotonic() + app.config["REQUEST_TIMEOUT_SECONDS"]


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Cross-Origin-Opener-Policy": "same-origin",
}


def register_security_headers(app):
    @app.after_request
    def add_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(exc):
        if exc.status_code >= 500:
            app.logger.error("Request failed with %s: %s", exc.error, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({"error": exc.name.lower().replace(" ", "_"), "message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        app.logger.exception("Unhandled error", exc_info=exc)
        return jsonify({"error": "internal_error", "message": "Internal server error"}), 500

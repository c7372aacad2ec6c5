"""
devconnect: JSON API for a small developer social network.

Serve with a WSGI server, e.g.
    gunicorn -w 4 -b 0.0.0.0:5000 app:app
"""

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from .auth import clear_stale_cookie, load_identity
from .config import Config
from .db import close_db, init_db
from .errors import register_error_handlers
from .routes import register_blueprints

logger = logging.getLogger("devconnect")


def log_request():
    logger.info("%s %s", request.method, request.path)


def set_security_headers(response):
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=()")
    return response


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(level=app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.before_request(log_request)
    app.before_request(load_identity)
    app.after_request(clear_stale_cookie)
    app.after_request(set_security_headers)
    app.teardown_appcontext(close_db)

    register_error_handlers(app)
    register_blueprints(app)

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({"status": "OK"})

    @app.route("/ping", methods=["GET"])
    def ping():
        return jsonify({"message": "pong"})

    with app.app_context():
        init_db()

    return app

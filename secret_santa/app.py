# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from secret_santa.infrastructure.container import Container, container as default_container
from secret_santa.infrastructure.db import init_db
from secret_santa.shared.config import load_config
from secret_santa.shared.logging import logger, setup_logging
from secret_santa.shared.middleware import configure_error_handling, configure_request_logging


def create_app(container: Container | None = None, *, create_schema: bool = True) -> Flask:
    config = load_config()
    setup_logging(config.log_level, debug_mode=config.debug_logging, log_file=config.log_file)
    container = container or default_container

    if create_schema:
        init_db()

    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.groups_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        return resp

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=not load_config().is_production())

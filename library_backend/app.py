# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import os

from flask import Flask
from flask_cors import CORS

from library_backend.container import Container
from library_backend.infrastructure.auth import install_token_service
from library_backend.infrastructure.observability import install_metrics
from library_backend.infrastructure.seed import ensure_default_account
from library_backend.shared.config import AppConfig, load_config
from library_backend.shared.logging import logger, setup_logging
from library_backend.shared.middleware.error_handler import configure_error_handling
from library_backend.shared.middleware.rate_limit import CONFIG_KEY as SECURITY_CONFIG_KEY
from library_backend.shared.middleware.request_logger import configure_request_logging

CONTAINER_KEY = "library_backend.container"


def create_app(config: AppConfig | None = None, container: Container | None = None) -> Flask:
    config = config or (container.config if container else load_config())
    container = container or Container(config)

    setup_logging(debug_mode=config.debug_logging)

    app = Flask(__name__)
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    install_metrics(app, enabled=config.observability.metrics_enabled)

    app.json.sort_keys = False
    app.extensions[CONTAINER_KEY] = container
    app.extensions[SECURITY_CONFIG_KEY] = config.security
    # Fails here, at startup, when JWT_SECRET is missing.
    install_token_service(app, container.token_service)

    cors_kwargs: dict[str, object] = {
        "resources": {
            r"/api/*": {"origins": config.security.allowed_origins},
            r"/books*": {"origins": config.security.allowed_origins},
        }
    }
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.books_controller.as_blueprint())

    ensure_default_account(container.register_user_use_case, config.auth)

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(f"Flask app initialized (env={config.app_env})")
    logger.debug(f"Effective config: {config.redacted()}")
    return app


def main() -> None:
    app = create_app()
    port = int(os.environ.get("PORT", "5000"))
    app.run(host=os.environ.get("HOST", "127.0.0.1"), port=port, threaded=True)


if __name__ == "__main__":
    main()

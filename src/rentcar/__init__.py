import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from rentcar.config.config import Config
from rentcar.services.auth_service import AuthService
from rentcar.services.database import init_backend
from rentcar.routes import register_blueprints

from typing import Optional

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"status": "error", "message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Internal server error: %s", error)
        return jsonify({"status": "error", "message": "Internal server error"}), 500


def create_app(config_object: Optional[object] = None, backend=None):
    """App factory: load config, init backend and auth, register blueprints."""
    cfg = config_object or Config
    configure_logging(getattr(cfg, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.config.from_object(cfg)
    CORS(app, origins=getattr(cfg, "CORS_ORIGINS", []), supports_credentials=True)

    # optional: fail fast if required env vars missing
    #Config.validate_required()

    app.db = backend if backend is not None else init_backend(cfg)
    app.auth = AuthService(app.db)

    register_blueprints(app)
    register_error_handlers(app)
    return app

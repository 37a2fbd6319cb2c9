# scripture_refs/server.py
import logging

from flask import Flask
from flask_cors import CORS

from scripture_refs.core.config import API_HOST, API_PORT, CORS_ORIGINS, LOG_LEVEL
from scripture_refs.routes.references_api import references_bp
from scripture_refs.routes.usx_api import usx_bp
from scripture_refs.routes.status_api import status_bp


def create_app(config_overrides: dict = None) -> Flask:
    """Build the Flask app with all blueprints registered."""
    app = Flask(__name__)

    # Allow large USX documents (a whole book of Psalms with markup)
    app.config["MAX_CONTENT_LENGTH"] = 32 * 1024 * 1024
    if config_overrides:
        app.config.update(config_overrides)

    origins = [o.strip() for o in CORS_ORIGINS.split(",")] if CORS_ORIGINS != "*" else "*"
    CORS(app, origins=origins)

    # Register blueprints
    app.register_blueprint(references_bp)
    app.register_blueprint(usx_bp)
    app.register_blueprint(status_bp)

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    create_app().run(host=API_HOST, port=API_PORT)

"""
Flask application entry point for the on-call manager backend.

The app serves a single EntityStore, passed in or built at startup.
"""

import logging
from typing import Optional

from flask import Flask

from oncall.api import (
    assignments_bp,
    organizations_bp,
    physicians_bp,
    requests_bp,
    schedules_bp,
    users_bp,
)
from oncall.api.common import PayloadError, error_response
from oncall.config import config
from oncall.routes import auth_bp
from oncall.services import seed_demo_data
from oncall.store import EntityStore, MemoryStore


logger = logging.getLogger("oncall")


def create_app(store: Optional[EntityStore] = None, seed_demo: Optional[bool] = None):
    """
    Create and configure Flask app.

    Args:
        store: Store to serve. A new MemoryStore is created when omitted.
        seed_demo: Load demo data into a newly created store. Defaults to
            config.SEED_DEMO_DATA; ignored when a store is passed in.
    """
    app = Flask(__name__)

    # Load config
    app.config["SECRET_KEY"] = config.SECRET_KEY
    app.config["DEBUG"] = config.DEBUG

    if seed_demo is None:
        seed_demo = config.SEED_DEMO_DATA

    if store is None:
        store = MemoryStore()
        if seed_demo:
            seed_demo_data(store, seed=config.DEMO_DATA_SEED)
    app.extensions["store"] = store

    # Enable CORS for the browser client
    @app.after_request
    def after_request(response):
        response.headers.add("Access-Control-Allow-Origin", "*")
        response.headers.add("Access-Control-Allow-Headers", "Content-Type,Authorization")
        response.headers.add("Access-Control-Allow-Methods", "GET,PUT,POST,DELETE,OPTIONS")
        return response

    @app.errorhandler(PayloadError)
    def invalid_payload(exc):
        return error_response(str(exc), 400)

    # Register blueprints
    app.register_blueprint(auth_bp)           # /api/v1/auth/*
    app.register_blueprint(organizations_bp)  # /api/v1/organizations/*
    app.register_blueprint(assignments_bp)    # /api/v1/organization-physicians
    app.register_blueprint(physicians_bp)     # /api/v1/physicians/*
    app.register_blueprint(schedules_bp)      # /api/v1/schedules/*
    app.register_blueprint(requests_bp)       # /api/v1/requests/*
    app.register_blueprint(users_bp)          # /api/v1/users/*

    # Health check endpoint
    @app.route("/health")
    def health():
        return {"status": "ok", "store": type(store).__name__}

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = create_app()
    logger.info(f"Starting server on port {config.PORT}...")
    logger.info(f"Debug mode: {config.DEBUG}")
    logger.info("Routes:")
    logger.info("  - /api/v1/auth/* (Authentication)")
    logger.info("  - /api/v1/organizations/* (Organizations, assignments)")
    logger.info("  - /api/v1/physicians/* (Physicians)")
    logger.info("  - /api/v1/schedules/* (On-call schedules)")
    logger.info("  - /api/v1/requests/* (Consult requests)")
    logger.info("  - /api/v1/users/* (Users)")
    logger.info("  - /health (Health check)")
    app.run(debug=config.DEBUG, port=config.PORT)

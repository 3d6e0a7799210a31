import os
import time
import logging
from dotenv import load_dotenv

# ✅ Load environment variables
load_dotenv()

from flask import Flask, abort, send_from_directory
from flask_restful import Api
from flask_migrate import Migrate
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.utils import safe_join

# Config and models
from config import Config, STORAGE_BACKENDS, config
from model import db

# Blueprints and modules
from auth import auth_bp
from admin import register_admin_resources
from resources import register_resources
from email_utils import mail
from storage import STORAGE_EXTENSION, create_storage

logger = logging.getLogger(__name__)

migrate = Migrate()


def configure_logging(app):
    logging.basicConfig(
        level=getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format=app.config.get("LOG_FORMAT")
    )


def check_database_connection():
    """Run SELECT 1 against the configured database."""
    try:
        db.session.execute(db.text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection check failed: {e}")
        db.session.rollback()
        return False


def health_payload(app):
    health_info = {
        "status": "ok",
        "message": "CollabZone is running",
        "storage": app.config["STORAGE_BACKEND"],
        "timestamp": time.time()
    }
    if app.config["STORAGE_BACKEND"] == "database":
        if check_database_connection():
            health_info["database"] = "connected"
        else:
            health_info["database"] = "connection failed"
            health_info["status"] = "degraded"
    return health_info


def initialize_app(app):
    """Create tables when backed by a database, then seed the admin and optional demo data."""
    storage = app.extensions[STORAGE_EXTENSION]
    logger.info("🚀 Starting application initialization...")

    with app.app_context():
        if storage.backend == "database":
            logger.info("📋 Creating database tables...")
            db.create_all()
            logger.info("✅ Database tables created/verified")

        storage.seed_admin(
            app.config["ADMIN_USERNAME"],
            app.config["ADMIN_EMAIL"],
            app.config["ADMIN_PASSWORD"]
        )

        if app.config.get("SEED_SAMPLE_DATA"):
            storage.seed_sample_data()

    logger.info("🎉 Application initialized successfully!")
    return storage


def register_frontend_routes(app):
    """Serve the built front-end, falling back to index.html for client-side routes."""

    @app.route('/', defaults={'path': ''})
    @app.route('/<path:path>')
    def serve_frontend(path):
        if path == "api" or path.startswith("api/"):
            abort(404)

        dist = app.config.get("FRONTEND_DIST")
        if not dist or not os.path.isfile(os.path.join(dist, "index.html")):
            if path:
                abort(404)
            return health_payload(app), 200

        if path:
            candidate = safe_join(dist, path)
            if candidate and os.path.isfile(candidate):
                return send_from_directory(dist, path)
        return send_from_directory(dist, "index.html")


def create_app(config_name=None, config_overrides=None):
    """Build the CollabZone Flask app.

    `config_name` picks a class from config.config (defaults to FLASK_ENV);
    `config_overrides` is applied on top before anything is initialized.
    Under gunicorn use `app:create_app()`.
    """
    config_name = config_name or os.getenv('FLASK_ENV', 'production')
    config_class = config.get(config_name, Config)

    app = Flask(__name__, static_folder=None)
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app)

    # Validate configuration
    try:
        config_class.validate_config(app.config)
        logger.info("✅ Configuration validation passed")
    except ValueError as e:
        logger.error(f"❌ Configuration validation failed: {e}")
        # Don't abort in production, but log the error
        if not config_class.is_production():
            raise
        logger.warning("⚠️ Continuing with potentially invalid configuration in production")
        if app.config.get("STORAGE_BACKEND") not in STORAGE_BACKENDS:
            logger.warning(f"⚠️ Falling back to the memory store instead of '{app.config.get('STORAGE_BACKEND')}'")
            app.config["STORAGE_BACKEND"] = "memory"

    CORS(app,
         origins=app.config.get('CORS_ORIGINS'),
         supports_credentials=True,
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
         allow_headers=["Content-Type", "Authorization"])

    # ✅ Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)

    storage = create_storage(app)
    app.extensions[STORAGE_EXTENSION] = storage

    # ✅ Register all routes
    api = Api(app, prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api")
    register_resources(api, storage)
    register_admin_resources(api, storage)
    logger.info("✅ Routes registered")

    @app.route('/health')
    def detailed_health_check():
        """Detailed health check with storage status"""
        health_info = health_payload(app)
        status_code = 200 if health_info["status"] == "ok" else 503
        return health_info, status_code

    @app.route('/ready')
    def readiness_check():
        """Kubernetes/Docker readiness probe"""
        if app.config["STORAGE_BACKEND"] == "database" and not check_database_connection():
            return {"status": "not ready", "reason": "database unavailable"}, 503
        return {"status": "ready"}, 200

    register_frontend_routes(app)

    # ✅ Error handlers
    @app.errorhandler(500)
    def internal_error(error):
        return {"error": "Internal server error", "status": 500}, 500

    @app.errorhandler(404)
    def not_found(error):
        return {"error": "Resource not found", "status": 404}, 404

    initialize_app(app)
    return app


# ✅ Application startup
if __name__ == "__main__":
    app = create_app()
    logger.info("🏃‍♂️ Running development server")
    app.run(debug=app.config["DEBUG"], host='0.0.0.0', port=int(os.getenv('PORT', 5000)))

import os

# Do NOT call load_dotenv here. It should be in app.py

STORAGE_BACKENDS = ("memory", "database")


def _env_flag(name, default):
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    # Environment Detection
    ENVIRONMENT = os.getenv("FLASK_ENV", "production")
    DEBUG = _env_flag("FLASK_DEBUG", "False")
    TESTING = _env_flag("TESTING", "False")

    # Security Configuration
    SECRET_KEY = os.getenv("SECRET_KEY", "fallback-secret-key")

    # Keep Flask-RESTful from appending route suggestions to 404 messages
    ERROR_404_HELP = False

    # Record store: "memory" keeps everything in process, "database" goes through SQLAlchemy
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()

    # Database Configuration
    _database_url = os.getenv("DATABASE_URL")
    if _database_url:
        # Render/Heroku often provide postgres:// but SQLAlchemy needs postgresql://
        if _database_url.startswith("postgres://"):
            _database_url = _database_url.replace("postgres://", "postgresql://", 1)
        SQLALCHEMY_DATABASE_URI = _database_url
    else:
        # Fallback for local development
        SQLALCHEMY_DATABASE_URI = os.getenv(
            "SQLALCHEMY_DATABASE_URI",
            "sqlite:///collabzone.db"
        )

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = DEBUG and _env_flag("SQL_ECHO", "False")

    # Seeded super admin
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@collabzone.local")

    # Placeholder tokens handed out by the login routes
    COLLEGE_AUTH_TOKEN = os.getenv("COLLEGE_AUTH_TOKEN", "mock-jwt-token")
    ADMIN_AUTH_TOKEN = os.getenv("ADMIN_AUTH_TOKEN", "mock-admin-token")

    # Moderation defaults
    AUTO_APPROVE_COLLEGES = _env_flag("AUTO_APPROVE_COLLEGES", "True")
    AUTO_APPROVE_FEED_POSTS = _env_flag("AUTO_APPROVE_FEED_POSTS", "True")

    # Capacity limits are advisory unless this is switched on
    ENFORCE_EVENT_CAPACITY = _env_flag("ENFORCE_EVENT_CAPACITY", "False")

    SEED_SAMPLE_DATA = _env_flag("SEED_SAMPLE_DATA", "False")

    # Default region used when a phone number has no country prefix
    PHONE_REGION = os.getenv("PHONE_REGION", "IN")

    # Enhanced Email Configuration
    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587").strip() or 587)
    MAIL_USE_TLS = _env_flag("MAIL_USE_TLS", "True")
    MAIL_USE_SSL = _env_flag("MAIL_USE_SSL", "False")
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER") or os.getenv("MAIL_USERNAME") or "no-reply@collabzone.app"
    CONTACT_RECIPIENT = os.getenv("CONTACT_RECIPIENT")

    # Frontend Configuration
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
    FRONTEND_DIST = os.getenv(
        "FRONTEND_DIST",
        os.path.join(os.path.dirname(os.path.abspath(__file__)), "client", "dist")
    )

    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:5173",
        FRONTEND_URL
    ]

    # Logging Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    @classmethod
    def validate_config(cls, settings=None):
        """Validate critical configuration values

        Checks `settings` (usually app.config) when given, else the class attributes.
        """
        def get(key):
            if settings is not None:
                return settings.get(key)
            return getattr(cls, key, None)

        backend = get("STORAGE_BACKEND")
        if backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown STORAGE_BACKEND '{backend}'. Use one of: {', '.join(STORAGE_BACKENDS)}"
            )

        if backend == "database" and not get("SQLALCHEMY_DATABASE_URI"):
            raise ValueError("SQLALCHEMY_DATABASE_URI is required for the database backend")

        # Validate email configuration if email features are used
        if get("MAIL_USERNAME") and not get("MAIL_PASSWORD"):
            raise ValueError("MAIL_PASSWORD is required when MAIL_USERNAME is set")

        return True

    @classmethod
    def is_production(cls):
        """Check if running in production environment"""
        return cls.ENVIRONMENT.lower() == 'production'


class DevelopmentConfig(Config):
    """Development-specific configuration"""
    ENVIRONMENT = "development"
    DEBUG = True
    TESTING = False

    # More verbose logging in development
    SQLALCHEMY_ECHO = _env_flag("SQL_ECHO", "False")
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production-specific configuration"""
    ENVIRONMENT = "production"
    DEBUG = False
    TESTING = False

    SQLALCHEMY_ECHO = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")


class TestingConfig(Config):
    """Testing-specific configuration"""
    ENVIRONMENT = "testing"
    TESTING = True
    DEBUG = True

    SECRET_KEY = "test-secret-key"
    STORAGE_BACKEND = "memory"

    # Use in-memory database for testing
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ECHO = False

    ADMIN_USERNAME = "admin"
    ADMIN_PASSWORD = "admin123"
    ADMIN_EMAIL = "admin@collabzone.local"

    AUTO_APPROVE_COLLEGES = True
    AUTO_APPROVE_FEED_POSTS = True
    ENFORCE_EVENT_CAPACITY = False
    SEED_SAMPLE_DATA = False
    PHONE_REGION = "IN"

    # Disable external services in testing
    MAIL_USERNAME = None
    MAIL_PASSWORD = None
    MAIL_SUPPRESS_SEND = True
    CONTACT_RECIPIENT = None

    FRONTEND_DIST = os.path.join(os.path.dirname(os.path.abspath(__file__)), "tests", "no-dist")


# Configuration dictionary for easy switching
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': Config
}

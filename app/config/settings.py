from decouple import config as env

# Backend API
API_BASE_URL = env("FIGUREHUB_API_URL", default="http://localhost:5000/api/")
if not API_BASE_URL.endswith("/"):
    API_BASE_URL += "/"

REQUEST_TIMEOUT = env("FIGUREHUB_REQUEST_TIMEOUT", default=30, cast=int)  # seconds

# Development backend (mock/server.py)
MOCK_SERVER_PORT = env("FIGUREHUB_MOCK_PORT", default=5000, cast=int)
MOCK_JWT_SECRET = env("FIGUREHUB_MOCK_JWT_SECRET", default="figurehub-dev-secret")
MOCK_TOKEN_TTL_HOURS = env("FIGUREHUB_MOCK_TOKEN_TTL_HOURS", default=72, cast=int)

# Logging configuration
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "audit": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
        "audit_console": {
            "class": "logging.StreamHandler",
            "formatter": "audit",
        },
    },
    "loggers": {
        # Core application logging
        "core": {
            "handlers": ["console"],
            "level": env("APP_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
        # Form transition audit trail
        "form_audit": {
            "handlers": ["audit_console"],
            "level": env("AUDIT_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
        # Third party libraries
        "urllib3": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}

import os


class Config:
    # Database connection - REQUIRED for registrations, but the app still
    # boots without it and reports a configuration error per request
    POSTGRES_CONN_STRING = os.environ.get("POSTGRES_CONN_STRING", "").strip()

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Reject request bodies larger than this (bytes) with 413
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", 64 * 1024))

    # Comma-separated origins added to the default CORS allow-list
    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    API_PREFIX = os.environ.get("API_PREFIX", "/api")

    # Flask Configuration
    FLASK_DEBUG = os.environ.get("FLASK_DEBUG", "False").lower() == "true"

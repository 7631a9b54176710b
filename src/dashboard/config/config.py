import os


def _database_url():
    url = os.getenv("POSTGRES_URL")
    if not url:
        return os.getenv("DATABASE_URL", "sqlite:///dashboard.db")
    # SQLAlchemy only accepts the long form of the postgres scheme
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


def _engine_options(url):
    if not url.startswith("postgresql"):
        return {}
    return {"connect_args": {"sslmode": os.getenv("POSTGRES_SSL", "require")}}


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    ITEMS_PER_PAGE = 6

    CACHE_TYPE = "SimpleCache"
    CACHE_THRESHOLD = int(os.getenv("CACHE_THRESHOLD", "500"))
    CACHE_DEFAULT_TIMEOUT = int(os.getenv("CACHE_DEFAULT_TIMEOUT", "300"))

    API_TITLE = "Invoice Dashboard API"
    API_VERSION = "v1"
    OPENAPI_VERSION = "3.0.3"
    OPENAPI_URL_PREFIX = "/"
    OPENAPI_SWAGGER_UI_PATH = "/swagger-ui"
    OPENAPI_SWAGGER_UI_URL = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    LOG_LEVEL = "DEBUG"
    CACHE_THRESHOLD = 50

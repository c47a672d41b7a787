import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SESSION_DURATION = timedelta(days=7)


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # "session" is taken by the JWT cookie
    SESSION_COOKIE_NAME = "flask_session"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # -------------------------------------------------
    # Session (signed JWT carried in an http-only cookie)
    # -------------------------------------------------
    JWT_SECRET_KEY = os.getenv("JWT_SECRET", "your-secret-key-change-in-production")
    JWT_ALGORITHM = "HS256"
    JWT_TOKEN_LOCATION = ["cookies"]
    JWT_ACCESS_COOKIE_NAME = "session"
    JWT_ACCESS_COOKIE_PATH = "/"
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_SECURE = False
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_ACCESS_TOKEN_EXPIRES = SESSION_DURATION
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # -------------------------------------------------
    # Deployments
    # -------------------------------------------------
    WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET")
    GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
    GITHUB_REPO = os.getenv("GITHUB_REPO")
    GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
    GITHUB_WORKFLOW = os.getenv("GITHUB_WORKFLOW", "deploy.yml")
    GITHUB_REF = os.getenv("GITHUB_REF", "main")
    CLOUDFRONT_DISTRIBUTION_ID = os.getenv("CLOUDFRONT_DISTRIBUTION_ID")
    AWS_REGION = os.getenv("AWS_REGION", "eu-central-1")
    SIMULATED_BUILD_SECONDS = float(os.getenv("SIMULATED_BUILD_SECONDS", "2"))
    DEPLOY_WORKERS = int(os.getenv("DEPLOY_WORKERS", "2"))
    AUTO_DEPLOY_ON_PUBLISH = _env_bool("AUTO_DEPLOY_ON_PUBLISH")

    # -------------------------------------------------
    # Media
    # -------------------------------------------------
    S3_MEDIA_BUCKET = os.getenv("S3_MEDIA_BUCKET")
    S3_MEDIA_REGION = os.getenv("S3_MEDIA_REGION", "eu-central-1")
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    MAX_UPLOAD_SIZE = 10 * 1024 * 1024
    # leaves room for the multipart envelope around a max-size file
    MAX_CONTENT_LENGTH = MAX_UPLOAD_SIZE + 1024 * 1024

    # -------------------------------------------------
    # Public gateway
    # -------------------------------------------------
    PUBLIC_CACHE_SECONDS = int(os.getenv("PUBLIC_CACHE_SECONDS", "60"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///tenantcms-dev.db")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret"
    WEBHOOK_SECRET = "test-webhook-secret"
    GITHUB_TOKEN = None
    GITHUB_REPO = None
    CLOUDFRONT_DISTRIBUTION_ID = None
    S3_MEDIA_BUCKET = None
    SIMULATED_BUILD_SECONDS = 0
    AUTO_DEPLOY_ON_PUBLISH = False
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")
    JWT_COOKIE_SECURE = True


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig
}

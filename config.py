# config.py
import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def engine_options(uri: str, timeout: int) -> dict:
    """按驱动给出连接超时参数，保证连不上时能在有限时间内切到内存存储"""
    if uri.startswith("sqlite"):
        return {"connect_args": {"timeout": timeout}}
    if uri.startswith("postgres") or uri.startswith("mysql"):
        return {"pool_pre_ping": True, "connect_args": {"connect_timeout": timeout}}
    return {"pool_pre_ping": True}


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JSON_AS_ASCII = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # ---- 持久存储 ----
    # 没有配置连接串时不报错，全部请求走内存存储
    DATABASE_URL = os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URI")
    DURABLE_STORE_ENABLED = bool(DATABASE_URL)
    SQLALCHEMY_DATABASE_URI = DATABASE_URL or "sqlite://"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DURABLE_CONNECT_TIMEOUT = int(os.getenv("DURABLE_CONNECT_TIMEOUT", "3"))
    DURABLE_RETRY_BACKOFF = float(os.getenv("DURABLE_RETRY_BACKOFF", "2"))
    DURABLE_RETRY_BACKOFF_MAX = float(os.getenv("DURABLE_RETRY_BACKOFF_MAX", "60"))
    DURABLE_AUTO_CREATE = _flag("DURABLE_AUTO_CREATE", True)
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(SQLALCHEMY_DATABASE_URI, DURABLE_CONNECT_TIMEOUT)

    # ---- 鉴权：普通用户与管理员两套密钥 ----
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    ADMIN_JWT_SECRET_KEY = os.getenv("ADMIN_JWT_SECRET_KEY")
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "x-auth-token"
    JWT_HEADER_TYPE = ""
    USER_TOKEN_EXPIRES_DAYS = int(os.getenv("USER_TOKEN_EXPIRES_DAYS", "7"))
    ADMIN_TOKEN_EXPIRES_HOURS = int(os.getenv("ADMIN_TOKEN_EXPIRES_HOURS", "12"))
    GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
    GOOGLE_TOKENINFO_URL = os.getenv("GOOGLE_TOKENINFO_URL", "https://oauth2.googleapis.com/tokeninfo")

    # ---- 搜索 ----
    SEARCH_LIMIT = int(os.getenv("SEARCH_LIMIT", "10"))
    SEARCH_MAX_WORKERS = int(os.getenv("SEARCH_MAX_WORKERS", "5"))

    # ---- 种子数据 / 迁移 ----
    ALLOW_SEED = _flag("ALLOW_SEED", True)
    MIGRATE_ON_STARTUP = _flag("MIGRATE_ON_STARTUP", False)

    CORS_ORIGINS = [
        o.strip() for o in os.getenv(
            "CORS_ORIGINS", "http://localhost:5000,http://127.0.0.1:5000,http://localhost:5173"
        ).split(",") if o.strip()
    ]


class DevelopmentConfig(Config):
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt")
    ADMIN_JWT_SECRET_KEY = os.getenv("ADMIN_JWT_SECRET_KEY", "dev-admin-jwt")


class ProductionConfig(Config):
    # 生产环境默认禁止种子数据接口（会清空集合）
    ALLOW_SEED = _flag("ALLOW_SEED", False)


class TestingConfig(Config):
    TESTING = True
    DURABLE_STORE_ENABLED = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    DURABLE_RETRY_BACKOFF = 0
    JWT_SECRET_KEY = "test-user-secret"
    ADMIN_JWT_SECRET_KEY = "test-admin-secret"
    GOOGLE_CLIENT_ID = "test-client-id"
    SEARCH_MAX_WORKERS = 1
    ALLOW_SEED = True
    MIGRATE_ON_STARTUP = False


CONFIGS = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name: str | None = None):
    return CONFIGS.get((name or os.getenv("APP_ENV") or "development").lower(), DevelopmentConfig)

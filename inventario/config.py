import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent


def _bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Config:
    APP_NAME = "Inventario de Equipos"
    TESTING = False
    DEBUG = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
        self.SUPABASE_URL = os.getenv("SUPABASE_URL", "")
        self.SUPABASE_KEY = os.getenv("SUPABASE_KEY", os.getenv("SUPABASE_ANON_KEY", ""))
        self.EQUIPMENT_TABLE = os.getenv("EQUIPMENT_TABLE", "equipment")
        self.EQUIPMENT_BACKEND = os.getenv("EQUIPMENT_BACKEND", "supabase")
        self.AUTH_BACKEND = os.getenv("AUTH_BACKEND", self.EQUIPMENT_BACKEND)
        self.DEV_PASSWORD = os.getenv("DEV_PASSWORD", "")
        self.BACKEND_TIMEOUT = _float_env("BACKEND_TIMEOUT", 10.0)
        self.RATELIMIT_STORAGE_URI = os.getenv(
            "RATELIMIT_STORAGE_URI", os.getenv("REDIS_URL", "memory://")
        )
        self.RATELIMIT_ENABLED = _bool_env("RATELIMIT_ENABLED", True)
        self.LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10 per minute")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
        self.APP_TZ = os.getenv("APP_TZ", "America/Bogota")
        self.AUTH_DISABLED = _bool_env("AUTH_DISABLED", False)
        self.LOGIN_DISABLED = _bool_env("LOGIN_DISABLED", self.AUTH_DISABLED)
        self.SESSION_COOKIE_HTTPONLY = True
        self.REMEMBER_COOKIE_HTTPONLY = True
        self.SESSION_COOKIE_SECURE = True
        self.REMEMBER_COOKIE_SECURE = True
        self.SESSION_COOKIE_SAMESITE = "Lax"
        self.APP_VERSION = os.getenv("APP_VERSION", "dev")
        self.CONTENT_SECURITY_POLICY = os.getenv("CONTENT_SECURITY_POLICY", "")
        self.DEBUG = _bool_env("DEBUG", self.DEBUG)
        if os.getenv("FAKE_EQUIPMENT") == "1":
            self.EQUIPMENT_BACKEND = "memory"


class DevelopmentConfig(Config):
    DEBUG = True

    def __init__(self) -> None:
        super().__init__()
        self.DEBUG = True
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
        self.SESSION_COOKIE_SECURE = False
        self.REMEMBER_COOKIE_SECURE = False
        if not self.SUPABASE_URL:
            self.EQUIPMENT_BACKEND = "memory"
            self.AUTH_BACKEND = "memory"
            self.DEV_PASSWORD = self.DEV_PASSWORD or "admin123"


class ProductionConfig(Config):
    DEBUG = False

    def __init__(self) -> None:
        super().__init__()
        self.DEBUG = False


class TestingConfig(Config):
    TESTING = True
    DEBUG = False

    def __init__(self) -> None:
        super().__init__()
        self.DEBUG = False
        self.EQUIPMENT_BACKEND = "memory"
        self.AUTH_BACKEND = "memory"
        self.DEV_PASSWORD = "admin123"
        self.SUPABASE_URL = "https://example.supabase.co"
        self.SUPABASE_KEY = "test-anon-key"
        self.WTF_CSRF_ENABLED = False
        self.RATELIMIT_ENABLED = False
        self.LOGIN_DISABLED = True
        self.SESSION_COOKIE_SECURE = False
        self.LOG_FORMAT = "text"


def load_config(env: str | None = None) -> Config:
    env_name = (env or os.getenv("APP_ENV") or os.getenv("FLASK_ENV") or "production").lower()

    if env_name in {"test", "testing"}:
        cfg: Config = TestingConfig()
    elif env_name in {"prod", "production"}:
        cfg = ProductionConfig()
    elif env_name in {"dev", "development"}:
        cfg = DevelopmentConfig()
    else:
        cfg = Config()

    if (
        env_name in {"prod", "production"}
        and cfg.EQUIPMENT_BACKEND != "memory"
        and not cfg.SUPABASE_URL
    ):
        raise RuntimeError("SUPABASE_URL no definido en producción")

    return cfg

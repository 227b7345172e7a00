# config.py: environment-driven settings for the materials hub
#
# Everything the app needs to reach the backend comes from env vars
# (optionally a .env file next to where the app is started).

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_MAX_COLUMNS = 8
DEFAULT_HTTP_TIMEOUT = 10.0

# env var -> Settings attribute, for the keys login/storage cannot work without
REQUIRED = {
    "LOGIN_EMAIL": "login_email",
    "LOGIN_USERNAME": "login_username",
    "SUPABASE_URL": "backend_url",
    "SUPABASE_ANON_KEY": "backend_key",
}


def _int_env(env, key, default):
    try:
        return int(env.get(key) or default)
    except ValueError:
        return default

def _float_env(env, key, default):
    try:
        return float(env.get(key) or default)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    login_email: str = ""
    login_username: str = ""
    backend_url: str = ""
    backend_key: str = ""
    secret_key: str = "dev-change-me"
    max_columns: int = DEFAULT_MAX_COLUMNS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env=None, dotenv: bool = True) -> "Settings":
        """Build settings from ``env`` (defaults to ``os.environ``)."""
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ
        return cls(
            login_email=(env.get("LOGIN_EMAIL") or "").strip(),
            login_username=(env.get("LOGIN_USERNAME") or "").strip().lower(),
            backend_url=(env.get("SUPABASE_URL") or "").strip().rstrip("/"),
            backend_key=(env.get("SUPABASE_ANON_KEY") or "").strip(),
            secret_key=env.get("FLASK_SECRET") or "dev-change-me",
            max_columns=max(1, _int_env(env, "MATERIALS_MAX_COLUMNS", DEFAULT_MAX_COLUMNS)),
            http_timeout=_float_env(env, "MATERIALS_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            log_level=(env.get("MATERIALS_LOG_LEVEL") or "INFO").upper(),
        )

    def missing(self):
        return [key for key, attr in REQUIRED.items() if not getattr(self, attr)]

    @property
    def configured(self) -> bool:
        return not self.missing()

    def require(self) -> "Settings":
        missing = self.missing()
        if missing:
            raise ConfigurationError(
                "Login is not configured.", config_keys=missing
            )
        return self

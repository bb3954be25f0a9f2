"""
Process-wide settings read from the environment.

Settings are built once at startup (`Settings.from_env()`) and passed to the
services that need them. Bad values fail fast with `ConfigurationError`.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Only accepted outside production, and always logged.
DEV_JWT_SECRET = "dev-change-this-secret"

NON_PRODUCTION_ENVS = frozenset({"development", "test"})

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([a-z]*)\s*$", re.IGNORECASE)

_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "msec": timedelta(milliseconds=1),
    "msecs": timedelta(milliseconds=1),
    "": timedelta(seconds=1),
    "s": timedelta(seconds=1),
    "sec": timedelta(seconds=1),
    "secs": timedelta(seconds=1),
    "second": timedelta(seconds=1),
    "seconds": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "min": timedelta(minutes=1),
    "mins": timedelta(minutes=1),
    "minute": timedelta(minutes=1),
    "minutes": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "hr": timedelta(hours=1),
    "hrs": timedelta(hours=1),
    "hour": timedelta(hours=1),
    "hours": timedelta(hours=1),
    "d": timedelta(days=1),
    "day": timedelta(days=1),
    "days": timedelta(days=1),
    "w": timedelta(weeks=1),
    "week": timedelta(weeks=1),
    "weeks": timedelta(weeks=1),
}


def parse_duration(raw: str) -> timedelta:
    """
    Parse a duration string such as "30s", "15m", "1h", "7d" or "2 days".

    A bare number is a count of seconds. The result must be at least one
    second because token expiry claims are whole seconds.
    """
    match = _DURATION_RE.match(raw or "")
    if match is None:
        raise ConfigurationError(f"Invalid duration: {raw!r}.")

    amount, unit = int(match.group(1)), match.group(2).lower()
    step = _DURATION_UNITS.get(unit)
    if step is None:
        raise ConfigurationError(f"Unknown duration unit {unit!r} in {raw!r}.")

    duration = amount * step
    if duration < timedelta(seconds=1):
        raise ConfigurationError(f"Duration must be at least one second: {raw!r}.")
    return duration


def _env_str(environ: Mapping[str, str], name: str, default: str) -> str:
    return environ.get(name, "").strip() or default


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from exc


@dataclass(frozen=True)
class AuthSettings:
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_expiry: timedelta = timedelta(hours=1)
    bcrypt_rounds: int = 10

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, *, app_env: str = "production") -> AuthSettings:
        environ = os.environ if environ is None else environ

        secret = environ.get("JWT_SECRET", "").strip()
        if not secret:
            if app_env not in NON_PRODUCTION_ENVS:
                raise ConfigurationError("JWT_SECRET must be set when APP_ENV is production.")
            logger.warning("insecure_jwt_secret app_env=%s using built-in development secret", app_env)
            secret = DEV_JWT_SECRET

        rounds = _env_int(environ, "BCRYPT_ROUNDS", 10)
        # bcrypt accepts 4..31.
        if not 4 <= rounds <= 31:
            raise ConfigurationError(f"BCRYPT_ROUNDS must be between 4 and 31, got {rounds}.")

        return cls(
            jwt_secret=secret,
            jwt_algorithm=_env_str(environ, "JWT_ALG", "HS256"),
            token_expiry=parse_duration(_env_str(environ, "JWT_TOKEN_EXPIRY", "1h")),
            bcrypt_rounds=rounds,
        )


@dataclass(frozen=True)
class Settings:
    auth: AuthSettings
    app_env: str = "production"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("*",)

    @property
    def is_production(self) -> bool:
        return self.app_env not in NON_PRODUCTION_ENVS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        environ = os.environ if environ is None else environ

        app_env = _env_str(environ, "APP_ENV", "production").lower()
        origins = tuple(
            origin.strip()
            for origin in _env_str(environ, "CORS_ORIGINS", "*").split(",")
            if origin.strip()
        )
        return cls(
            auth=AuthSettings.from_env(environ, app_env=app_env),
            app_env=app_env,
            port=_env_int(environ, "APP_PORT", 3000),
            log_level=_env_str(environ, "LOG_LEVEL", "INFO").upper(),
            cors_origins=origins or ("*",),
        )

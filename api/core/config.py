"""
Process settings, read once from the environment at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    # asyncpg does not accept libpq's `sslmode` query parameter.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


@dataclass(frozen=True)
class Settings:
    db_host: str = "localhost"
    db_port: int = 5455
    db_user: str = ""
    db_password: str = ""
    db_name: str = ""
    timezone: str = "Asia/Vientiane"
    database_url: str = ""
    port: int = 3001
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        url = _env_str("DATABASE_URL")
        return cls(
            db_host=_env_str("DB_HOST", "localhost"),
            db_port=_env_int("DB_PORT", 5455),
            db_user=_env_str("DB_USER"),
            db_password=os.environ.get("DB_PASSWORD", ""),
            db_name=_env_str("DB_NAME"),
            timezone=_env_str("TZ", "Asia/Vientiane"),
            database_url=_sanitize_database_url(url) if url else "",
            port=_env_int("PORT", 3001),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        )

    def connect_kwargs(self) -> dict:
        """
        Keyword arguments for `asyncpg.create_pool`.

        `DATABASE_URL` wins over the discrete DB_* fields when set.
        """
        server_settings = {"timezone": self.timezone}
        if self.database_url:
            return {"dsn": self.database_url, "server_settings": server_settings}
        return {
            "host": self.db_host,
            "port": self.db_port,
            "user": self.db_user or None,
            "password": self.db_password or None,
            "database": self.db_name or None,
            "server_settings": server_settings,
        }

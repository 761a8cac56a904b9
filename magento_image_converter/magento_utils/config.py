"""
config.py — Database settings, read once from the environment at process start.
"""

import os
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import URL


# Laravel-style driver names mapped to SQLAlchemy dialects
DRIVERS = {
    "mysql": "mysql+pymysql",
    "sqlite": "sqlite",
}


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings for the Magento database."""

    database: str
    driver: str = "mysql"
    host: str = "localhost"
    port: int = 3306
    username: str = "user"
    password: str = "password"
    prefix: str = ""
    charset: str = "utf8"

    @classmethod
    def from_env(cls, database: str, environ: Optional[dict] = None) -> "DatabaseConfig":
        env = os.environ if environ is None else environ
        port = env.get("DB_PORT", "3306")
        try:
            port = int(port)
        except ValueError:
            raise EnvironmentError(f"DB_PORT must be an integer, got {port!r}.")

        return cls(
            database=database,
            driver=env.get("DB_DRIVER", "mysql"),
            host=env.get("DB_HOST", "localhost"),
            port=port,
            username=env.get("DB_USERNAME", "user"),
            password=env.get("DB_PASSWORD", "password"),
            prefix=env.get("DB_PREFIX", ""),
        )

    def url(self) -> URL:
        if self.driver not in DRIVERS:
            raise EnvironmentError(f"Unsupported DB_DRIVER {self.driver!r}.")
        if self.driver == "sqlite":
            return URL.create("sqlite", database=self.database)

        return URL.create(
            DRIVERS[self.driver],
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
            query={"charset": self.charset},
        )

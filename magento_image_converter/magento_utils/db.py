"""
db.py — Core Magento database handle (SQLAlchemy engine + table shapes).
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from .config import DatabaseConfig
from .tables import MagentoTables


class MagentoDB:
    """Simple wrapper holding the engine and the prefixed Magento tables."""

    def __init__(self, config: DatabaseConfig, engine: Optional[Engine] = None):
        self.config = config
        self.engine = engine or create_engine(config.url(), pool_pre_ping=True)
        self.tables = MagentoTables(config.prefix)

    def connect(self):
        return self.engine.connect()

    def dispose(self) -> None:
        self.engine.dispose()

"""
Database connection for GeoCalc

One pooled engine per process, created on first use and disposed on
shutdown. The pool is bounded at pool_size connections; callers beyond
that wait for a free connection.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        engine: Optional[Engine] = None,
    ):
        self.url = url
        self.pool_size = pool_size
        self._engine = engine

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            logger.info(f"Creating database engine (pool_size={self.pool_size})")
            self._engine = create_engine(
                self.url,
                pool_size=self.pool_size,
                max_overflow=0,          # hard cap, like a fixed connection limit
                pool_pre_ping=True,      # Lambda containers sit idle between invocations
                pool_recycle=1800,
            )
        return self._engine

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Connection for reads. Rolled back on exit."""
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Connection inside a transaction, committed on clean exit."""
        with self.engine.begin() as conn:
            yield conn

    def create_schema(self):
        """Create tables from the models (local development and tests)."""
        from geocalc import models  # noqa: F401  registers tables on Base

        Base.metadata.create_all(self.engine)

    def close(self):
        if self._engine is not None:
            logger.info("Disposing database engine")
            self._engine.dispose()
            self._engine = None

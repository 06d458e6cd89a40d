"""Ledger store: one engine, one writer at a time."""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .database import Base, make_engine

logger = logging.getLogger(__name__)


class Ledger:
    """Serialized access to the ledger database.

    Every session holds the ledger lock from open to close, so mutations are
    applied one at a time and readers never observe a half-applied operation.
    Open a session for one unit of work and close it in the same thread;
    sessions must not be nested.
    """

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.engine = make_engine(database_url)
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self._lock = threading.Lock()

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self._lock:
            db = self._session_factory()
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    def bootstrap(self, deployer: str) -> None:
        """Create schema and grant ADMIN to the deploying identity."""
        from .use_cases.role_manager import bootstrap_admin

        self.create_schema()
        with self.session() as db:
            bootstrap_admin(db, deployer)
        logger.info("Ledger ready at %s (deployer %s)", self.database_url, deployer)

    def dispose(self) -> None:
        self.engine.dispose()


@lru_cache()
def get_ledger() -> Ledger:
    """Get the process-wide ledger configured from settings.

    Routers depend on the ledger, not on a session: each endpoint opens
    ``ledger.session()`` inside its own body so the lock is never held while
    a request waits for a worker thread.
    """
    ledger = Ledger(settings.DATABASE_URL)
    ledger.bootstrap(settings.DEPLOYER)
    return ledger

"""
Unit of Work

Wraps a group of ledger, inventory and sequence writes in one database
transaction so they become visible together or not at all.

Usage:
    with UnitOfWork("create_transaction") as uow:
        ...  # reads and writes on db.session
        uow.flush()
    # committed here; any exception inside the block rolled everything back

    record = UnitOfWork.run(work, name="create_transaction", retries=1)
"""

from sqlalchemy.exc import SQLAlchemyError
from app import db
from app.buisness.core.errors import LedgerError, StorageError
from app.logger import get_logger

logger = get_logger("ledger.core.unit_of_work")


class UnitOfWork:
    """
    One all-or-nothing scope over the application session.

    On normal exit the session is committed. On any exception the session is
    rolled back; SQLAlchemy failures are re-raised as StorageError (the driver
    error is kept as __cause__ and never put in the message), LedgerErrors
    pass through unchanged.
    """

    def __init__(self, name: str = "unit_of_work", session=None):
        self.name = name
        self.session = session if session is not None else db.session
        self.committed = False

    def __enter__(self):
        logger.debug(f"[{self.name}] opening unit of work")
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            try:
                self.session.commit()
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error(f"[{self.name}] commit failed: {e}")
                raise StorageError() from e
            self.committed = True
            logger.debug(f"[{self.name}] committed")
            return False

        self.session.rollback()

        if isinstance(exc, LedgerError):
            if exc.client_fault:
                logger.warning(f"[{self.name}] rolled back: {exc.kind}: {exc.message}")
            else:
                logger.error(f"[{self.name}] rolled back: {exc.kind}: {exc.message}")
            return False

        if isinstance(exc, SQLAlchemyError):
            logger.error(f"[{self.name}] rolled back after storage failure: {exc}")
            raise StorageError() from exc

        logger.error(f"[{self.name}] rolled back after unexpected error: {exc!r}")
        return False

    def flush(self):
        """Push pending changes so constraint failures surface inside the scope"""
        self.session.flush()

    @classmethod
    def run(cls, work, name: str = "unit_of_work", retries: int = 0):
        """
        Run work() inside a unit of work and return its result.

        Retryable failures (InvariantViolationError, StorageError) are retried
        up to `retries` more times, each attempt in a fresh transaction.
        """
        attempt = 0
        while True:
            try:
                with cls(name) as uow:
                    result = work(uow)
                return result
            except LedgerError as e:
                if not e.retryable or attempt >= retries:
                    raise
                attempt += 1
                logger.info(f"[{name}] retrying after {e.kind} (attempt {attempt + 1} of {retries + 1})")

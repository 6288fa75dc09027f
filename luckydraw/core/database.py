"""Database configuration and session management.

The service targets a single relational database. Row locks are taken with
``SELECT ... FOR UPDATE`` so that the shared sequence counter and the prize
quota rows are mutated by one transaction at a time.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Allows concurrent readers while a
      check-in transaction is writing. Without WAL every write blocks the
      admin screens that poll participant and winner lists.

    - **Foreign Keys**: Disabled by default in SQLite. Enabled so a Winner
      row can never reference a missing participant or prize.

    - **BEGIN IMMEDIATE for writes**: SQLite silently drops ``FOR UPDATE``.
      Transactions opened by :func:`atomic` start with ``BEGIN IMMEDIATE``,
      which takes the database write lock up front, so two check-ins can
      never both read the same counter value before either writes it. Every
      other transaction (list and lookup endpoints) starts with a plain
      deferred ``BEGIN`` and reads its WAL snapshot without queueing behind
      writers. The pysqlite driver's own implicit BEGIN is switched off so
      the explicit one is the only one emitted.

    - **check_same_thread=False**: FastAPI runs sync endpoints in a thread
      pool, so a pooled connection may be used from a different thread than
      the one that opened it.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import event as sa_event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from luckydraw.core.config import settings

logger = logging.getLogger(__name__)

# Connection execution option marking a transaction that will write.
WRITE_TRANSACTION = "luckydraw_write"


def configure_sqlite(engine: Engine) -> Engine:
    """Install the SQLite connection and transaction hooks on ``engine``."""

    @sa_event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        # Connection-level settings: must be applied to every new connection
        # handed out by the pool.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @sa_event.listens_for(engine, "begin")
    def begin_transaction(conn):
        if conn.get_execution_options().get(WRITE_TRANSACTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return engine


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine for ``database_url`` with backend-specific setup."""
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", settings.sqlite_busy_timeout)
        return configure_sqlite(
            create_engine(database_url, connect_args=connect_args, **kwargs)
        )
    return create_engine(database_url, **kwargs)


engine = build_engine(
    settings.database_url,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


def create_db_and_tables(bind: Engine | None = None):
    """Create all database tables and seed the check-in sequence row."""
    from luckydraw.lottery.sequence import seed_sequence_counter

    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    with Session(bind) as session:
        with atomic(session):
            seed_sequence_counter(session)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session


def _is_write_transaction(session: Session) -> bool:
    return bool(session.connection().get_execution_options().get(WRITE_TRANSACTION))


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Run the enclosed block as one transaction.

    Commits when the block exits normally. Any exception rolls back every
    change made through ``session`` since the last commit and is re-raised.

    The transaction is opened as a write transaction. A read transaction
    already open on ``session`` is committed first: under WAL a read
    snapshot cannot be upgraded to a writer once another writer has
    committed.
    """
    if session.in_transaction() and not _is_write_transaction(session):
        session.commit()
    if not session.in_transaction():
        session.connection(execution_options={WRITE_TRANSACTION: True})
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise

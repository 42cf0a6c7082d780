"""All-or-nothing batch load of harvested records into SQL storage."""

import re
from typing import Dict, Iterable, Mapping, Union

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..config import DatabaseConfig
from ..models.records import Course, Program
from ..utils.logging_config import get_logger
from ..utils.exceptions import FatalInitError, LoadError, StoreConflictError

logger = get_logger()

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

Loadable = Union[Course, Program]


def create_db_engine(db_config: DatabaseConfig) -> Engine:
    """
    Create the SQLAlchemy engine with the configured pool limits.

    Pool limits map onto SQLAlchemy's pool: max lifetime is
    ``pool_recycle``, idle connections are ``pool_size`` and anything
    above that up to max open is ``max_overflow``.

    Raises:
        FatalInitError: If the connection URL is unusable
    """
    url = db_config.connection_url()
    kwargs = {"pool_pre_ping": True, "future": True}

    try:
        if make_url(url).get_backend_name() != "sqlite":
            kwargs.update(
                pool_recycle=db_config.max_lifetime_seconds,
                pool_size=db_config.max_idle_connections,
                max_overflow=max(
                    0,
                    db_config.max_open_connections - db_config.max_idle_connections,
                ),
            )
        engine = create_engine(url, **kwargs)
    except SQLAlchemyError as e:
        raise FatalInitError(f"Couldn't open database connection: {e}") from e

    logger.info("Database engine initialized.")
    return engine


def verify_connection(engine: Engine) -> None:
    """
    Check the database is reachable.

    Raises:
        FatalInitError: If a connection cannot be established
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise FatalInitError(f"Couldn't initialize database: {e}") from e


class TransactionalLoader:
    """Inserts batches of records inside a single transaction."""

    def __init__(self, engine: Engine, table: str = "Courses"):
        """
        Initialize loader.

        Args:
            engine: SQLAlchemy engine
            table: Default target table for ``load``
        """
        self.engine = engine
        self.table = self._check_table(table)

    @staticmethod
    def _check_table(table: str) -> str:
        if not IDENTIFIER.match(table or ""):
            raise ValueError(f"Invalid table name: {table!r}")
        return table

    def _insert_all(
        self,
        conn: Connection,
        table: str,
        records: Iterable[Loadable],
    ) -> int:
        statement = text(f"INSERT INTO {table} (code, name) VALUES (:code, :name)")
        rows_affected = 0
        for record in records:
            result = conn.execute(statement, {"code": record.code, "name": record.name})
            rows_affected += max(result.rowcount, 0)
        return rows_affected

    def load(self, records: Iterable[Loadable]) -> int:
        """
        Insert every record into the loader's table, or none of them.

        Args:
            records: Courses or programs to insert

        Returns:
            Total rows affected

        Raises:
            StoreConflictError: If a code already exists in the table
            LoadError: On any other database failure
        """
        return self.load_many({self.table: records})[self.table]

    def load_many(self, batches: Mapping[str, Iterable[Loadable]]) -> Dict[str, int]:
        """
        Insert several per-table batches inside one transaction.

        Args:
            batches: Records to insert, keyed by table name

        Returns:
            Rows affected per table

        Raises:
            StoreConflictError: If a code already exists in its table
            LoadError: On any other database failure
        """
        tables = {self._check_table(table): records for table, records in batches.items()}
        totals: Dict[str, int] = {}

        try:
            with self.engine.begin() as conn:
                for table, records in tables.items():
                    totals[table] = self._insert_all(conn, table, records)
        except IntegrityError as e:
            logger.error(f"Load rolled back, duplicate key: {e.orig}")
            raise StoreConflictError(f"Couldn't execute statement: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Load rolled back: {e}")
            raise LoadError(f"Couldn't load records: {e}") from e

        for table, count in totals.items():
            logger.info(f"Inserted {count} rows into {table}")
        return totals

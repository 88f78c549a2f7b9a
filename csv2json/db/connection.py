import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Optional
from urllib.parse import quote_plus

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from csv2json.db.models import Base

# Configure logging
logger = logging.getLogger(__name__)

MEMORY_PATHS = ('', ':memory:')


def build_url(storage_config: Dict[str, Any]) -> str:
    """
    Build a SQLAlchemy URL from the storage section of the configuration

    Args:
        storage_config: Storage configuration with at least 'type'

    Returns:
        Database URL
    """
    if storage_config.get('url'):
        return storage_config['url']

    db_type = storage_config.get('type', 'sqlite')
    if db_type == 'sqlite':
        sqlite_config = storage_config.get('sqlite', {})
        db_path = str(sqlite_config.get('path', storage_config.get('path', 'csv2json.db')))
        if db_path in MEMORY_PATHS:
            return 'sqlite://'
        return f'sqlite:///{db_path}'

    if db_type in ['postgresql', 'postgres']:
        postgres_config = storage_config.get('postgres', storage_config.get('postgresql', {}))
        host = postgres_config.get('host', 'localhost')
        port = postgres_config.get('port', 5432)
        database = postgres_config.get('database', 'csv2json')
        # URL-encode user and password to handle special characters
        user = quote_plus(str(postgres_config.get('user', 'postgres')))
        password = quote_plus(str(postgres_config.get('password', '')))
        sslmode = postgres_config.get('sslmode', 'disable' if host in ['localhost', '127.0.0.1'] else 'require')
        return f'postgresql://{user}:{password}@{host}:{port}/{database}?sslmode={sslmode}'

    raise ValueError(f"Unsupported database type: {db_type}")


class Database:
    """
    Database connection manager for csv2json

    Handles SQLite (file or in-memory) and PostgreSQL connections with
    connection pooling and a session factory.
    """

    def __init__(self, storage_config: Optional[Dict[str, Any]] = None):
        """
        Initialize database connection settings

        Args:
            storage_config: Storage section of the configuration. The engine
                is created lazily on first use.
        """
        self.config = storage_config or {'type': 'sqlite', 'sqlite': {'path': ':memory:'}}
        self.url = build_url(self.config)
        self.engine: Optional[Engine] = None
        self.Session: Optional[sessionmaker] = None

    def _create_engine(self) -> Engine:
        echo = self.config.get('echo', False)

        if self.url == 'sqlite://':
            # A single shared connection keeps the in-memory database alive
            return create_engine(
                self.url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={'check_same_thread': False}
            )

        if self.url.startswith('sqlite:///'):
            db_path = Path(self.url[len('sqlite:///'):])
            # Ensure directory exists
            db_path.parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                self.url,
                echo=echo,
                poolclass=QueuePool,
                pool_size=self.config.get('pool_size', 5),
                max_overflow=self.config.get('max_overflow', 10),
                pool_timeout=self.config.get('pool_timeout', 30),
                connect_args={
                    'timeout': 30,
                    'check_same_thread': False  # Allow multiple threads
                }
            )

            @event.listens_for(engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.close()

            return engine

        return create_engine(
            self.url,
            echo=echo,
            poolclass=QueuePool,
            pool_size=self.config.get('pool_size', 5),
            max_overflow=self.config.get('max_overflow', 10),
            pool_timeout=self.config.get('pool_timeout', 30),
            pool_recycle=self.config.get('pool_recycle', 1800)
        )

    def connect(self) -> None:
        """
        Create the engine and verify the connection

        Retries up to 'max_retries' times, waiting 'retry_delay' seconds
        between attempts.

        Raises:
            SQLAlchemyError: If the database cannot be reached
        """
        if self.engine is not None:
            return

        max_retries = max(1, int(self.config.get('max_retries', 3)))
        retry_delay = float(self.config.get('retry_delay', 1))

        for attempt in range(max_retries):
            engine = self._create_engine()
            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
            except SQLAlchemyError as e:
                engine.dispose()
                if attempt == max_retries - 1:
                    logger.error(f"Failed to connect to database after {max_retries} attempts: {str(e)}")
                    raise
                logger.warning(f"Database connection attempt {attempt + 1} failed: {str(e)}")
                time.sleep(retry_delay)
                continue

            self.engine = engine
            self.Session = sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
                autoflush=False
            )
            logger.debug(f"Connected to database {self.engine.url.render_as_string(hide_password=True)}")
            return

    def initialize(self) -> None:
        """Initialize the database (create tables)"""
        self.connect()
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        """Drop all csv2json tables"""
        self.connect()
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """
        Get a database transaction context

        Commits on success, rolls back on any exception and re-raises it.
        """
        if self.Session is None:
            self.connect()

        session = self.Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Close the database connection"""
        if self.engine:
            self.engine.dispose()
            self.engine = None
            self.Session = None

"""Database Configuration for CineQueue."""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from cinequeue import __file__ as package_file
from cinequeue import config

__all__ = ["CineQueueDB", "SessionScope", "db"]


class SessionScope:
    """A single unit of work; closes its session when the block exits."""

    def __init__(self, session: Session) -> None:
        """Wrap an open session.

        Args:
            session (Session): Session owned by this scope
        """
        self.session = session

    def __enter__(self) -> SessionScope:
        """Enter the scope, returning itself for ``ctx.session`` access."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Roll back uncommitted work on error and close the session."""
        if exc_type is not None:
            self.session.rollback()
        self.session.close()


class CineQueueDB:
    """Database manager for CineQueue.

    Creates the engine (SQLite in the data path unless a URL is configured),
    applies Alembic migrations and hands out session scopes::

        with db() as ctx:
            ctx.session.query(User).all()

    Each call returns a fresh scope, so concurrent requests never share a
    session.
    """

    def __init__(self, data_path: Path, url: str | None = None) -> None:
        """Initializes the database manager and runs pending migrations.

        Args:
            data_path (Path): Directory for the default SQLite database file
            url (str | None): SQLAlchemy URL overriding the default SQLite file

        Raises:
            ValueError: If data_path exists but is a file instead of a directory
        """
        self.data_path = data_path
        self.url = url or f"sqlite:///{data_path / 'cinequeue.db'}"

        self.engine = self._setup_db()
        self._SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )
        self._do_migrations()

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured backend is SQLite."""
        return self.url.startswith("sqlite")

    def _setup_db(self) -> Engine:
        """Create the SQLAlchemy engine.

        Registers all models, makes sure the data directory exists and, for
        SQLite, enables WAL mode and foreign keys on every connection.

        Returns:
            Engine: Configured SQLAlchemy engine instance
        """
        import cinequeue.models  # noqa: F401

        if not self.data_path.exists():
            self.data_path.mkdir(parents=True, exist_ok=True)
        elif self.data_path.is_file():
            raise ValueError(
                f"{self.__class__.__name__}: The path '{self.data_path}' is a file, "
                "please delete it first or choose a different data folder path",
            )

        if not self.is_sqlite:
            return create_engine(self.url, pool_pre_ping=True, future=True)

        engine = create_engine(
            self.url,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
            future=True,
        )

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, _connection_record):
            cur = dbapi_connection.cursor()
            try:
                cur.execute("PRAGMA journal_mode=WAL;")
                cur.execute("PRAGMA synchronous=NORMAL;")
                cur.execute("PRAGMA foreign_keys=ON;")
            finally:
                cur.close()

        return engine

    def _do_migrations(self) -> None:
        """Upgrade the schema to the latest Alembic revision."""
        from alembic import command
        from alembic.config import Config

        cfg = Config()
        cfg.set_main_option(
            "script_location",
            str(Path(package_file).resolve().parent.parent / "alembic"),
        )
        cfg.set_main_option("sqlalchemy.url", self.url.replace("%", "%%"))

        command.upgrade(cfg, "head")

    def __call__(self) -> SessionScope:
        """Open a new session scope."""
        return SessionScope(self._SessionLocal())


db = CineQueueDB(config.data_path, config.database_url)

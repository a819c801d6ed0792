from __future__ import annotations

import sqlite3
import typing as t
from pathlib import Path

import alembic.config
import sqlalchemy
import sqlalchemy.event
import sqlalchemy.orm
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.url import URL as DSN

from ..config.storage import SqliteSettings, StorageSettings
from ..di import NotReady
from ..provider import LoggingProvider

DefaultDatabase: t.Final[str] = "grader.sqlite3"


def resolve_database(config: SqliteSettings, root: Path | NotReady, state_path: t.Callable[[], Path]) -> Path:
    if config.database is None:
        return state_path() / DefaultDatabase

    path = Path(config.database).expanduser()
    if path.is_absolute():
        return path
    if isinstance(root, NotReady):
        raise RuntimeError("root path is unavailable")
    return root / path


def provide_alembic_conf(
    migration_path: Path, database: Path, config: SqliteSettings, root: Path | NotReady
) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("root path is unavailable")

    dsn = DSN.create(config.driver, database=str(database))
    escaped_str = dsn.render_as_string(hide_password=False).replace("%", "%%")

    ac = alembic.config.Config()
    ac.set_main_option("script_location", str(root / migration_path))
    ac.set_section_option("alembic", "sqlalchemy.url", escaped_str)
    ac.set_section_option("alembic", "file_template", "%%(year)d-%%(month).2d-%%(day).2d-%%(slug)s-%%(rev)s")
    return ac


def provide_engine(database: Path, config: SqliteSettings, logging: LoggingProvider) -> sqlalchemy.Engine:
    logger = logging.get_logger()

    database.parent.mkdir(parents=True, exist_ok=True)
    dsn = DSN.create(config.driver, database=str(database))
    engine = sqlalchemy.create_engine(dsn, echo=config.echo)
    sqlalchemy.event.listen(engine, "connect", enforce_foreign_keys)
    logger.info(
        "initialized SQLAlchemy engine",
        extra={
            "driver": config.driver,
            "database": str(database),
        },
    )
    return engine


def provide_session(engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """Create a new session; the caller closes it"""
    maker = sqlalchemy.orm.sessionmaker(engine, expire_on_commit=False, autoflush=False)
    return maker(autobegin=False)


def enforce_foreign_keys(dbapi_conn: sqlite3.Connection, _: t.Any) -> None:
    """SQLite ignores REFERENCES clauses unless asked per connection"""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class PersistentContainer(DeclarativeContainer):
    config = Configuration()
    debug: Provider[bool] = Object()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()
    state_path: Provider[t.Callable[[], Path]] = Object()

    database: Provider[Path] = Singleton(
        resolve_database, config=config.sqlite.as_(SqliteSettings), root=root, state_path=state_path
    )
    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_conf,
        migration_path=Path("migrations/"),
        database=database,
        config=config.sqlite.as_(SqliteSettings),
        root=root,
    )
    engine: Provider[sqlalchemy.Engine] = Singleton(
        provide_engine, database=database, config=config.sqlite.as_(SqliteSettings), logging=logging
    )
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, engine=engine)


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration(strict=True)
    debug: Provider[bool] = Object()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()
    state_path: Provider[t.Callable[[], Path]] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer,
        config=config.persistent,
        debug=debug,
        logging=logging,
        root=root,
        state_path=state_path,
    )

from __future__ import annotations

import typing as t

from .base import BaseSettings


class StorageSettings(BaseSettings):
    persistent: PersistentSettings


class PersistentSettings(BaseSettings):
    sqlite: SqliteSettings


class SqliteSettings(BaseSettings):
    """
    `database` is a file path, resolved against the project root when
    relative; when unset the database lives under the XDG state directory
    """

    database: str | None = None
    driver: t.Literal["sqlite+pysqlite"] = "sqlite+pysqlite"
    echo: bool = False

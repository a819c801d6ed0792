__all__ = [
    "LoggingSettings",
    "Settings",
    "SqliteSettings",
    "StorageSettings",
]


from .logging import LoggingSettings
from .settings import Settings
from .storage import SqliteSettings, StorageSettings

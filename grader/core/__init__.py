__all__ = [
    "BootConfiguration",
    "di",
    "GraderContainer",
    "LoggingProvider",
    "Settings",
    "TimestampProvider",
]


from . import di
from .config import Settings
from .container import BootConfiguration, GraderContainer
from .provider import LoggingProvider, TimestampProvider

import datetime
import inspect
import logging.config
import typing as t

from .logging import TRACE, TraceLogLevelLogger

TimestampProvider = t.Callable[..., datetime.datetime]


class LoggingProvider(object):
    Function: t.Final[t.Literal["fn"]] = "fn"
    Module: t.Final[t.Literal["mod"]] = "mod"

    def __init__(self, config: dict[str, t.Any], debug: bool):
        LoggingProvider.create_trace_loglevel()
        logging.config.dictConfig(config)
        self.capture_warnings(debug)

    @staticmethod
    def create_trace_loglevel():
        """
        Register TRACE (5) below DEBUG, for per-row storage chatter
        """
        logging.setLoggerClass(TraceLogLevelLogger)
        logging.addLevelName(TRACE, "TRACE")

    @classmethod
    def get_logger(
        cls, scope: t.Literal["mod", "fn"] = "mod", name: str | None = None, n_frames: int = 1
    ) -> TraceLogLevelLogger:
        if name:
            return t.cast(TraceLogLevelLogger, logging.getLogger(name))

        frame = inspect.stack()[n_frames]
        match scope:
            case cls.Module:
                name = frame.frame.f_globals["__name__"]

            case cls.Function:
                mod = frame.frame.f_globals["__name__"]
                owner = frame.frame.f_locals.get("self")
                if owner is not None:
                    name = f"{mod}.{owner.__class__.__name__}.{frame.function}"
                else:
                    name = f"{mod}.{frame.function}"

        return t.cast(TraceLogLevelLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool):
        logging.captureWarnings(capture)

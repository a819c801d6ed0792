from __future__ import annotations

import logging
import typing as t

from grader.lib import NotReady
from grader.storage import Session

logger = logging.getLogger(__name__)

T = t.TypeVar("T")

Loader: t.TypeAlias = t.Callable[[Session], T]


class View(t.Generic[T]):
    """
    One materialized value, loaded on first access and held until the
    command that changed its rows calls `refresh()` or `invalidate()`.

    The loader runs in its own transaction unless the session is already in
    one, in which case it reads through the open transaction.
    """

    name: str
    session: Session
    _loader: Loader[T]
    _value: T | NotReady

    def __init__(self, name: str, loader: Loader[T], *, session: Session):
        self.name = name
        self.session = session
        self._loader = loader
        self._value = NotReady()

    @property
    def loaded(self) -> bool:
        return not isinstance(self._value, NotReady)

    @property
    def entities(self) -> T:
        if isinstance(self._value, NotReady):
            self._value = self._load()
        return self._value

    def invalidate(self) -> None:
        self._value = NotReady()

    def refresh(self) -> T:
        self.invalidate()
        return self.entities

    def _load(self) -> T:
        if self.session.in_transaction():
            value = self._loader(self.session)
        else:
            with self.session.begin():
                value = self._loader(self.session)
        logger.debug("loaded view", extra={"view": self.name})
        return value

    def __repr__(self) -> str:
        return f"<View {self.name} loaded={self.loaded}>"

from __future__ import annotations

import typing as t


class Sentinel(object):
    """A marker value; each subclass has exactly one instance"""

    _instances: t.ClassVar[dict[type, Sentinel]] = {}

    def __new__(cls) -> t.Self:
        if cls not in Sentinel._instances:
            Sentinel._instances[cls] = super().__new__(cls)
        return t.cast(t.Self, Sentinel._instances[cls])

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class NotReady(Sentinel):
    """A provider or cached value that has not been produced yet"""


class NotSet(Sentinel):
    """An update argument the caller left out, as distinct from None"""

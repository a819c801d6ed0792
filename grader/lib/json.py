"""JSON output for models, identifiers, timestamps and enums."""

from __future__ import annotations

import datetime
import enum
import json as pyjson
import pathlib
import typing as t

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


class JSONEncoder(pyjson.JSONEncoder):
    def default(self, o: t.Any) -> JSONValue:
        if hasattr(o, "model_dump"):
            return o.model_dump(mode="json")
        match o:
            case datetime.date():
                # also covers datetime.datetime
                return o.isoformat()
            case enum.Enum():
                return o.value
            case pathlib.Path():
                return str(o)
            case set() | frozenset():
                return sorted(o)
        return super().default(o)


def dumps(obj: t.Any, *, indent: int | str | None = None, sort_keys: bool = False, **kw: t.Any) -> str:
    kw.setdefault("cls", JSONEncoder)
    return pyjson.dumps(obj, indent=indent, sort_keys=sort_keys, **kw)

from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p
import pydantic_core.core_schema as core_schema
import shortuuid

KeyLength: t.Final[int] = 22


class ShortUUIDKey(str):
    """
    An identifier of the form `<prefix>$<shortuuid>`. Each entity has its own
    subclass, so a `StudentID` is never mistaken for a `GroupID` even though
    both are plain strings in storage and on the wire.
    """

    prefix: t.ClassVar[str]
    separator: t.ClassVar[str]

    @p.validate_call
    def __init_subclass__(cls, prefix: t.Annotated[str, ant.MinLen(4)], separator: t.Annotated[str, ant.Len(1)] = "$"):
        super().__init_subclass__()
        cls.prefix = prefix
        cls.separator = separator

    def __new__(cls, s: str | None = None, /, key: str | None = None) -> t.Self:
        """
        With neither argument, mint a fresh identifier. `s` is a complete,
        prefixed identifier and is validated; `key` is the bare shortuuid as
        stored in the database and is trusted.
        """
        if key is None:
            if s is None:
                key = shortuuid.uuid()
            else:
                key = cls.parse(s)
        return super().__new__(cls, f"{cls.prefix}{cls.separator}{key}")

    @classmethod
    def parse(cls, s: str) -> str:
        """Return the key part of `s`, raising ValueError if `s` is not one of ours"""
        head = cls.prefix + cls.separator
        if not s.startswith(head):
            raise ValueError(f"invalid {cls.__name__}: must begin with {head!r}")
        key = s[len(head) :]
        if len(key) != KeyLength:
            raise ValueError(f"invalid {cls.__name__}: key must have length {KeyLength}")
        alphabet = shortuuid.get_alphabet()
        if any(c not in alphabet for c in key):
            raise ValueError(f"invalid {cls.__name__}: key must comprise only {alphabet}")
        return key

    @property
    def key(self) -> str:
        return self[len(self.prefix) + len(self.separator) :]

    @classmethod
    def __get_pydantic_core_schema__(cls, src: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        from_str = core_schema.no_info_after_validator_function(cls, core_schema.str_schema())
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema([core_schema.is_instance_schema(cls), from_str]),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, src: t.Any, handler: p.GetJsonSchemaHandler) -> p.json_schema.JsonSchemaValue:
        return {"type": "string", "pattern": f"^{cls.prefix}\\{cls.separator}"}

    def __hash__(self) -> int:
        return str.__hash__(self)


# fmt: off
class CourseID(ShortUUIDKey, prefix="course"): ...
class EditionID(ShortUUIDKey, prefix="edition"): ...
class GroupID(ShortUUIDKey, prefix="group"): ...
class StudentID(ShortUUIDKey, prefix="student"): ...
class SoloAssignmentID(ShortUUIDKey, prefix="soloasg"): ...
class GroupAssignmentID(ShortUUIDKey, prefix="groupasg"): ...
class PeerEvaluationID(ShortUUIDKey, prefix="peereval"): ...
class SoloCriterionID(ShortUUIDKey, prefix="solocrit"): ...
class GroupCriterionID(ShortUUIDKey, prefix="groupcrit"): ...
# fmt: on

import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings

from grader.model import BaseModel


class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # Configuration.as_() passes the section as one positional dict
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)

    def model_dump(self, *, by_alias: bool | None = True, **kwargs: t.Any) -> dict[str, t.Any]:
        # dictConfig needs the aliased keys, e.g. "()" and "class"
        return super().model_dump(by_alias=by_alias, **kwargs)

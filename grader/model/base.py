import typing as t

import pydantic as p


class BaseModel(p.BaseModel):
    def model_dump(self, *, by_alias: bool | None = True, **kwargs: t.Any) -> dict[str, t.Any]:
        # aliases are the external names, e.g. a feedback's "global" entry
        return super().model_dump(by_alias=by_alias, **kwargs)

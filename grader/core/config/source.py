import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

from grader.model import DeploymentEnvironment


class CurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]
    override: t.Required[tuple[str, ...]]


# fields given at init that these sources must never supply
BootFields: t.Final[frozenset[str]] = frozenset({"env", "root", "override"})


class SettingsSource(PydanticBaseSettingsSource):
    def __call__(self) -> dict[str, t.Any]:
        # we expect init kwargs to have config root, env and overrides in them
        data: dict[str, t.Any] = {}

        for field_name, field in self.settings_cls.model_fields.items():
            if field_name in BootFields:
                continue
            try:
                field_value, field_key, value_is_complex = self.get_field_value(field, field_name)
                field_value = self.prepare_field_value(field_name, field, field_value, value_is_complex)
            except KeyError:
                continue
            except ValueError as e:
                raise SettingsError(f"error parsing value for field {field_name!r} from source {self!r}") from e

            data[field_key] = field_value
        return data

    @property
    def state(self) -> CurrentState:
        return t.cast(CurrentState, self.current_state)


class OverrideSettingsSource(SettingsSource):
    """
    Settings given on the command line as dotted `key=value` pairs; values
    are parsed as YAML, so `-o storage.persistent.sqlite.echo=true` is a bool
    """

    @functools.cached_property
    def parsed_options(self) -> dict[str, t.Any]:
        od: dict[str, t.Any] = {}
        for o in self.state["override"]:
            if "=" not in o:
                raise ValueError(f"override must be of the form key=value: {o!r}")
            k, v = [s.strip() for s in o.split("=", 1)]

            target = od
            path = k.split(".")
            for key in path[:-1]:
                target = target.setdefault(key, {})
            target[path[-1]] = yaml.safe_load(v)
        return od

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name not in self.parsed_options:
            raise KeyError(field_name)
        return self.parsed_options[field_name], field_name, False

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        return value


class YAMLCascadingSettingsSource(SettingsSource):
    """
    Read `<field>.yaml` from the config root, then from `env.d/<env>/`; the
    most specific file found wins outright
    """

    @functools.cached_property
    def load_paths(self) -> list[Path]:
        root = self.state["root"]
        assert root.scheme == "file" and root.path is not None, "root is not a legible location of YAML files"
        env = self.state["env"]
        paths = [Path(root.path)]
        if env is not DeploymentEnvironment.Local:
            # local/ is the root itself
            paths.append(Path(root.path) / "env.d" / env.value)
        return paths

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        yamls: list[str] = []
        for path in self.load_paths:
            fn = path / f"{field_name}.yaml"
            if fn.exists():
                yamls.append(fn.read_text(encoding="utf8"))
        if not yamls:
            raise KeyError(field_name)
        return yamls, field_name, True

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        if not isinstance(value, list):
            raise ValueError(field_name)
        yamls = t.cast(list[str], value)
        return yaml.safe_load(yamls[-1])

"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from typing import Any, TypeVar

from dotenv import load_dotenv

from mp_datatables.config.settings.base import Settings
from mp_datatables.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Load settings from OS environment variables."""

    def load(self, settings_class: type[T]) -> T:
        prefix = getattr(settings_class, "_prefix", "").upper()
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            env_key = f"{prefix}_{field.name}".upper().lstrip("_")
            raw = os.environ.get(env_key)

            if raw is None:
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
                ):
                    raise MissingRequiredSettingError(env_key)
                continue

            kwargs[field.name] = self._coerce(env_key, raw, field.type)

        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load settings: {exc}", cause=exc) from exc

    def _coerce(self, key: str, value: str, type_hint: Any) -> Any:  # noqa: PLR0911
        if type_hint is bool or type_hint == "bool":
            lowered = value.strip().lower()
            if lowered in _TRUTHY:
                return True
            if lowered in _FALSY:
                return False
            raise InvalidSettingValueError(key, value, "expected a boolean")
        if type_hint is int or type_hint == "int":
            try:
                return int(value)
            except ValueError as exc:
                raise InvalidSettingValueError(key, value, "expected an integer") from exc
        if type_hint is float or type_hint == "float":
            try:
                return float(value)
            except ValueError as exc:
                raise InvalidSettingValueError(key, value, "expected a number") from exc
        if getattr(type_hint, "__origin__", None) is list or str(type_hint).startswith("list"):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value


class DotenvSettingsLoader(SettingsLoader):
    """Load settings from a ``.env`` file then fall back to ``EnvSettingsLoader``."""

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader"]

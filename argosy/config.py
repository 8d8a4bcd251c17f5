"""
Argosy settings.

A dispatcher is configured by a Settings object, usually read from the host's
TOML configuration:

    [argosy]
    application = "app"
    version = "1.2.0"
    description = "zone management"
    roots = ["zone"]
    page_size = 6
    colorful = false
    log_level = "debug"

    [argosy.messages]
    access_denied = "you cannot do that"

`application` names the fallback root and prefixes every command permission
(`app.commands...`). When `roots` is given, root registrations whose primary
name is not listed are mounted under the fallback root instead.
"""
import dataclasses
import logging
import tomllib
from collections.abc import Mapping
from types import MappingProxyType


@dataclasses.dataclass(frozen=True, kw_only=True)
class Settings:
    application: str = "argosy"
    version: str = "0.0.0"
    description: str = ""
    roots: tuple | None = None
    page_size: int = 6
    colorful: bool = True
    messages: Mapping = dataclasses.field(default_factory=lambda: MappingProxyType({}))
    log_level: str = "warning"

    def __post_init__(self):
        if not isinstance(self.application, str) or not self.application.strip():
            raise ValueError("settings 'application' must be a non-empty string")
        if not isinstance(self.page_size, int) or isinstance(self.page_size, bool) or self.page_size < 1:
            raise ValueError("settings 'page_size' must be a positive integer")
        if not isinstance(self.messages, Mapping):
            raise TypeError("settings 'messages' must be a mapping")
        if logging.getLevelNamesMapping().get(self.log_level.upper()) is None:
            raise ValueError(f"settings 'log_level' {self.log_level!r} is not a logging level")
        if self.roots is not None:
            object.__setattr__(self, "roots", tuple(name.lower() for name in self.roots))
        object.__setattr__(self, "application", self.application.strip())
        object.__setattr__(self, "messages", MappingProxyType(dict(self.messages)))

    @property
    def level(self):
        return logging.getLevelNamesMapping()[self.log_level.upper()]

    @classmethod
    def from_mapping(cls, mapping, /):
        """
        Build settings from a mapping, ignoring keys Settings does not know.
        """
        names = {field.name for field in dataclasses.fields(cls)}
        return cls(**{key: value for key, value in mapping.items() if key in names})

    @classmethod
    def load(cls, path, /, *, section="argosy"):
        """
        Read settings from the `[argosy]` table (or `section`) of a TOML file.
        A missing table yields the defaults.
        """
        with open(path, "rb") as file:
            document = tomllib.load(file)
        return cls.from_mapping(document.get(section, {}))


__all__ = (
    "Settings",
)

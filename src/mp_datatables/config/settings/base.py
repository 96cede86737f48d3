"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    Subclasses set ``_prefix`` so that field ``foo`` is read from the
    environment variable ``<PREFIX>_FOO``.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


__all__ = ["Settings"]

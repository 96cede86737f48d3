"""DataTables – query settings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from mp_datatables.config.settings import Settings
from mp_datatables.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class DataTablesSettings(Settings):
    """Read from ``DATATABLES_*`` environment variables by ``EnvSettingsLoader``.

    ``concurrent_counts`` issues the total and filtered counts together.
    ``allow_all_rows`` lets ``length == -1`` fetch every matching row.
    ``max_length`` caps the page size when positive.
    """

    _prefix: ClassVar[str] = "DATATABLES"

    concurrent_counts: bool = False
    allow_all_rows: bool = True
    max_length: int = 0

    def _validate(self) -> None:
        if self.max_length < 0:
            raise InvalidSettingValueError("max_length", self.max_length, "must be >= 0")


__all__ = ["DataTablesSettings"]

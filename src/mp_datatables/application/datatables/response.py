"""DataTables – response envelope."""
from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class DataTablesResponse:
    """One page of results plus the two counts the DataTables client expects."""

    draw: int | float
    records_total: int
    records_filtered: int
    data: list[Any] = dataclasses.field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the DataTables wire keys."""
        return {
            "draw": self.draw,
            "recordsTotal": self.records_total,
            "recordsFiltered": self.records_filtered,
            "data": list(self.data),
        }


__all__ = ["DataTablesResponse"]

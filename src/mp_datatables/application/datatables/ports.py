"""DataTables – DocumentStore port."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DocumentStore(Protocol):
    """Async document collection the query orchestrator runs against.

    ``limit == 0`` means no limit; ``sort is None`` leaves the store's
    natural order; ``populate`` names relations to expand in each result.
    """

    async def count_documents(self, filter: Mapping[str, Any]) -> int: ...

    async def find(
        self,
        filter: Mapping[str, Any],
        *,
        projection: Mapping[str, Any] | None = None,
        skip: int = 0,
        limit: int = 0,
        sort: Mapping[str, int] | None = None,
        populate: Any = None,
    ) -> list[dict[str, Any]]: ...


__all__ = ["DocumentStore"]

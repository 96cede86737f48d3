"""DataTables – query orchestrator.

Runs one DataTables server-side request against a :class:`DocumentStore`::

    run = datatables_query(MongoDocumentStore(db.users))
    response = await run(request_json)
    return response.to_dict()

Sequence: validate pagination, compile filter/sort/projection, count the
base filter (``recordsTotal``), count the compiled filter
(``recordsFiltered``), fetch the page. Any failure aborts the whole request;
nothing is retried.
"""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from mp_datatables.application.datatables.filters import build_find_parameters
from mp_datatables.application.datatables.ports import DocumentStore
from mp_datatables.application.datatables.projection import build_select_parameters
from mp_datatables.application.datatables.request import DataTablesRequest
from mp_datatables.application.datatables.response import DataTablesResponse
from mp_datatables.application.datatables.settings import DataTablesSettings
from mp_datatables.application.datatables.sort import build_sort_parameters
from mp_datatables.application.datatables.validation import invalid_parameters
from mp_datatables.kernel.errors import (
    DataTablesError,
    MalformedParametersError,
    StoreOperationError,
)
from mp_datatables.kernel.types import Err, Ok, Result
from mp_datatables.observability.logging import get_logger

T = TypeVar("T")

_ALL_ROWS = -1


class DataTablesQuery:
    """Bound to one store; :meth:`run` answers one request per call."""

    def __init__(self, store: DocumentStore, settings: DataTablesSettings | None = None) -> None:
        self._store = store
        self._settings = settings or DataTablesSettings()
        self._log = get_logger(__name__)

    async def __call__(self, params: Mapping[str, Any] | DataTablesRequest) -> DataTablesResponse:
        return await self.run(params)

    async def run(self, params: Mapping[str, Any] | DataTablesRequest) -> DataTablesResponse:
        """Answer *params*.

        Raises
        ------
        MalformedParametersError
            Bad draw/start/length or an uncompilable descriptor; raised
            before the store is touched.
        StoreOperationError
            A count or the fetch failed; the store error is its ``cause``.
        """
        request = params if isinstance(params, DataTablesRequest) else DataTablesRequest.from_mapping(params)

        find_parameters = build_find_parameters(request)
        sort_parameters = build_sort_parameters(request)
        select_parameters = build_select_parameters(request)

        invalid = invalid_parameters(draw=request.draw, start=request.start, length=request.length)
        if not invalid and request.start < 0:
            invalid.append("start")
        if not invalid and request.length < 0 and not (
            request.length == _ALL_ROWS and self._settings.allow_all_rows
        ):
            invalid.append("length")
        if invalid:
            raise MalformedParametersError(
                "Some parameters are missing or in a wrong state: " + ", ".join(invalid),
                detail={"parameters": invalid},
            )

        # A missing sort is valid; only filter and projection can be invalid.
        if find_parameters is None or select_parameters is None:
            raise MalformedParametersError(
                "Malformed query parameters: could not build the filter or projection",
                detail={
                    "filter": find_parameters is not None,
                    "projection": select_parameters is not None,
                },
            )

        skip = int(request.start)
        limit = self._limit(int(request.length))
        log = self._log.bind(draw=request.draw)
        log.debug(
            "datatables.query",
            filter=find_parameters,
            sort=sort_parameters,
            skip=skip,
            limit=limit,
        )

        base_filter = dict(request.find) if request.find else {}
        if self._settings.concurrent_counts:
            records_total, records_filtered = await asyncio.gather(
                self._call("count_total", self._store.count_documents, base_filter),
                self._call("count_filtered", self._store.count_documents, find_parameters),
            )
        else:
            records_total = await self._call("count_total", self._store.count_documents, base_filter)
            records_filtered = await self._call("count_filtered", self._store.count_documents, find_parameters)

        data = await self._call(
            "find",
            self._store.find,
            find_parameters,
            projection=select_parameters,
            skip=skip,
            limit=limit,
            sort=sort_parameters,
            populate=request.populate,
        )

        log.debug(
            "datatables.result",
            records_total=records_total,
            records_filtered=records_filtered,
            returned=len(data),
        )
        return DataTablesResponse(
            draw=request.draw,
            records_total=records_total,
            records_filtered=records_filtered,
            data=list(data),
        )

    async def try_run(
        self, params: Mapping[str, Any] | DataTablesRequest
    ) -> Result[DataTablesResponse, DataTablesError]:
        """Like :meth:`run`, but return ``Ok(response)`` or ``Err(error)``."""
        try:
            return Ok(await self.run(params))
        except DataTablesError as exc:
            return Err(exc)

    def _limit(self, length: int) -> int:
        limit = 0 if length == _ALL_ROWS else length
        max_length = self._settings.max_length
        if max_length and (limit == 0 or limit > max_length):
            return max_length
        return limit

    async def _call(
        self, operation: str, method: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        try:
            return await method(*args, **kwargs)
        except Exception as exc:
            self._log.warning("datatables.store_failed", operation=operation, error=repr(exc))
            raise StoreOperationError(operation, exc) from exc


def datatables_query(
    store: DocumentStore, settings: DataTablesSettings | None = None
) -> Callable[[Mapping[str, Any] | DataTablesRequest], Awaitable[DataTablesResponse]]:
    """Return the ``run`` callable bound to *store*."""
    return DataTablesQuery(store, settings).run


__all__ = ["DataTablesQuery", "datatables_query"]

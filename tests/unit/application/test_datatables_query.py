"""Unit tests for the DataTables query orchestrator."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest

from mp_datatables.application.datatables import (
    DataTablesQuery,
    DataTablesRequest,
    DataTablesResponse,
    DataTablesSettings,
    Relation,
    datatables_query,
)
from mp_datatables.kernel.errors import (
    DescriptorParseError,
    ErrorKind,
    MalformedParametersError,
    StoreOperationError,
)
from mp_datatables.testing.fakes import InMemoryDocumentStore


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


def _params(**overrides: Any) -> dict[str, Any]:
    params: dict[str, Any] = {
        "draw": 1,
        "start": 0,
        "length": 10,
        "columns": [{"data": "name", "searchable": "true", "orderable": "true"}],
        "order": [{"column": "0", "dir": "asc"}],
        "search": {"value": "j", "smart": False},
    }
    params.update(overrides)
    return params


def _people() -> InMemoryDocumentStore:
    return InMemoryDocumentStore([{"name": "John"}, {"name": "Jane"}, {"name": "Bob"}])


class FailingStore:
    """Store whose chosen operation raises."""

    def __init__(self, fail_on: str, error: Exception | None = None) -> None:
        self._inner = _people()
        self._fail_on = fail_on
        self._count_calls = 0
        self.error = error or RuntimeError("store down")

    async def count_documents(self, filter: Mapping[str, Any]) -> int:
        self._count_calls += 1
        step = "count_total" if self._count_calls == 1 else "count_filtered"
        if step == self._fail_on:
            raise self.error
        return await self._inner.count_documents(filter)

    async def find(self, filter: Mapping[str, Any], **kwargs: Any) -> list[dict[str, Any]]:
        if self._fail_on == "find":
            raise self.error
        return await self._inner.find(filter, **kwargs)


# ---------------------------------------------------------------------------
# End-to-end against the in-memory store
# ---------------------------------------------------------------------------


class TestRunEndToEnd:
    def test_case_insensitive_substring_ascending(self) -> None:
        run = datatables_query(_people())
        response = _run(run(_params()))
        assert response.to_dict() == {
            "draw": 1,
            "recordsTotal": 3,
            "recordsFiltered": 2,
            "data": [{"name": "Jane"}, {"name": "John"}],
        }

    def test_string_encoded_pagination(self) -> None:
        response = _run(datatables_query(_people())(_params(draw="7", start="1", length="1")))
        assert response.draw == 7
        assert response.data == [{"name": "John"}]
        assert response.records_filtered == 2

    def test_descending(self) -> None:
        response = _run(datatables_query(_people())(_params(order=[{"column": "0", "dir": "desc"}])))
        assert [d["name"] for d in response.data] == ["John", "Jane"]

    def test_unsorted_is_not_an_error(self) -> None:
        params = _params(order=[{"column": "5", "dir": "asc"}], search={"value": ""})
        response = _run(datatables_query(_people())(params))
        assert [d["name"] for d in response.data] == ["John", "Jane", "Bob"]

    def test_smart_search_phrase_and_token(self) -> None:
        store = InMemoryDocumentStore(
            [
                {"name": "Jane and John Doe"},
                {"name": "john doe"},
                {"name": "Jane Doe, John"},
                {"name": "JOHN DOE with JANE"},
            ]
        )
        params = _params(search={"value": '"John Doe" Jane', "smart": True})
        response = _run(datatables_query(store)(params))
        assert response.records_total == 4
        assert response.records_filtered == 2
        assert {d["name"] for d in response.data} == {"Jane and John Doe", "JOHN DOE with JANE"}

    def test_regex_metacharacters_are_literal(self) -> None:
        store = InMemoryDocumentStore([{"name": "a.c"}, {"name": "abc"}])
        response = _run(datatables_query(store)(_params(search={"value": "a.c"})))
        assert response.data == [{"name": "a.c"}]

    def test_total_counts_base_filter_only(self) -> None:
        store = InMemoryDocumentStore(
            [
                {"name": "John", "active": True},
                {"name": "Jane", "active": True},
                {"name": "Joe", "active": False},
                {"name": "Bob", "active": True},
            ]
        )
        find = {"active": True}
        response = _run(datatables_query(store)(_params(find=find)))
        assert response.records_total == 3
        assert response.records_filtered == 2
        assert find == {"active": True}

    def test_multi_column_search_with_existing_or(self) -> None:
        store = InMemoryDocumentStore(
            [
                {"name": "John", "email": "x@a.io", "role": "admin"},
                {"name": "Ann", "email": "jo@b.io", "role": "user"},
                {"name": "Jo", "email": "jo@c.io", "role": "owner"},
                {"name": "Bob", "email": "b@c.io", "role": "admin"},
            ]
        )
        params = _params(
            columns=[
                {"data": "name", "searchable": "true", "orderable": "true"},
                {"data": "email", "searchable": "true", "orderable": "true"},
            ],
            find={"$or": [{"role": "admin"}, {"role": "owner"}]},
        )
        response = _run(datatables_query(store)(params))
        assert response.records_total == 3
        assert response.records_filtered == 2
        assert [d["name"] for d in response.data] == ["Jo", "John"]

    def test_projection_limits_fields(self) -> None:
        store = InMemoryDocumentStore([{"_id": 1, "name": "John", "secret": "s"}])
        response = _run(datatables_query(store)(_params()))
        assert response.data == [{"_id": 1, "name": "John"}]

    def test_zero_searchable_columns_ignores_search(self) -> None:
        params = _params(columns=[{"data": "name", "searchable": "false", "orderable": "true"}])
        response = _run(datatables_query(_people())(params))
        assert response.records_filtered == 3

    def test_populate(self) -> None:
        store = InMemoryDocumentStore(
            [{"title": "Post", "author": 1}],
            relations={"author": Relation("users", local_field="author")},
            collections={"users": [{"_id": 1, "name": "Ann"}]},
        )
        params = _params(
            columns=[
                {"data": "title", "searchable": "true"},
                {"data": "author", "searchable": "false"},
            ],
            search={"value": ""},
            populate="author",
        )
        response = _run(datatables_query(store)(params))
        assert response.data == [{"title": "Post", "author": {"_id": 1, "name": "Ann"}}]

    def test_accepts_typed_request(self) -> None:
        request = DataTablesRequest.from_mapping(_params())
        response = _run(DataTablesQuery(_people())(request))
        assert isinstance(response, DataTablesResponse)
        assert response.records_filtered == 2

    def test_store_call_order(self) -> None:
        store = _people()
        _run(datatables_query(store)(_params()))
        assert store.calls == ["count_documents", "count_documents", "find"]


# ---------------------------------------------------------------------------
# Paging settings
# ---------------------------------------------------------------------------


class TestPaging:
    def test_length_minus_one_returns_all_rows(self) -> None:
        response = _run(datatables_query(_people())(_params(length=-1, search={"value": ""})))
        assert len(response.data) == 3

    def test_length_minus_one_rejected_when_disabled(self) -> None:
        run = datatables_query(_people(), DataTablesSettings(allow_all_rows=False))
        with pytest.raises(MalformedParametersError) as exc_info:
            _run(run(_params(length=-1)))
        assert exc_info.value.detail["parameters"] == ["length"]

    def test_max_length_caps_page(self) -> None:
        run = datatables_query(_people(), DataTablesSettings(max_length=1))
        response = _run(run(_params(search={"value": ""})))
        assert len(response.data) == 1
        assert response.records_filtered == 3

    def test_concurrent_counts(self) -> None:
        run = datatables_query(_people(), DataTablesSettings(concurrent_counts=True))
        response = _run(run(_params()))
        assert (response.records_total, response.records_filtered) == (3, 2)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestMalformedParameters:
    @pytest.mark.parametrize("name", ["draw", "start", "length"])
    def test_nan_parameter_rejected(self, name: str) -> None:
        store = _people()
        with pytest.raises(MalformedParametersError) as exc_info:
            _run(datatables_query(store)(_params(**{name: "abc"})))
        assert exc_info.value.detail["parameters"] == [name]
        assert name in exc_info.value.message
        assert store.calls == []

    def test_missing_parameters_all_named(self) -> None:
        params = _params()
        for key in ("draw", "start", "length"):
            del params[key]
        with pytest.raises(MalformedParametersError) as exc_info:
            _run(datatables_query(_people())(params))
        assert exc_info.value.detail["parameters"] == ["draw", "start", "length"]

    def test_negative_start_rejected(self) -> None:
        with pytest.raises(MalformedParametersError):
            _run(datatables_query(_people())(_params(start=-5)))

    def test_missing_search_is_malformed_query(self) -> None:
        params = _params()
        del params["search"]
        with pytest.raises(MalformedParametersError) as exc_info:
            _run(datatables_query(_people())(params))
        assert exc_info.value.detail == {"filter": False, "projection": True}

    def test_missing_columns_is_malformed_query(self) -> None:
        params = _params()
        del params["columns"]
        with pytest.raises(MalformedParametersError) as exc_info:
            _run(datatables_query(_people())(params))
        assert exc_info.value.detail == {"filter": False, "projection": False}

    def test_unparseable_searchable_fails_fast(self) -> None:
        store = _people()
        params = _params(columns=[{"data": "name", "searchable": "maybe"}])
        with pytest.raises(DescriptorParseError):
            _run(datatables_query(store)(params))
        assert store.calls == []


class TestStoreFailures:
    @pytest.mark.parametrize("operation", ["count_total", "count_filtered", "find"])
    def test_wrapped_with_cause(self, operation: str) -> None:
        store = FailingStore(operation)
        with pytest.raises(StoreOperationError) as exc_info:
            _run(DataTablesQuery(store).run(_params()))
        err = exc_info.value
        assert err.operation == operation
        assert err.cause is store.error
        assert err.kind is ErrorKind.STORE_OPERATION

    def test_concurrent_count_failure(self) -> None:
        store = FailingStore("count_filtered")
        query = DataTablesQuery(store, DataTablesSettings(concurrent_counts=True))
        with pytest.raises(StoreOperationError):
            _run(query.run(_params()))


class TestTryRun:
    def test_ok(self) -> None:
        result = _run(DataTablesQuery(_people()).try_run(_params()))
        assert result.is_ok()
        assert result.unwrap().records_filtered == 2

    def test_err_malformed(self) -> None:
        result = _run(DataTablesQuery(_people()).try_run(_params(start="abc")))
        assert result.is_err()
        assert result.error.kind is ErrorKind.MALFORMED_PARAMETERS

    def test_err_store(self) -> None:
        result = _run(DataTablesQuery(FailingStore("find")).try_run(_params()))
        assert result.is_err()
        assert result.error.kind is ErrorKind.STORE_OPERATION
        assert isinstance(result.error.cause, RuntimeError)

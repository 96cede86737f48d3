"""Application datatables – DataTables server-side processing.

Compilers (pure functions of the request descriptor):

* :func:`build_find_parameters`   – search → filter (``None`` if invalid)
* :func:`build_sort_parameters`   – order → sort (``None`` if absent)
* :func:`build_select_parameters` – columns → projection (``None`` if invalid)

and the :class:`DataTablesQuery` orchestrator that runs them against a
:class:`DocumentStore`.
"""
from mp_datatables.application.datatables.escape import REGEX_METACHARACTERS, escape_regex
from mp_datatables.application.datatables.fields import searchable_fields
from mp_datatables.application.datatables.filters import (
    build_find_parameters,
    build_search_regex,
    smart_tokens,
)
from mp_datatables.application.datatables.ports import DocumentStore
from mp_datatables.application.datatables.projection import build_select_parameters
from mp_datatables.application.datatables.query import DataTablesQuery, datatables_query
from mp_datatables.application.datatables.relations import Relation, populate_paths
from mp_datatables.application.datatables.request import (
    Column,
    DataTablesRequest,
    OrderDirective,
    Search,
    coerce_number,
    parse_bool,
    parse_int,
)
from mp_datatables.application.datatables.response import DataTablesResponse
from mp_datatables.application.datatables.settings import DataTablesSettings
from mp_datatables.application.datatables.sort import ASCENDING, DESCENDING, build_sort_parameters
from mp_datatables.application.datatables.validation import invalid_parameters, is_nan_or_missing

__all__ = [
    "ASCENDING",
    "Column",
    "DESCENDING",
    "DataTablesQuery",
    "DataTablesRequest",
    "DataTablesResponse",
    "DataTablesSettings",
    "DocumentStore",
    "OrderDirective",
    "REGEX_METACHARACTERS",
    "Relation",
    "Search",
    "build_find_parameters",
    "build_search_regex",
    "build_select_parameters",
    "build_sort_parameters",
    "coerce_number",
    "datatables_query",
    "escape_regex",
    "invalid_parameters",
    "is_nan_or_missing",
    "parse_bool",
    "parse_int",
    "populate_paths",
    "searchable_fields",
]

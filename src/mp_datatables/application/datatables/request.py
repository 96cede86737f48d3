"""DataTables request descriptor – typed values parsed once at the boundary.

The DataTables client sends booleans and integers as strings
(``"searchable": "true"``, ``"column": "0"``). :meth:`DataTablesRequest.from_mapping`
converts the raw JSON-compatible mapping into frozen dataclasses so that the
compilers never coerce ad hoc. Values that cannot be parsed raise
:class:`DescriptorParseError`, except where an unparseable value has a defined
meaning (a sort column index that is not an integer simply disables sorting).
"""
from __future__ import annotations

import dataclasses
import math
from collections.abc import Mapping, Sequence
from typing import Any

from mp_datatables.kernel.errors import DescriptorParseError

Number = int | float


def parse_bool(value: Any, field: str = "value") -> bool:
    """Parse a boolean or its JSON string encoding (``"true"``/``"false"``)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value == "true":
            return True
        if value == "false":
            return False
    raise DescriptorParseError(field, value, 'a boolean or "true"/"false"')


def parse_int(value: Any) -> int | None:
    """Parse an integer or numeric string; ``None`` when it is not one."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def coerce_number(value: Any) -> Number | None:
    """Coerce a pagination value to a number.

    Returns ``None`` when the value is missing and ``math.nan`` when it is
    present but not numeric (including empty strings and infinities).
    Integral values are returned as ``int``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return math.nan
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            return math.nan
    if isinstance(value, float):
        if not math.isfinite(value):
            return math.nan
        return int(value) if value.is_integer() else value
    return math.nan


@dataclasses.dataclass(frozen=True)
class Column:
    """One entry of ``columns``; ``data`` is the document field name."""

    data: str | None
    searchable: bool = False
    orderable: bool = True

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], index: int = 0) -> "Column":
        if not isinstance(raw, Mapping):
            raise DescriptorParseError(f"columns[{index}]", raw, "an object")
        data = raw.get("data")
        if data is not None and not isinstance(data, str):
            data = str(data)
        orderable = raw.get("orderable")
        return cls(
            data=data or None,
            searchable=parse_bool(raw.get("searchable"), f"columns[{index}].searchable"),
            orderable=True if orderable is None else parse_bool(orderable, f"columns[{index}].orderable"),
        )


@dataclasses.dataclass(frozen=True)
class OrderDirective:
    """One entry of ``order``; ``column`` is ``None`` when not an integer."""

    column: int | None
    dir: str | None = None

    @classmethod
    def from_mapping(cls, raw: Any) -> "OrderDirective":
        if not isinstance(raw, Mapping):
            return cls(column=None)
        return cls(column=parse_int(raw.get("column")), dir=raw.get("dir"))


@dataclasses.dataclass(frozen=True)
class Search:
    value: str | None
    smart: bool = False

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Search":
        value = raw.get("value")
        if value is not None and not isinstance(value, str):
            raise DescriptorParseError("search.value", value, "a string")
        smart = raw.get("smart", False)
        return cls(value=value, smart=parse_bool(smart, "search.smart") if smart is not None else False)


def _sequence(value: Any) -> Sequence[Any] | None:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    return None


@dataclasses.dataclass(frozen=True)
class DataTablesRequest:
    """Request-scoped, immutable DataTables descriptor."""

    draw: Number | None = None
    start: Number | None = None
    length: Number | None = None
    columns: tuple[Column, ...] | None = None
    order: tuple[OrderDirective, ...] | None = None
    search: Search | None = None
    find: Mapping[str, Any] | None = None
    populate: Any = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "DataTablesRequest":
        """Parse the JSON-compatible descriptor sent by the DataTables client."""
        if not isinstance(raw, Mapping):
            raise DescriptorParseError("request", raw, "an object")

        raw_columns = _sequence(raw.get("columns"))
        columns = (
            tuple(Column.from_mapping(c, i) for i, c in enumerate(raw_columns))
            if raw_columns is not None
            else None
        )

        raw_order = _sequence(raw.get("order"))
        order = tuple(OrderDirective.from_mapping(o) for o in raw_order) if raw_order is not None else None

        raw_search = raw.get("search")
        if raw_search is not None and not isinstance(raw_search, Mapping):
            raise DescriptorParseError("search", raw_search, "an object")
        search = Search.from_mapping(raw_search) if raw_search is not None else None

        find = raw.get("find")
        if find is not None and not isinstance(find, Mapping):
            raise DescriptorParseError("find", find, "an object")

        return cls(
            draw=coerce_number(raw.get("draw")),
            start=coerce_number(raw.get("start")),
            length=coerce_number(raw.get("length")),
            columns=columns,
            order=order,
            search=search,
            find=find,
            populate=raw.get("populate") or None,
        )


__all__ = [
    "Column",
    "DataTablesRequest",
    "Number",
    "OrderDirective",
    "Search",
    "coerce_number",
    "parse_bool",
    "parse_int",
]

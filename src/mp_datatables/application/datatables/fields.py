"""Searchable-field extraction."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from mp_datatables.application.datatables.request import Column, parse_bool


def searchable_fields(columns: Iterable[Column | Mapping[str, Any]]) -> list[str]:
    """Return the ``data`` field of every searchable column, in column order.

    Raw column mappings are accepted too; their ``searchable`` flag is parsed
    with :func:`parse_bool` and a :class:`DescriptorParseError` propagates.
    """
    fields: list[str] = []
    for index, column in enumerate(columns):
        if isinstance(column, Column):
            searchable, data = column.searchable, column.data
        else:
            searchable = parse_bool(column.get("searchable"), f"columns[{index}].searchable")
            data = column.get("data")
        if searchable:
            fields.append(data)
    return fields


__all__ = ["searchable_fields"]

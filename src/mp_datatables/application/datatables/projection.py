"""Projection compiler – DataTables columns → MongoDB inclusion projection."""
from __future__ import annotations

from mp_datatables.application.datatables.request import DataTablesRequest


def build_select_parameters(request: DataTablesRequest | None) -> dict[str, int] | None:
    """Include the ``data`` field of every column; ``None`` if ``columns`` is absent."""
    if request is None or request.columns is None:
        return None
    return {column.data: 1 for column in request.columns if column.data}


__all__ = ["build_select_parameters"]

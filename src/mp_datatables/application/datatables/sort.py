"""Sort compiler – first DataTables order directive → MongoDB sort."""
from __future__ import annotations

from mp_datatables.application.datatables.request import DataTablesRequest

ASCENDING = 1
DESCENDING = -1


def build_sort_parameters(request: DataTablesRequest | None) -> dict[str, int] | None:
    """Return ``{field: ASCENDING | DESCENDING}`` for ``order[0]``.

    ``None`` means "no sort" and is a valid outcome: missing or empty
    ``order``, a column index that is not an integer or is out of range,
    a non-orderable column, or a column without ``data``. Only ``order[0]``
    is honoured; ``dir`` other than ``"asc"`` sorts descending.
    """
    if request is None or not request.order:
        return None

    directive = request.order[0]
    columns = request.columns
    if directive.column is None or columns is None or not 0 <= directive.column < len(columns):
        return None

    column = columns[directive.column]
    if not column.orderable or not column.data:
        return None

    return {column.data: ASCENDING if directive.dir == "asc" else DESCENDING}


__all__ = ["ASCENDING", "DESCENDING", "build_sort_parameters"]

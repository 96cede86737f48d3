"""DataTables – relation expansion (``populate``) descriptors."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any


@dataclasses.dataclass(frozen=True)
class Relation:
    """How a ``populate`` path joins another collection.

    Documents in *collection* whose *foreign_field* equals the value at
    *local_field* replace that value. With ``many=False`` the first match
    (or ``None``) is stored; with ``many=True`` the full list.
    """

    collection: str
    local_field: str
    foreign_field: str = "_id"
    many: bool = False


def populate_paths(populate: Any) -> list[str]:
    """Normalise a populate hint into a list of paths.

    Accepts ``"author"``, ``"author tags"``, ``["author", "tags"]`` and
    mappings (or lists of mappings) with a ``"path"`` key.
    """
    if not populate:
        return []
    if isinstance(populate, str):
        return populate.split()
    if isinstance(populate, Mapping):
        path = populate.get("path")
        if not isinstance(path, str):
            raise ValueError(f"populate entry without a 'path': {populate!r}")
        return path.split()
    if isinstance(populate, Sequence):
        paths: list[str] = []
        for entry in populate:
            paths.extend(populate_paths(entry))
        return paths
    raise ValueError(f"Unsupported populate hint: {populate!r}")


__all__ = ["Relation", "populate_paths"]

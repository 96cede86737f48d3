"""MongoDB adapter — MongoDocumentStore over a motor collection."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from mp_datatables.application.datatables.ports import DocumentStore
from mp_datatables.application.datatables.relations import Relation, populate_paths

logger = logging.getLogger(__name__)


class MongoDocumentStore(DocumentStore):
    """:class:`DocumentStore` backed by an ``AsyncIOMotorCollection``.

    Plain fetches use ``collection.find``. When ``populate`` is given the
    fetch runs as an aggregation so each path can be joined with
    ``$lookup``; paths resolve through *relations*.

    Usage::

        client = AsyncIOMotorClient(uri)
        store = MongoDocumentStore(
            client.shop.orders,
            relations={"customer": Relation("customers", local_field="customer")},
        )
    """

    def __init__(self, collection: Any, relations: Mapping[str, Relation] | None = None) -> None:
        self._col = collection
        self._relations = dict(relations or {})

    async def count_documents(self, filter: Mapping[str, Any]) -> int:
        return await self._col.count_documents(dict(filter))

    async def find(
        self,
        filter: Mapping[str, Any],
        *,
        projection: Mapping[str, Any] | None = None,
        skip: int = 0,
        limit: int = 0,
        sort: Mapping[str, int] | None = None,
        populate: Any = None,
    ) -> list[dict[str, Any]]:
        paths = populate_paths(populate)
        if paths:
            pipeline = self.build_pipeline(
                filter, projection=projection, skip=skip, limit=limit, sort=sort, paths=paths
            )
            logger.debug("mongodb.aggregate collection=%s stages=%d", self._col.name, len(pipeline))
            cursor = self._col.aggregate(pipeline)
        else:
            logger.debug("mongodb.find collection=%s skip=%d limit=%d", self._col.name, skip, limit)
            cursor = self._col.find(
                dict(filter),
                dict(projection) if projection else None,
                skip=skip,
                limit=limit,
                sort=list(sort.items()) if sort else None,
            )
        return await cursor.to_list(length=None)

    def build_pipeline(
        self,
        filter: Mapping[str, Any],
        *,
        projection: Mapping[str, Any] | None,
        skip: int,
        limit: int,
        sort: Mapping[str, int] | None,
        paths: list[str],
    ) -> list[dict[str, Any]]:
        """Aggregation equivalent of ``find`` with one ``$lookup`` per path.

        Raises ``KeyError`` for a path without a registered :class:`Relation`.
        """
        pipeline: list[dict[str, Any]] = [{"$match": dict(filter)}]
        if sort:
            pipeline.append({"$sort": dict(sort)})
        if skip:
            pipeline.append({"$skip": skip})
        if limit:
            pipeline.append({"$limit": abs(limit)})
        for path in paths:
            relation = self._relations[path]
            pipeline.append(
                {
                    "$lookup": {
                        "from": relation.collection,
                        "localField": relation.local_field,
                        "foreignField": relation.foreign_field,
                        "as": path,
                    }
                }
            )
            if not relation.many:
                pipeline.append({"$set": {path: {"$first": f"${path}"}}})
        if projection:
            pipeline.append({"$project": dict(projection)})
        return pipeline


__all__ = ["MongoDocumentStore"]

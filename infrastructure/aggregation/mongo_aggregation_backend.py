from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from application.ports.aggregation_backend import AggregationBackend

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorDatabase

logger = structlog.get_logger()


class MongoAggregationBackend(AggregationBackend):
    """Adapter running aggregation pipelines through motor."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.db = db

    async def aggregate(
        self,
        collection_name: str,
        pipeline: list[dict[str, Any]],
        *,
        allow_disk_use: bool = False,
    ) -> list[dict[str, Any]]:
        cursor = self.db[collection_name].aggregate(pipeline, allowDiskUse=allow_disk_use)
        results = await cursor.to_list(length=None)
        logger.debug(
            "mongo_aggregation_completed",
            collection=collection_name,
            result_count=len(results),
        )
        return results

from __future__ import annotations

from typing import Any, Protocol


class AggregationBackend(Protocol):
    async def aggregate(
        self,
        collection_name: str,
        pipeline: list[dict[str, Any]],
        *,
        allow_disk_use: bool = False,
    ) -> list[dict[str, Any]]:
        """Run an aggregation pipeline on a collection and materialize the results.

        Args:
            collection_name: Name of the collection to aggregate
            pipeline: Ordered pipeline stage documents
            allow_disk_use: Let stages spill to disk for large sorts and groups

        Returns:
            Result documents in backend order

        """
        ...

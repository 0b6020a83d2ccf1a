from __future__ import annotations

from lagom import Container
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from application.ports.aggregation_backend import AggregationBackend
from application.ports.blob_backend import BlobBackend
from application.ports.template_loader import TemplateLoader
from application.use_cases.blob_use_cases import BlobStore
from application.use_cases.pipeline_use_cases import PipelineEngine
from infrastructure.aggregation.mongo_aggregation_backend import MongoAggregationBackend
from infrastructure.blob_stores.gridfs_blob_backend import GridFsBlobBackend
from infrastructure.config import Settings, settings
from infrastructure.template_loaders.fsspec_template_loader import FsspecTemplateLoader
from infrastructure.template_loaders.package_template_loader import PackageTemplateLoader


def create_container(config: Settings = settings) -> Container:
    container = Container()

    # MongoDB client and database shared by both components
    mongo_client = AsyncIOMotorClient(config.mongo_uri, tz_aware=True)
    container[AsyncIOMotorClient] = mongo_client
    container[AsyncIOMotorDatabase] = mongo_client[config.mongo_db]

    # Blob storage (GridFS)
    container[BlobBackend] = lambda c: GridFsBlobBackend(
        db=c[AsyncIOMotorDatabase],
        bucket_name=config.gridfs_bucket,
    )

    # Aggregations
    container[AggregationBackend] = lambda c: MongoAggregationBackend(db=c[AsyncIOMotorDatabase])

    # Pipeline templates: package data when configured, otherwise fsspec
    if config.template_package:
        container[TemplateLoader] = PackageTemplateLoader(package=config.template_package)
    else:
        container[TemplateLoader] = FsspecTemplateLoader(
            base_url=config.template_base_url,
            storage_options=config.template_storage_options,
        )

    # Register Use Cases
    container[BlobStore] = lambda c: BlobStore(blob_backend=c[BlobBackend])
    container[PipelineEngine] = lambda c: PipelineEngine(
        aggregation_backend=c[AggregationBackend],
        template_loader=c[TemplateLoader],
    )

    return container

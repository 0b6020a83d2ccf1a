"""FastAPI dependency injection integration with Lagom."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from lagom import Container

from application.use_cases.blob_use_cases import BlobStore
from application.use_cases.pipeline_use_cases import PipelineEngine
from infrastructure.di.container import create_container


@lru_cache
def get_container() -> Container:
    """Get the DI container instance.

    Cached to ensure singleton behavior across requests.
    """
    return create_container()


def get_blob_store(container: Annotated[Container, Depends(get_container)]) -> BlobStore:
    return container[BlobStore]


def get_pipeline_engine(
    container: Annotated[Container, Depends(get_container)],
) -> PipelineEngine:
    return container[PipelineEngine]

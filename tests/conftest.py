"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from application.use_cases.blob_use_cases import BlobStore
from application.use_cases.pipeline_use_cases import PipelineEngine
from tests.mocks import MockAggregationBackend, MockBlobBackend, MockTemplateLoader


@pytest.fixture
def blob_backend() -> MockBlobBackend:
    """Return an empty in-memory blob backend."""
    return MockBlobBackend()


@pytest.fixture
def blob_store(blob_backend: MockBlobBackend) -> BlobStore:
    """Create a BlobStore over the in-memory backend."""
    return BlobStore(blob_backend)


@pytest.fixture
def aggregation_backend() -> MockAggregationBackend:
    """Return an aggregation backend answering with two documents."""
    return MockAggregationBackend(results=[{"_id": "a", "total": 3}, {"_id": "b", "total": 1}])


@pytest.fixture
def template_loader() -> MockTemplateLoader:
    """Return a loader holding a couple of pipeline templates."""
    return MockTemplateLoader(
        templates={
            "by_owner.json": b'[{"$match": {"owner": "##owner##"}}, {"$limit": ##limit##}]',
            "positional.json": b'[{"$match": {"x": ##id##}}]',
            "broken.json": b"not json",
        },
    )


@pytest.fixture
def pipeline_engine(
    aggregation_backend: MockAggregationBackend,
    template_loader: MockTemplateLoader,
) -> PipelineEngine:
    """Create a PipelineEngine over the mock backend and loader."""
    return PipelineEngine(aggregation_backend, template_loader)

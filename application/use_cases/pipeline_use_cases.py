from typing import Any

import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.ports.aggregation_backend import AggregationBackend
from application.ports.template_loader import TemplateLoader
from domain.exceptions import TemplateError
from domain.services.pipeline_compiler import PipelineArgs, compile_pipeline

logger = structlog.get_logger()

type Documents = list[dict[str, Any]]


class PipelineEngine:
    """Compile parameterized JSON templates and run them as aggregations.

    The ``execute*``, ``build_pipeline`` and ``read_template`` methods absorb
    every failure: they log it and return an empty value. Each has a strict
    twin (``run*``, ``compile``, ``load_template``) returning a Result whose
    failure is a 'template_error' or 'backend_error'.
    """

    def __init__(
        self,
        aggregation_backend: AggregationBackend,
        template_loader: TemplateLoader | None = None,
    ) -> None:
        self.aggregation_backend = aggregation_backend
        self.template_loader = template_loader

    # ============================================================================
    # STRICT API
    # ============================================================================

    async def run(self, collection_name: str, pipeline: Documents) -> Result[Documents, AppError]:
        """Run a parsed pipeline with disk use allowed."""
        logger.info("aggregation_started", collection=collection_name, stages=len(pipeline))
        try:
            results = await self.aggregation_backend.aggregate(
                collection_name,
                pipeline,
                allow_disk_use=True,
            )
        except Exception as e:
            # Driver errors come in many types (operation failures, timeouts, auth...)
            logger.exception("aggregation_backend_error", collection=collection_name)
            return Failure(
                AppError("backend_error", f"Aggregation on {collection_name} failed: {e!s}"),
            )
        return Success(list(results))

    async def run_template(
        self,
        collection_name: str,
        template: str,
        args: PipelineArgs | None = None,
    ) -> Result[Documents, AppError]:
        compiled = self.compile(template, args)
        if isinstance(compiled, Failure):
            return compiled
        return await self.run(collection_name, compiled.unwrap())

    async def run_from_file(
        self,
        collection_name: str,
        template_name: str,
        args: PipelineArgs | None = None,
    ) -> Result[Documents, AppError]:
        loaded = self.load_template(template_name)
        if isinstance(loaded, Failure):
            return loaded
        return await self.run_template(collection_name, loaded.unwrap(), args)

    def compile(self, template: str, args: PipelineArgs | None = None) -> Result[Documents, AppError]:
        """Substitute placeholders and parse the template into stage documents."""
        try:
            return Success(compile_pipeline(template, args))
        except TemplateError as e:
            return Failure(AppError("template_error", str(e)))

    def load_template(self, name: str) -> Result[str, AppError]:
        """Load a named template as UTF-8 text."""
        if self.template_loader is None:
            return Failure(AppError("template_error", "No template loader configured"))

        try:
            raw = self.template_loader.load(name)
        except Exception as e:
            # Loaders fail in many ways (I/O, unknown fsspec protocol, missing s3fs, credentials...)
            logger.exception("pipeline_template_load_error", template_name=name)
            return Failure(AppError("template_error", f"Failed to read pipeline file {name}: {e!s}"))
        if raw is None:
            return Failure(AppError("template_error", f"Pipeline file not found: {name}"))

        try:
            return Success(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Failure(AppError("template_error", f"Pipeline file {name} is not UTF-8: {e!s}"))

    # ============================================================================
    # LENIENT API
    # ============================================================================

    async def execute(self, collection_name: str, pipeline: Documents) -> Documents:
        """Run a parsed pipeline; returns an empty list on any failure."""
        return _value_or_empty(await self.run(collection_name, pipeline), [], collection_name)

    async def execute_template(
        self,
        collection_name: str,
        template: str,
        args: PipelineArgs | None = None,
    ) -> Documents:
        """Compile and run a template with positional (sequence) or named (mapping) args."""
        result = await self.run_template(collection_name, template, args)
        return _value_or_empty(result, [], collection_name)

    async def execute_from_file(
        self,
        collection_name: str,
        template_name: str,
        args: PipelineArgs | None = None,
    ) -> Documents:
        result = await self.run_from_file(collection_name, template_name, args)
        return _value_or_empty(result, [], collection_name, template_name=template_name)

    def build_pipeline(self, template: str, args: PipelineArgs | None = None) -> Documents:
        return _value_or_empty(self.compile(template, args), [])

    def read_template(self, name: str) -> str:
        return _value_or_empty(self.load_template(name), "", template_name=name)


def _value_or_empty[T](
    result: Result[T, AppError],
    empty: T,
    collection_name: str | None = None,
    **context: str,
) -> T:
    if isinstance(result, Failure):
        error = result.failure()
        logger.error(
            "aggregation_failed",
            collection=collection_name,
            category=error.category,
            error=error.message,
            **context,
        )
    return result.value_or(empty)

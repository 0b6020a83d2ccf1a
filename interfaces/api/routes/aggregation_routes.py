import json
from typing import Annotated, Any

from bson import json_util
from bson.json_util import RELAXED_JSON_OPTIONS
from fastapi import APIRouter, Depends, Query, status
from returns.result import Result, Success

from application.dtos.aggregation_dtos import (
    AggregationRequest,
    AggregationResponse,
    CompilePipelineRequest,
)
from application.dtos.errors import AppError
from application.use_cases.pipeline_use_cases import PipelineEngine
from interfaces.api.middleware import handle_use_case_errors
from interfaces.dependencies import get_pipeline_engine

router = APIRouter(prefix="/aggregations", tags=["aggregations"])


def _to_jsonable(documents: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Render BSON values (ObjectId, datetime...) as relaxed Extended JSON."""
    return json.loads(json_util.dumps(documents, json_options=RELAXED_JSON_OPTIONS))


# Registered before /{collection_name} so "compile" is not taken as a collection
@router.post("/compile", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def compile_pipeline(
    request: CompilePipelineRequest,
    engine: Annotated[PipelineEngine, Depends(get_pipeline_engine)],
) -> list[dict[str, Any]]:
    """Substitute placeholders and return the parsed pipeline without running it."""
    return engine.compile(request.template, request.args).map(_to_jsonable)


@router.post("/{collection_name}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def run_aggregation(
    collection_name: str,
    request: AggregationRequest,
    engine: Annotated[PipelineEngine, Depends(get_pipeline_engine)],
    strict: Annotated[bool, Query()] = False,
) -> AggregationResponse:
    """Run an aggregation from a parsed pipeline, an inline template or a stored template.

    By default failures produce an empty result set. With ``strict=true`` they
    are reported as 400 (template errors) or 503 (backend errors).
    """
    if strict:
        result = await _run_strict(engine, collection_name, request)
    elif request.pipeline is not None:
        result = Success(await engine.execute(collection_name, request.pipeline))
    elif request.template is not None:
        result = Success(
            await engine.execute_template(collection_name, request.template, request.args),
        )
    else:
        result = Success(
            await engine.execute_from_file(collection_name, request.template_name, request.args),
        )

    return result.map(
        lambda documents: AggregationResponse(
            results=_to_jsonable(documents),
            count=len(documents),
        ),
    )


async def _run_strict(
    engine: PipelineEngine,
    collection_name: str,
    request: AggregationRequest,
) -> Result[list[dict[str, Any]], AppError]:
    if request.pipeline is not None:
        return await engine.run(collection_name, request.pipeline)
    if request.template is not None:
        return await engine.run_template(collection_name, request.template, request.args)
    return await engine.run_from_file(collection_name, request.template_name, request.args)

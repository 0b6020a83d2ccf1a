from typing import Any, Self

from pydantic import BaseModel, Field, model_validator


class AggregationRequest(BaseModel):
    """Request DTO for running an aggregation.

    Exactly one pipeline source must be given: an already parsed ``pipeline``,
    an inline ``template`` or the ``template_name`` of a stored template.
    """

    pipeline: list[dict[str, Any]] | None = Field(
        None,
        description="Parsed pipeline stage documents",
    )
    template: str | None = Field(None, description="Inline JSON pipeline template")
    template_name: str | None = Field(None, description="Name of a stored pipeline template")
    args: list[str] | dict[str, Any] | None = Field(
        None,
        description="Positional (list) or named (object) placeholder values",
    )

    @model_validator(mode="after")
    def _exactly_one_source(self) -> Self:
        sources = [self.pipeline, self.template, self.template_name]
        if sum(source is not None for source in sources) != 1:
            msg = "Exactly one of 'pipeline', 'template' or 'template_name' is required"
            raise ValueError(msg)
        return self


class CompilePipelineRequest(BaseModel):
    template: str = Field(..., description="JSON pipeline template")
    args: list[str] | dict[str, Any] | None = Field(
        None,
        description="Positional (list) or named (object) placeholder values",
    )


class AggregationResponse(BaseModel):
    results: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Result documents in backend order",
    )
    count: int = Field(0, description="Number of result documents")

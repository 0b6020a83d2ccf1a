"""Compile parameterized JSON templates into aggregation pipelines.

Templates carry placeholders of the form ``##name##``. Substitution is purely
textual: values are inserted as-is, so callers must supply text that is valid
in its JSON position (quoted strings, bare numbers...). ``json_literals`` turns
native values into such text for callers that do not want to quote by hand.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from bson import json_util
from bson.errors import BSONError

from domain.exceptions import TemplateError

PLACEHOLDER_PATTERN = re.compile(r"##(.*?)##")

type PipelineArgs = Sequence[str] | Mapping[str, Any]


def substitute_positional(template: str, args: Sequence[str]) -> str:
    """Replace placeholders left to right, one per argument.

    Each argument replaces the first remaining ``##...##`` match, so extra
    arguments are ignored and surplus placeholders stay in the text.
    """
    for arg in args:
        # A callable replacement keeps backslashes in the value literal.
        template = PLACEHOLDER_PATTERN.sub(lambda _, value=str(arg): value, template, count=1)
    return template


def substitute_named(template: str, args: Mapping[str, Any]) -> str:
    """Replace every ``##key##`` occurrence for each key of the mapping."""
    for key, value in args.items():
        template = template.replace(f"##{key}##", str(value))
    return template


def substitute(template: str, args: PipelineArgs | None) -> str:
    """Dispatch to named or positional substitution depending on ``args``."""
    if args is None:
        return template
    if isinstance(args, Mapping):
        return substitute_named(template, args)
    if isinstance(args, str):
        return substitute_positional(template, [args])
    return substitute_positional(template, args)


def json_literals(args: Mapping[str, Any]) -> dict[str, str]:
    """Render each value as an Extended JSON literal for named substitution."""
    return {key: json_util.dumps(value) for key, value in args.items()}


def parse_pipeline(text: str) -> list[dict[str, Any]]:
    """Parse JSON text into a list of pipeline stage documents.

    Extended JSON forms such as ``{"$oid": ...}`` and ``{"$date": ...}`` are
    decoded into their BSON types.

    Raises:
        TemplateError: If the text is not a JSON array of objects

    """
    try:
        parsed = json_util.loads(text)
    except (ValueError, TypeError, ArithmeticError, RecursionError, BSONError) as exc:
        # Extended JSON values can overflow (e.g. {"$date": 1e400}) or nest too deeply
        msg = f"Pipeline is not valid JSON: {exc}"
        raise TemplateError(msg) from exc

    if not isinstance(parsed, list):
        msg = f"Pipeline must be a JSON array, got {type(parsed).__name__}"
        raise TemplateError(msg)

    for index, stage in enumerate(parsed):
        if not isinstance(stage, dict):
            msg = f"Pipeline stage {index} must be a JSON object, got {type(stage).__name__}"
            raise TemplateError(msg)

    return parsed


def compile_pipeline(template: str, args: PipelineArgs | None = None) -> list[dict[str, Any]]:
    """Substitute placeholders and parse the result into pipeline stages."""
    return parse_pipeline(substitute(template, args))

"""Tests for placeholder substitution and pipeline parsing."""

from __future__ import annotations

import datetime

import pytest
from bson import ObjectId

from domain.exceptions import TemplateError
from domain.services.pipeline_compiler import (
    compile_pipeline,
    json_literals,
    parse_pipeline,
    substitute,
    substitute_named,
    substitute_positional,
)


class TestPositionalSubstitution:
    """Test left-to-right placeholder replacement."""

    def test_single_placeholder(self) -> None:
        assert compile_pipeline('[{"$match":{"x":##id##}}]', ["42"]) == [{"$match": {"x": 42}}]

    def test_arguments_consumed_in_order(self) -> None:
        template = '[{"$match":{"a":##first##,"b":"##second##"}}]'
        assert substitute_positional(template, ["1", "two"]) == '[{"$match":{"a":1,"b":"two"}}]'

    def test_placeholder_names_are_irrelevant(self) -> None:
        assert substitute_positional("##...## ##x## ####", ["a", "b", "c"]) == "a b c"

    def test_extra_arguments_ignored(self) -> None:
        assert substitute_positional('{"x":##v##}', ["1", "2", "3"]) == '{"x":1}'

    def test_surplus_placeholders_left_in_place(self) -> None:
        assert substitute_positional("##a## ##b## ##c##", ["1"]) == "1 ##b## ##c##"

    def test_values_inserted_literally(self) -> None:
        template = '[{"$match":{"path":"##p##","cost":"##c##"}}]'
        result = substitute_positional(template, [r"C:\\dir\\1", "$5"])
        assert result == r'[{"$match":{"path":"C:\\dir\\1","cost":"$5"}}]'

    def test_value_containing_delimiters_is_rescanned(self) -> None:
        # The second argument replaces the placeholder introduced by the first.
        assert substitute_positional("##a## ##b##", ["##z##", "1"]) == "1 ##b##"

    def test_match_is_non_greedy(self) -> None:
        assert substitute_positional("##a##-##b##", ["X"]) == "X-##b##"

    def test_positional_equals_manual_replacement(self) -> None:
        template = '[{"$match":{"a":##1##}},{"$skip":##2##},{"$limit":##3##}]'
        manual = '[{"$match":{"a":7}},{"$skip":0},{"$limit":10}]'
        assert compile_pipeline(template, ["7", "0", "10"]) == parse_pipeline(manual)


class TestNamedSubstitution:
    """Test keyed placeholder replacement."""

    def test_named_arguments(self) -> None:
        template = '[{"$match":{"name":"##n##"}},{"$limit":##k##}]'
        assert compile_pipeline(template, {"n": "ada", "k": "5"}) == [
            {"$match": {"name": "ada"}},
            {"$limit": 5},
        ]

    def test_every_occurrence_replaced(self) -> None:
        assert substitute_named("##a##/##a##/##a##", {"a": "x"}) == "x/x/x"

    def test_unknown_placeholders_left_intact(self) -> None:
        assert substitute_named("##a## ##b##", {"a": "1"}) == "1 ##b##"

    def test_values_use_printable_form(self) -> None:
        assert substitute_named('{"limit": ##k##}', {"k": 5}) == '{"limit": 5}'

    def test_order_independent(self) -> None:
        template = "##x## ##y##"
        forward = substitute_named(template, {"x": "1", "y": "2"})
        backward = substitute_named(template, {"y": "2", "x": "1"})
        assert forward == backward == "1 2"


class TestSubstituteDispatch:
    def test_none_leaves_template_untouched(self) -> None:
        assert substitute("##a##", None) == "##a##"

    def test_mapping_is_named(self) -> None:
        assert substitute("##b## ##a##", {"a": "1"}) == "##b## 1"

    def test_sequence_is_positional(self) -> None:
        assert substitute("##b## ##a##", ("1",)) == "1 ##a##"

    def test_single_string_is_one_positional_argument(self) -> None:
        assert substitute("##a## ##b##", "42") == "42 ##b##"


class TestJsonLiterals:
    def test_values_rendered_as_json(self) -> None:
        literals = json_literals({"name": 'O"Brien', "active": True, "n": 3, "none": None})
        assert literals == {"name": '"O\\"Brien"', "active": "true", "n": "3", "none": "null"}

    def test_literals_compile_without_manual_quoting(self) -> None:
        template = '[{"$match":{"name":##name##,"active":##active##}}]'
        pipeline = compile_pipeline(template, json_literals({"name": "ada", "active": False}))
        assert pipeline == [{"$match": {"name": "ada", "active": False}}]


class TestParsePipeline:
    """Test decoding substituted text into stage documents."""

    def test_stage_order_preserved(self) -> None:
        pipeline = parse_pipeline('[{"$match":{}},{"$sort":{"a":1}},{"$limit":1}]')
        assert [next(iter(stage)) for stage in pipeline] == ["$match", "$sort", "$limit"]

    def test_empty_array(self) -> None:
        assert parse_pipeline("[]") == []

    def test_extended_json_values_decoded(self) -> None:
        pipeline = parse_pipeline(
            '[{"$match":{"_id":{"$oid":"65f1c0ffee0000000000abcd"},'
            '"at":{"$gte":{"$date":"2024-01-01T00:00:00Z"}}}}]',
        )
        match = pipeline[0]["$match"]
        assert match["_id"] == ObjectId("65f1c0ffee0000000000abcd")
        assert match["at"]["$gte"].replace(tzinfo=None) == datetime.datetime(2024, 1, 1)

    @pytest.mark.parametrize(
        "text",
        ["not json", "", '{"$match": {}}', '[{"$match": {}}, 3]', '["$match"]', "[{", "null"],
    )
    def test_invalid_pipelines_raise(self, text: str) -> None:
        with pytest.raises(TemplateError):
            parse_pipeline(text)

    @pytest.mark.parametrize(
        "text",
        [
            '[{"$match": {"d": {"$date": 1e400}}}]',
            "[" * 100_000 + "]" * 100_000,
        ],
    )
    def test_decoder_overflow_is_template_error(self, text: str) -> None:
        with pytest.raises(TemplateError):
            parse_pipeline(text)

    def test_unsubstituted_placeholder_fails_to_parse(self) -> None:
        with pytest.raises(TemplateError):
            compile_pipeline('[{"$limit": ##k##}]', [])

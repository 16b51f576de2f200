"""Unit tests for query composition."""

import pytest

from fqlclient.errors import PrecisionLossError, QueryTemplateError
from fqlclient.query_builder import (
    Literal,
    QueryBuilder,
    SubQuery,
    fql,
    fql_template,
)
from fqlclient.values import DateStub
from fqlclient.wire.protocol import QueryOptions, QueryRequest


class TestConstruction:
    """Tests for template shape checks."""

    def test_mismatched_counts_fail_immediately(self):
        with pytest.raises(QueryTemplateError):
            QueryBuilder(["a", "b"], 1, 2)

    def test_empty_fragments_fail(self):
        with pytest.raises(QueryTemplateError):
            QueryBuilder([])

    def test_non_string_fragment_fails(self):
        with pytest.raises(QueryTemplateError):
            QueryBuilder(["a", 5], 1)

    def test_plain_string_is_one_fragment(self):
        assert fql("Authors.all()").fragments == ("Authors.all()",)

    def test_interpolations_are_classified(self):
        inner = fql("Authors")
        builder = fql(["", ".byId(", ")"], inner, "123")
        assert builder.interpolations == (SubQuery(inner), Literal("123"))


class TestRender:
    """Tests for to_query()."""

    def test_single_fragment(self):
        request = fql("SELECT 1").to_query()
        assert request.query == {"fql": ["SELECT 1"]}
        assert request.arguments == {}

    def test_literal_mapping(self):
        request = fql(["Authors.create(", ")"], {"firstName": "a", "age": 3}).to_query()
        encoded = {"firstName": "a", "age": {"@int": "3"}}
        assert request.query == {"fql": ["Authors.create(", {"value": encoded}, ")"]}
        assert request.arguments == {"arg0": encoded}

    def test_empty_fragments_are_elided(self):
        request = fql(["", ""], 5).to_query()
        assert request.query == {"fql": [{"value": {"@int": "5"}}]}

    def test_final_fragment_kept_only_when_non_empty(self):
        request = fql(["x == ", ""], DateStub("2023-01-01")).to_query()
        assert request.query == {"fql": ["x == ", {"value": {"@date": "2023-01-01"}}]}

    def test_nested_builder_is_spliced_as_sub_query(self):
        inner = fql(["Authors.byGenre(", ")"], "sci-fi")
        outer = fql(["", ".where(.age > ", ")"], inner, 30)
        request = outer.to_query()

        assert request.query == {
            "fql": [
                {"fql": ["Authors.byGenre(", {"value": "sci-fi"}, ")"]},
                ".where(.age > ",
                {"value": {"@int": "30"}},
                ")",
            ]
        }
        assert request.arguments == {"arg0": "sci-fi", "arg1": {"@int": "30"}}

    def test_sibling_sub_queries_do_not_collide(self):
        a = fql(["f(", ")"], 1)
        b = fql(["g(", ")"], 2)
        request = fql(["[", ", ", "]"], a, b).to_query()
        assert request.arguments == {"arg0": {"@int": "1"}, "arg1": {"@int": "2"}}

    def test_render_is_repeatable(self):
        builder = fql(["f(", ", ", ")"], fql(["g(", ")"], "x"), [1, 2])
        assert builder.to_query() == builder.to_query()

    def test_options_are_attached(self):
        options = QueryOptions(linearized=True, query_tags={"a": "b"})
        request = fql("1").to_query(options)
        assert isinstance(request, QueryRequest)
        assert request.options == options

    def test_codec_errors_surface_at_render(self):
        builder = fql(["f(", ")"], 2 ** 64)
        with pytest.raises(PrecisionLossError):
            builder.to_query()

    def test_to_body(self):
        body = fql(["f(", ")"], True).to_query().to_body()
        assert body == {
            "query": {"fql": ["f(", {"value": True}, ")"]},
            "arguments": {"arg0": True},
        }


class TestTemplate:
    """Tests for fql_template()."""

    def test_placeholders_become_interpolations(self):
        builder = fql_template("Authors.byName(${first}, ${ last })", first="a", last="b")
        assert builder.fragments == ("Authors.byName(", ", ", ")")
        assert builder.interpolations == (Literal("a"), Literal("b"))

    def test_repeated_placeholder(self):
        builder = fql_template("${x} + ${x}", x=1)
        assert builder.fragments == ("", " + ", "")
        assert len(builder.interpolations) == 2

    def test_nested_builder_value(self):
        inner = fql("Authors")
        builder = fql_template("${coll}.all()", coll=inner)
        assert builder.interpolations == (SubQuery(inner),)

    def test_missing_value(self):
        with pytest.raises(QueryTemplateError, match="first"):
            fql_template("f(${first})")

    def test_unused_value(self):
        with pytest.raises(QueryTemplateError, match="extra"):
            fql_template("f()", extra=1)

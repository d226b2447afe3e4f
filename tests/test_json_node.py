"""
Tests for the structural JSON node.
Run: pytest tests/test_json_node.py -v
"""

import pytest

from tersehttp import JsonNode


@pytest.fixture
def post():
    return JsonNode.parse('{"id": 1, "title": "t", "tags": ["a", "b"], "author": {"name": "Ada", "age": "36"}}')


class TestNavigation:
    def test_has_and_get(self, post):
        assert post.has("id")
        assert post.get("id").as_int() == 1
        assert post.get("title").as_text() == "t"

    def test_missing_field(self, post):
        assert not post.has("nope")
        assert post.get("nope") is None

    def test_nested(self, post):
        assert post.get("author").get("name").as_text() == "Ada"

    def test_array_index(self, post):
        tags = post.get("tags")
        assert tags.is_array()
        assert tags.get(1).as_text() == "b"
        assert tags.get(5) is None
        assert tags.has(0)
        assert not tags.has("0")

    def test_path_never_returns_none(self, post):
        node = post.path("nope").path("deeper")
        assert node.is_missing()
        assert node.as_text() == ""
        assert node.as_int() == 0

    def test_getitem_and_contains(self, post):
        assert post["id"].as_int() == 1
        assert "title" in post
        with pytest.raises(KeyError):
            post["nope"]

    def test_keys_and_size(self, post):
        assert post.keys() == ["id", "title", "tags", "author"]
        assert post.size() == 4
        assert len(post.get("tags")) == 2
        assert post.get("id").size() == 0

    def test_iteration_yields_nodes(self, post):
        assert [n.as_text() for n in post.get("tags")] == ["a", "b"]
        assert dict((k, v.value) for k, v in post.get("author").items()) == {"name": "Ada", "age": "36"}


class TestConversion:
    def test_numeric_text(self, post):
        assert post.get("author").get("age").as_int() == 36

    def test_as_int_default(self):
        assert JsonNode("abc").as_int() == 0
        assert JsonNode("abc").as_int(default=-1) == -1
        assert JsonNode([1]).as_int() == 0

    def test_as_text_of_scalars(self):
        assert JsonNode(12).as_text() == "12"
        assert JsonNode(True).as_text() == "true"
        assert JsonNode(None).as_text() == "null"
        assert JsonNode({"a": 1}).as_text() == ""

    def test_as_float_and_bool(self):
        assert JsonNode("2.5").as_float() == 2.5
        assert JsonNode(1).as_bool() is True
        assert JsonNode("false").as_bool() is False
        assert JsonNode("maybe").as_bool(default=True) is True

    def test_predicates(self):
        assert JsonNode(1).is_number()
        assert not JsonNode(True).is_number()
        assert JsonNode(True).is_boolean()
        assert JsonNode(None).is_null()
        assert JsonNode("x").is_textual()
        assert JsonNode({}).is_object()
        assert JsonNode({}).is_container()


class TestSerialisation:
    def test_pretty_string_is_multiline(self, post):
        pretty = post.to_pretty_string()
        assert '"id"' in pretty
        assert '"title"' in pretty
        assert "\n" in pretty

    def test_str_is_compact(self):
        assert str(JsonNode.parse('{ "a" : [1, 2] }')) == '{"a":[1,2]}'

    def test_text_node(self):
        node = JsonNode.text("<html>oops</html>")
        assert node.is_textual()
        assert node.as_text() == "<html>oops</html>"

    def test_parse_rejects_invalid(self):
        with pytest.raises(ValueError):
            JsonNode.parse("not json")
        with pytest.raises(ValueError):
            JsonNode.parse("")


class TestEquality:
    def test_equal_values(self):
        assert JsonNode.parse('{"a": [1, 2]}') == JsonNode({"a": [1, 2]})

    def test_true_is_not_one(self):
        assert JsonNode(True) != JsonNode(1)
        assert JsonNode([True]) != JsonNode([1])

    def test_missing_nodes(self):
        assert JsonNode.missing() == JsonNode.missing()
        assert JsonNode.missing() != JsonNode(None)

    def test_wrapping_a_node_unwraps_it(self):
        inner = JsonNode({"a": 1})
        assert JsonNode(inner).value == {"a": 1}


class TestDeepNesting:
    def test_too_deep_is_a_value_error(self):
        with pytest.raises(ValueError, match="nested too deeply"):
            JsonNode.parse("[" * 100000 + "]" * 100000)

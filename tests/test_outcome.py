"""
Tests for the outcome variants and their helpers.
Run: pytest tests/test_outcome.py -v
"""

import pytest
from pydantic import BaseModel

from tersehttp import HttpFailure, JsonNode, NetworkFailure, OutcomeError, ParseFailure, Success

HEADERS = {"content-type": ["application/json"], "set-cookie": ["a=1", "b=2"]}


class ApiError(BaseModel):
    error: str
    code: int


def success(data="payload"):
    return Success(data, JsonNode({"data": data}), 200, HEADERS)


def failures():
    return [
        NetworkFailure(ConnectionError("connection refused")),
        HttpFailure(404, '{"error":"missing"}', HEADERS),
        ParseFailure(200, "not json", ValueError("bad body"), HEADERS),
    ]


class TestOrElseThrow:
    def test_success_returns_payload(self):
        payload = {"id": 1}
        assert success(payload).or_else_throw() is payload

    def test_network_message(self):
        with pytest.raises(OutcomeError, match=r"^Network error: connection refused$"):
            NetworkFailure(ConnectionError("connection refused")).or_else_throw()

    def test_network_message_without_text(self):
        assert NetworkFailure(TimeoutError()).message() == "Network error: TimeoutError"

    def test_http_message(self):
        with pytest.raises(OutcomeError) as excinfo:
            HttpFailure(503, "down for maintenance").or_else_throw()
        assert str(excinfo.value) == "HTTP 503: down for maintenance"

    def test_parse_message(self):
        with pytest.raises(OutcomeError, match=r"^Parse error: bad body$"):
            ParseFailure(200, "x", ValueError("bad body")).or_else_throw()

    def test_error_carries_failure(self):
        failure = HttpFailure(500, "boom")
        with pytest.raises(OutcomeError) as excinfo:
            failure.or_else_throw()
        assert excinfo.value.failure is failure

    def test_is_a_runtime_error(self):
        with pytest.raises(RuntimeError):
            HttpFailure(400, "").or_else_throw()


class TestToOptional:
    def test_success(self):
        assert success("x").to_optional() == "x"

    @pytest.mark.parametrize("failure", failures())
    def test_failures_are_none(self, failure):
        assert failure.to_optional() is None


class TestMap:
    def test_functor_law(self):
        fn = lambda s: s.upper() + "!"
        s = success("abc")
        assert s.map(fn).to_optional() == fn(s.to_optional())

    def test_keeps_metadata(self):
        s = success("abc")
        mapped = s.map(len)
        assert isinstance(mapped, Success)
        assert mapped.data == 3
        assert mapped.raw_json is s.raw_json
        assert mapped.status == 200
        assert mapped.headers is s.headers

    def test_original_untouched(self):
        s = success("abc")
        s.map(len)
        assert s.data == "abc"

    @pytest.mark.parametrize("failure", failures())
    def test_failures_pass_through(self, failure):
        calls = []
        result = failure.map(lambda v: calls.append(v))
        assert result is failure
        assert calls == []

    def test_chained_maps(self):
        assert success(2).map(lambda x: x + 1).map(lambda x: x * 10).or_else_throw() == 30


class TestHandle:
    def test_success_branch(self):
        seen = []
        success("ok").handle(lambda s: seen.append(("ok", s.data)), lambda f: seen.append(("fail", f)))
        assert seen == [("ok", "ok")]

    @pytest.mark.parametrize("failure", failures())
    def test_failure_branch(self, failure):
        seen = []
        failure.handle(lambda s: seen.append("success"), lambda f: seen.append(f.message()))
        assert seen == [failure.message()]


class TestParseAs:
    def test_structured_error_body(self):
        failure = HttpFailure(422, '{"error": "invalid", "code": 7}')
        parsed = failure.parse_as(ApiError)
        assert parsed == ApiError(error="invalid", code=7)

    def test_not_json(self):
        assert HttpFailure(500, "<html>Internal Server Error</html>").parse_as(ApiError) is None

    def test_shape_mismatch(self):
        assert HttpFailure(400, '{"message": "nope"}').parse_as(ApiError) is None

    def test_builtin_target(self):
        assert HttpFailure(400, '{"message": "nope"}').parse_as(dict) == {"message": "nope"}

    def test_node_target(self):
        node = HttpFailure(400, '{"message": "nope"}').parse_as(JsonNode)
        assert node.get("message").as_text() == "nope"


class TestMatching:
    def describe(self, outcome):
        match outcome:
            case Success(data=data):
                return f"ok {data}"
            case HttpFailure(status=404):
                return "not found"
            case HttpFailure(status=status):
                return f"http {status}"
            case NetworkFailure():
                return "network"
            case ParseFailure(status=status, raw_body=body):
                return f"parse {status} {body}"

    def test_dispatch(self):
        assert self.describe(success("x")) == "ok x"
        assert self.describe(HttpFailure(404, "")) == "not found"
        assert self.describe(HttpFailure(500, "")) == "http 500"
        assert self.describe(NetworkFailure(OSError("x"))) == "network"
        assert self.describe(ParseFailure(201, "b", ValueError())) == "parse 201 b"

    def test_is_success(self):
        assert success().is_success()
        assert not any(f.is_success() for f in failures())


class Unvalidatable:
    def __init__(self, x):
        self.x = x


class TestParseAsIsTotal:
    def test_type_pydantic_cannot_handle(self):
        assert HttpFailure(400, '{"x": 1}').parse_as(Unvalidatable) is None

    def test_deeply_nested_body_as_node(self):
        deep = "[" * 100000 + "]" * 100000
        assert HttpFailure(400, deep).parse_as(JsonNode) is None

    def test_deeply_nested_body_as_list(self):
        deep = "[" * 100000 + "]" * 100000
        assert HttpFailure(400, deep).parse_as(list) is None

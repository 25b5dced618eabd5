"""Tests for wrapper combinators and the node contract."""

from __future__ import annotations

import logging
from types import MappingProxyType

import pytest

from schemata import UNDEFINED, Err, IssueCode, Ok, ValidationError, s
from schemata.validation import NodeKind, Schema
from schemata.validation import schema as schema_module


class _Spy(Schema):
    """Leaf that records every value it sees."""
    type_name = "spy"

    def __init__(self):
        super().__init__()
        self.seen: list = []

    def _check(self, value, ctx):
        self.seen.append(value)
        return value


class _RecordingLog:
    """Stand-in for the module logger that keeps every event."""

    def __init__(self):
        self.events: list[str] = []

    def warning(self, event, **kw):
        self.events.append(event)

    def debug(self, event, **kw):
        self.events.append(event)


class TestOptionalNullable:
    """optional() / nullable() short-circuit without invoking the child."""

    def test_optional_short_circuits(self) -> None:
        spy = _Spy()
        assert spy.optional().parse(UNDEFINED) is UNDEFINED
        assert spy.seen == []

    def test_optional_delegates_other_values(self) -> None:
        spy = _Spy()
        assert spy.optional().parse(None) is None
        assert spy.seen == [None]

    def test_nullable_short_circuits(self) -> None:
        spy = _Spy()
        assert spy.nullable().parse(None) is None
        assert spy.seen == []

    def test_optional_does_not_accept_null(self) -> None:
        result = s.string().optional().safe_parse(None)
        assert result.error.first_issue.code is IssueCode.INVALID_TYPE

    def test_nullish(self) -> None:
        schema = s.string().nullish()
        assert schema.parse(None) is None
        assert schema.parse(UNDEFINED) is UNDEFINED

    def test_non_nullable(self) -> None:
        schema = s.string().nullable().non_nullable()
        assert schema.parse("a") == "a"
        assert schema.safe_parse(None).error.first_issue.code is IssueCode.INVALID_TYPE

    def test_is_optional_and_is_nullable(self) -> None:
        assert s.string().optional().is_optional()
        assert not s.string().is_optional()
        assert s.string().nullable().is_nullable()
        assert not s.string().optional().is_nullable()

    def test_optionality_checks_do_not_log_transform_failures(self, monkeypatch: pytest.MonkeyPatch) -> None:
        recorded = _RecordingLog()
        monkeypatch.setattr(schema_module, "log", recorded)
        schema = s.string().optional().transform(str.upper)
        assert not schema.is_optional()
        assert not s.string().nullable().transform(str.upper).is_nullable()
        assert recorded.events == []


class TestDefault:
    """Tests for default()."""

    def test_default_value(self) -> None:
        assert s.string().default("x").parse(UNDEFINED) == "x"

    def test_default_delegates_present_values(self) -> None:
        schema = s.number().default(0)
        assert schema.parse(5) == 5
        assert schema.safe_parse("5").error.first_issue.code is IssueCode.INVALID_TYPE

    def test_default_factory_builds_fresh_values(self) -> None:
        schema = s.array(s.string()).default(factory=list)
        first, second = schema.parse(UNDEFINED), schema.parse(UNDEFINED)
        assert first == [] and first is not second

    def test_default_does_not_replace_null(self) -> None:
        assert s.string().nullable().default("x").parse(None) is None

    def test_default_requires_value(self) -> None:
        with pytest.raises(ValueError):
            s.string().default()

    def test_mutable_default_is_not_shared(self) -> None:
        schema = s.array(s.string()).default([])
        first = schema.parse(UNDEFINED)
        first.append("x")
        assert schema.parse(UNDEFINED) == []


class TestRefine:
    """Tests for refine()."""

    def test_refine_pass_and_fail(self) -> None:
        schema = s.number().refine(lambda value: value % 2 == 0, "Must be even")
        assert schema.parse(4) == 4
        found = schema.safe_parse(3).error.first_issue
        assert found.code is IssueCode.CUSTOM
        assert found.message == "Must be even"
        assert found.path == ()

    def test_refine_runs_after_child(self) -> None:
        calls: list = []
        schema = s.number().refine(lambda value: calls.append(value) or True)
        assert schema.safe_parse("x").error.first_issue.code is IssueCode.INVALID_TYPE
        assert calls == []

    def test_refine_path(self) -> None:
        schema = s.object({"password": s.string(), "confirm": s.string()}).refine(
            lambda data: data["password"] == data["confirm"], "Passwords must match", path=["confirm"]
        )
        found = schema.safe_parse({"password": "a", "confirm": "b"}).error.first_issue
        assert found.path == ("confirm",)

    def test_refine_predicate_exception(self) -> None:
        schema = s.string().refine(lambda value: 1 / 0)
        found = schema.safe_parse("x").error.first_issue
        assert found.code is IssueCode.UNKNOWN_ERROR
        assert found.params["exception"] == "ZeroDivisionError"

    def test_refine_exception_aggregates_in_objects(self) -> None:
        schema = s.object({
            "a": s.string().refine(lambda value: int(value) > 0),
            "b": s.number(),
        })
        issues = schema.safe_parse({"a": "x", "b": "y"}).error.issues
        assert [(issue.path, issue.code) for issue in issues] == [
            (("a",), IssueCode.UNKNOWN_ERROR),
            (("b",), IssueCode.INVALID_TYPE),
        ]


class TestTransformPipe:
    """Tests for transform() and pipe()."""

    def test_transform(self) -> None:
        assert s.string().transform(len).parse("abc") == 3

    def test_transform_not_run_on_failure(self) -> None:
        calls: list = []
        schema = s.string().transform(calls.append)
        schema.safe_parse(1)
        assert calls == []

    def test_transform_exception_propagates_from_parse(self) -> None:
        schema = s.string().transform(int)
        with pytest.raises(ValueError):
            schema.parse("abc")

    def test_transform_exception_normalized_by_safe_parse(self) -> None:
        result = s.string().transform(int).safe_parse("abc")
        assert isinstance(result, Err)
        assert result.error.first_issue.code is IssueCode.UNKNOWN_ERROR
        assert result.error.first_issue.path == ()
        assert isinstance(result.error.__cause__, ValueError)

    def test_pipe(self) -> None:
        schema = s.string().transform(len).pipe(s.number().min(2))
        assert schema.parse("abc") == 3
        assert schema.safe_parse("a").error.first_issue.code is IssueCode.TOO_SMALL


class TestCatch:
    """Tests for catch()."""

    def test_catch_value(self) -> None:
        assert s.number().catch(0).parse("x") == 0

    def test_catch_passes_success_through(self) -> None:
        assert s.number().catch(0).parse(5) == 5

    def test_catch_factory_receives_error(self) -> None:
        schema = s.number().catch(factory=lambda error: error.first_issue.code.value)
        assert schema.parse("x") == "invalid_type"

    def test_catch_does_not_swallow_transform_bugs(self) -> None:
        schema = s.string().transform(int).catch(0)
        with pytest.raises(ValueError):
            schema.parse("abc")

    def test_mutable_fallback_is_not_shared(self) -> None:
        schema = s.array(s.string()).catch([])
        schema.parse(5).append("x")
        assert schema.parse(5) == []


class TestForwarding:
    """Builder methods stay reachable through wrappers."""

    def test_optional_then_min(self) -> None:
        schema = s.string().optional().min(2)
        assert schema.kind is NodeKind.OPTIONAL
        assert schema.parse(UNDEFINED) is UNDEFINED
        assert schema.safe_parse("a").error.first_issue.code is IssueCode.TOO_SMALL

    def test_default_then_positive(self) -> None:
        schema = s.number().default(1).positive()
        assert schema.parse(UNDEFINED) == 1
        assert schema.safe_parse(-1).error.first_issue.code is IssueCode.TOO_SMALL

    def test_rewraps_derived_schemas(self) -> None:
        schema = s.object({"a": s.string(), "b": s.number()}).optional().pick("a")
        assert schema.kind is NodeKind.OPTIONAL
        assert schema.parse({"a": "x", "b": 1}) == {"a": "x"}
        assert schema.parse(UNDEFINED) is UNDEFINED

    def test_properties_are_forwarded(self) -> None:
        assert s.enum(["a"]).nullable().options == ["a"]

    def test_private_names_are_not_forwarded(self) -> None:
        with pytest.raises(AttributeError):
            s.string().optional()._transforms

    def test_transform_does_not_forward(self) -> None:
        with pytest.raises(AttributeError):
            s.string().transform(str.upper).min(2)


class TestMisc:
    """brand(), describe(), operators, get_schema()."""

    def test_brand_is_identity(self) -> None:
        schema = s.string()
        assert schema.brand("UserId") is schema

    def test_describe(self) -> None:
        schema = s.string().describe("User name")
        assert schema.parse("x") == "x"
        assert schema.get_schema() == {"type": "string", "checks": [], "description": "User name"}

    def test_or_operator_builds_union(self) -> None:
        schema = s.string() | s.number() | s.null()
        assert len(schema.options) == 3
        assert schema.parse(None) is None

    def test_and_operator_builds_intersection(self) -> None:
        schema = s.object({"a": s.string()}) & s.object({"b": s.number()})
        assert schema.parse({"a": "x", "b": 1}) == {"a": "x", "b": 1}

    def test_array_method(self) -> None:
        assert s.number().array().parse([1, 2]) == [1, 2]

    def test_get_schema_wrappers(self) -> None:
        assert s.number().optional().get_schema() == {
            "type": "optional", "inner": {"type": "number", "checks": []},
        }
        assert s.number().default(3).get_schema()["default"] == 3
        assert s.string().refine(bool, "Empty").get_schema()["message"] == "Empty"

    def test_get_schema_does_not_affect_validation(self) -> None:
        schema = s.string().min(2)
        schema.get_schema()
        assert schema.parse("ab") == "ab"


class TestReadonly:
    """Tests for readonly()."""

    def test_object_output_is_read_only(self) -> None:
        output = s.object({"a": s.number()}).readonly().parse({"a": 1})
        assert isinstance(output, MappingProxyType)
        assert dict(output) == {"a": 1}
        with pytest.raises(TypeError):
            output["a"] = 2

    def test_array_output_becomes_tuple(self) -> None:
        assert s.array(s.number()).readonly().parse([1, 2]) == (1, 2)

    def test_scalars_pass_through(self) -> None:
        assert s.string().readonly().parse("a") == "a"

    def test_issues_still_reported(self) -> None:
        result = s.array(s.number()).readonly().safe_parse(["x"])
        assert [(issue.path, issue.code) for issue in result.error.issues] == [((0,), IssueCode.INVALID_TYPE)]

    def test_builders_forward(self) -> None:
        schema = s.array(s.number()).readonly().min(1)
        assert schema.kind is NodeKind.READONLY
        assert schema.safe_parse([]).error.first_issue.code is IssueCode.TOO_SMALL

    def test_keeps_optionality(self) -> None:
        schema = s.string().optional().readonly()
        assert schema.is_optional()
        assert s.object({"a": schema}).parse({}) == {}

    def test_factory_helper(self) -> None:
        assert s.readonly(s.number().array()).get_schema()["type"] == "readonly"


class TestSafeParse:
    """safe_parse() never raises."""

    def test_ok(self) -> None:
        result = s.string().safe_parse("a")
        assert isinstance(result, Ok)
        assert result.success and result.data == "a"

    def test_err(self) -> None:
        result = s.string().safe_parse(1)
        assert isinstance(result, Err)
        assert not result.success and result.data is None

    def test_parse_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            s.number().parse("x")
        assert exc_info.value.issues[0].path == ()

    def test_logs_failures_when_enabled(self, settings_env, caplog: pytest.LogCaptureFixture) -> None:
        settings_env(log_failures="true")
        with caplog.at_level(logging.DEBUG):
            assert not s.number().safe_parse("x").success

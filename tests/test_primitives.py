"""Tests for primitive validators."""

from __future__ import annotations

import math
from decimal import Decimal

import pytest

from schemata import UNDEFINED, IssueCode, ValidationError, s


def _codes(schema, value) -> list[IssueCode]:
    result = schema.safe_parse(value)
    assert not result.success
    return [issue.code for issue in result.error.issues]


class TestPrimitiveIdentity:
    """Plain values of the matching kind come back unchanged."""

    @pytest.mark.parametrize(
        "schema, value",
        [
            (s.string(), "hello"),
            (s.string(), ""),
            (s.number(), 42),
            (s.number(), -1.5),
            (s.number(), math.inf),
            (s.boolean(), True),
            (s.boolean(), False),
            (s.null(), None),
            (s.undefined(), UNDEFINED),
            (s.any(), {"a": [1]}),
            (s.unknown(), "x"),
        ],
    )
    def test_identity(self, schema, value) -> None:
        assert schema.parse(value) == value


class TestKindMismatch:
    """Kind checks report invalid_type with received/expected."""

    def test_string_rejects_number(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            s.string().parse(5)
        found = exc_info.value.first_issue
        assert found.code is IssueCode.INVALID_TYPE
        assert (found.expected, found.received) == ("string", "number")
        assert found.path == ()

    def test_bool_is_not_a_number(self) -> None:
        assert _codes(s.number(), True) == [IssueCode.INVALID_TYPE]

    def test_nan_is_a_type_failure(self) -> None:
        result = s.number().safe_parse(float("nan"))
        assert result.error.first_issue.received == "nan"

    def test_int_is_not_a_boolean(self) -> None:
        assert _codes(s.boolean(), 1) == [IssueCode.INVALID_TYPE]

    def test_null_rejects_undefined(self) -> None:
        assert s.null().safe_parse(UNDEFINED).error.first_issue.received == "undefined"

    def test_never_always_fails(self) -> None:
        for value in (None, 0, "", UNDEFINED):
            assert _codes(s.never(), value) == [IssueCode.INVALID_TYPE]


class TestStringConstraints:
    """Tests for string builders."""

    def test_min_max(self) -> None:
        schema = s.string().min(2).max(4)
        assert schema.parse("abc") == "abc"
        assert _codes(schema, "a") == [IssueCode.TOO_SMALL]
        assert _codes(schema, "abcde") == [IssueCode.TOO_BIG]

    def test_min_message(self) -> None:
        result = s.string().min(3).safe_parse("ab")
        assert result.error.first_issue.message == "String must contain at least 3 character(s)"

    def test_length(self) -> None:
        schema = s.string().length(3)
        assert _codes(schema, "ab") == [IssueCode.TOO_SMALL]
        assert _codes(schema, "abcd") == [IssueCode.TOO_BIG]

    def test_nonempty(self) -> None:
        assert _codes(s.string().nonempty(), "") == [IssueCode.TOO_SMALL]

    def test_fail_fast_first_constraint_wins(self) -> None:
        result = s.string().min(5).email().safe_parse("ab")
        assert len(result.error.issues) == 1
        assert result.error.first_issue.code is IssueCode.TOO_SMALL

    def test_constraints_run_in_declaration_order(self) -> None:
        result = s.string().email().min(5).safe_parse("ab")
        assert result.error.first_issue.code is IssueCode.INVALID_STRING

    def test_redeclared_constraint_replaces(self) -> None:
        schema = s.string().min(10).min(2)
        assert schema.parse("abc") == "abc"

    def test_custom_message(self) -> None:
        result = s.string().min(3, message="Too short").safe_parse("a")
        assert result.error.first_issue.message == "Too short"

    def test_regex_searches(self) -> None:
        schema = s.string().regex(r"\d+")
        assert schema.parse("abc123") == "abc123"
        assert _codes(schema, "abc") == [IssueCode.INVALID_STRING]

    @pytest.mark.parametrize(
        "builder, good, bad",
        [
            ("email", "user@example.com", "not-an-email"),
            ("url", "https://example.com/path", "example.com"),
            ("uuid", "123e4567-e89b-12d3-a456-426614174000", "123e4567"),
            ("datetime", "2024-01-15T10:30:00Z", "2024-01-15"),
            ("date", "2024-01-15", "2024-13-01"),
            ("time", "10:30:00", "25:00:00"),
        ],
    )
    def test_formats(self, builder: str, good: str, bad: str) -> None:
        schema = getattr(s.string(), builder)()
        assert schema.parse(good) == good
        result = schema.safe_parse(bad)
        assert result.error.first_issue.code is IssueCode.INVALID_STRING
        assert result.error.first_issue.message == f"Invalid {builder}"

    def test_named_format_must_match_whole_string(self) -> None:
        schema = s.string().email()
        assert _codes(schema, "user@example.com trailing") == [IssueCode.INVALID_STRING]

    def test_ip_versions(self) -> None:
        assert s.string().ip().parse("192.168.0.1") == "192.168.0.1"
        assert s.string().ip(6).parse("::1") == "::1"
        assert _codes(s.string().ip(4), "::1") == [IssueCode.INVALID_STRING]
        assert _codes(s.string().ip(), "999.1.1.1") == [IssueCode.INVALID_STRING]

    def test_ip_rejects_unknown_version(self) -> None:
        with pytest.raises(ValueError):
            s.string().ip(5)

    def test_extended_format(self) -> None:
        schema = s.string().format("slug")
        assert schema.parse("hello-world") == "hello-world"
        assert _codes(schema, "Hello World") == [IssueCode.INVALID_STRING]

    def test_unknown_format_is_configuration_error(self) -> None:
        with pytest.raises(ValueError):
            s.string().format("zip-code")

    def test_substrings(self) -> None:
        assert s.string().starts_with("ab").parse("abc") == "abc"
        assert s.string().ends_with("bc").parse("abc") == "abc"
        assert s.string().includes("b").parse("abc") == "abc"
        result = s.string().starts_with("x").safe_parse("abc")
        assert result.error.first_issue.message == 'String must start with "x"'

    def test_transforms_after_constraints(self) -> None:
        schema = s.string().min(3).trim().to_upper()
        assert schema.parse("  ab ") == "AB"
        assert _codes(schema, "ab") == [IssueCode.TOO_SMALL]

    def test_transforms_in_order(self) -> None:
        assert s.string().to_upper().to_lower().parse("MiXeD") == "mixed"


class TestNumberConstraints:
    """Tests for number builders."""

    def test_inclusive_bounds(self) -> None:
        schema = s.number().min(1).max(10)
        assert schema.parse(1) == 1
        assert schema.parse(10) == 10
        assert _codes(schema, 0) == [IssueCode.TOO_SMALL]
        assert _codes(schema, 11) == [IssueCode.TOO_BIG]

    def test_gte_lte_aliases(self) -> None:
        schema = s.number().gte(0).lte(1)
        assert schema.parse(0.5) == 0.5
        assert _codes(schema, -0.1) == [IssueCode.TOO_SMALL]

    def test_exclusive_bounds(self) -> None:
        schema = s.number().gt(0).lt(1)
        assert schema.parse(0.5) == 0.5
        assert _codes(schema, 0) == [IssueCode.TOO_SMALL]
        assert _codes(schema, 1) == [IssueCode.TOO_BIG]

    def test_exclusive_bound_is_exact(self) -> None:
        assert s.number().gt(0).parse(1e-300) == 1e-300

    def test_exclusive_issue_params(self) -> None:
        found = s.number().gt(5).safe_parse(5).error.first_issue
        assert found.message == "Number must be greater than 5"
        assert found.params == {"minimum": 5, "inclusive": False}

    def test_int(self) -> None:
        schema = s.number().int()
        assert schema.parse(3) == 3
        assert schema.parse(3.0) == 3.0
        result = schema.safe_parse(3.5)
        assert result.error.first_issue.code is IssueCode.INVALID_TYPE
        assert result.error.first_issue.expected == "integer"

    def test_finite(self) -> None:
        assert _codes(s.number().finite(), math.inf) == [IssueCode.INVALID_TYPE]

    def test_sign_helpers(self) -> None:
        assert _codes(s.number().positive(), 0) == [IssueCode.TOO_SMALL]
        assert _codes(s.number().negative(), 0) == [IssueCode.TOO_BIG]
        assert s.number().nonnegative().parse(0) == 0
        assert s.number().nonpositive().parse(0) == 0

    def test_multiple_of(self) -> None:
        schema = s.number().multiple_of(5)
        assert schema.parse(15) == 15
        assert _codes(schema, 7) == [IssueCode.NOT_MULTIPLE_OF]

    def test_step_with_float_factor(self) -> None:
        schema = s.number().step(0.1)
        assert schema.parse(0.3) == 0.3
        assert _codes(schema, 0.35) == [IssueCode.NOT_MULTIPLE_OF]

    @pytest.mark.parametrize("factor", [3, 0.5])
    @pytest.mark.parametrize("value", [math.inf, -math.inf])
    def test_multiple_of_rejects_infinity(self, factor, value) -> None:
        schema = s.number().multiple_of(factor)
        with pytest.raises(ValidationError) as excinfo:
            schema.parse(value)
        assert [issue.code for issue in excinfo.value.issues] == [IssueCode.NOT_MULTIPLE_OF]

    def test_multiple_of_int_beyond_float_range(self) -> None:
        huge = 10**400 + 1
        assert s.number().multiple_of(0.5).parse(huge) == huge
        assert _codes(s.number().multiple_of(3), huge) == [IssueCode.NOT_MULTIPLE_OF]

    @pytest.mark.parametrize("factor", [0, -2, True])
    def test_multiple_of_rejects_bad_factor(self, factor) -> None:
        with pytest.raises(ValueError):
            s.number().multiple_of(factor)


class TestBoolean:
    """Tests for boolean refinements."""

    def test_is_true(self) -> None:
        schema = s.boolean().is_true()
        assert schema.parse(True) is True
        result = schema.safe_parse(False)
        assert result.error.first_issue.code is IssueCode.CUSTOM
        assert result.error.first_issue.message == "Expected true"

    def test_is_false(self) -> None:
        assert s.boolean().is_false().parse(False) is False


class TestValueMatching:
    """Tests for literal, enum, custom and instance_of."""

    def test_literal(self) -> None:
        assert s.literal("a").parse("a") == "a"
        assert _codes(s.literal("a"), "b") == [IssueCode.INVALID_LITERAL]

    def test_literal_bool_never_equals_int(self) -> None:
        assert _codes(s.literal(1), True) == [IssueCode.INVALID_LITERAL]
        assert _codes(s.literal(True), 1) == [IssueCode.INVALID_LITERAL]

    def test_enum(self) -> None:
        schema = s.enum(["red", "green"])
        assert schema.options == ["red", "green"]
        assert schema.parse("red") == "red"
        result = schema.safe_parse("blue")
        assert result.error.first_issue.code is IssueCode.INVALID_ENUM_VALUE
        assert result.error.first_issue.message == "Expected one of: red, green"

    def test_enum_extract_and_exclude(self) -> None:
        schema = s.enum(["a", "b", "c"])
        assert schema.extract("a", "c").options == ["a", "c"]
        assert schema.exclude("a").options == ["b", "c"]

    def test_enum_requires_values(self) -> None:
        with pytest.raises(ValueError):
            s.enum([])

    def test_custom(self) -> None:
        schema = s.custom(lambda value: isinstance(value, Decimal), "Expected Decimal")
        assert schema.parse(Decimal("1.5")) == Decimal("1.5")
        result = schema.safe_parse(1.5)
        assert result.error.first_issue.code is IssueCode.CUSTOM
        assert result.error.first_issue.message == "Expected Decimal"

    def test_custom_predicate_exception(self) -> None:
        schema = s.custom(lambda value: value.missing_attribute)
        assert _codes(schema, 1) == [IssueCode.UNKNOWN_ERROR]

    def test_instance_of(self) -> None:
        schema = s.instance_of(Decimal)
        assert schema.parse(Decimal("2")) == Decimal("2")
        result = schema.safe_parse("2")
        assert result.error.first_issue.message == "Expected instance of Decimal"


class TestIdempotence:
    """Re-parsing the output of a transform-free schema yields the same value."""

    @pytest.mark.parametrize(
        "schema, value",
        [
            (s.string().email(), "a@b.co"),
            (s.number().int().positive(), 7),
            (s.object({"a": s.array(s.number())}), {"a": [1, 2], "extra": 1}),
            (s.union([s.string(), s.number()]), 3),
        ],
    )
    def test_parse_is_idempotent(self, schema, value) -> None:
        once = schema.parse(value)
        assert schema.parse(once) == once

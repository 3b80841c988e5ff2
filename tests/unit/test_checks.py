"""Tests for the CHECK constraint interpreter."""

from decimal import Decimal

from schemagate.schema.checks import (
    RangeCheck,
    Unrecognized,
    evaluate_check,
    parse_check,
)

READINESS = "((readiness_score >= 1) AND (readiness_score <= 10))"


class TestParseCheck:
    """Test parsing definitions into RangeCheck or Unrecognized."""

    def test_parses_range(self):
        assert parse_check(READINESS) == RangeCheck("readiness_score", 1, 10)

    def test_parses_database_rendering(self):
        parsed = parse_check("CHECK (((readiness_score >= 1) AND (readiness_score <= 10)))")
        assert parsed == RangeCheck("readiness_score", 1, 10)

    def test_tolerates_whitespace(self):
        parsed = parse_check("(  ( score>=0 )\n  and  ( score <= 100 ) )")
        assert parsed == RangeCheck("score", 0, 100)

    def test_different_fields_are_unrecognized(self):
        parsed = parse_check("((min_score >= 1) AND (max_score <= 10))")
        assert isinstance(parsed, Unrecognized)
        assert "different fields" in parsed.reason

    def test_other_shapes_are_unrecognized(self):
        for definition in [
            "(status = ANY (ARRAY['new'::text, 'won'::text]))",
            "(person_a_id <> person_b_id)",
            "((score <= 10) AND (score >= 1))",
            "((score >= -1) AND (score <= 10))",
            "",
        ]:
            assert isinstance(parse_check(definition), Unrecognized), definition


class TestEvaluateCheck:
    def test_value_above_range_fails(self):
        assert evaluate_check({"readiness_score": 11}, READINESS) is False

    def test_value_below_range_fails(self):
        assert evaluate_check({"readiness_score": 0}, READINESS) is False

    def test_value_in_range_passes(self):
        assert evaluate_check({"readiness_score": 7}, READINESS) is True

    def test_bounds_are_inclusive(self):
        assert evaluate_check({"readiness_score": 1}, READINESS) is True
        assert evaluate_check({"readiness_score": 10}, READINESS) is True
        assert evaluate_check({"readiness_score": 10.5}, READINESS) is False

    def test_absent_or_null_field_passes(self):
        assert evaluate_check({}, READINESS) is True
        assert evaluate_check({"readiness_score": None}, READINESS) is True

    def test_non_numeric_value_passes(self):
        assert evaluate_check({"readiness_score": "11"}, READINESS) is True
        assert evaluate_check({"readiness_score": True}, READINESS) is True

    def test_nan_is_out_of_range(self):
        assert evaluate_check({"readiness_score": float("nan")}, READINESS) is False
        assert evaluate_check({"readiness_score": Decimal("NaN")}, READINESS) is False
        assert evaluate_check({"readiness_score": Decimal("sNaN")}, READINESS) is False

    def test_decimal_in_range_passes(self):
        assert evaluate_check({"readiness_score": Decimal("7")}, READINESS) is True

    def test_unrecognized_definition_passes(self):
        assert evaluate_check({"a": 100, "b": 0}, "((a >= 1) AND (b <= 10))") is True
        assert evaluate_check({"x": 1}, "(x > 5)") is True

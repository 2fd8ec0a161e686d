"""
Tests for metric name normalization and numeric coercion.
"""
import pytest

from services.health_import.metric_names import (
    DEFAULT_METRIC,
    METRIC_ALIASES,
    is_generic_hint,
    normalize_metric_name,
    to_metric_token,
)
from services.health_import.values import MISSING, parse_numeric, pick_numeric


class TestMetricToken:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("heartRate", "heart_rate"),
            ("heart_rate", "heart_rate"),
            ("HeartRate", "heart_rate"),
            ("stepCount", "step_count"),
            ("Weight (lbs)", "weight_lbs"),
            ("__body--fat %__", "body_fat"),
            ("spo2", "spo2"),
            ("exercise.hr", "exercise.hr"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_folding(self, raw, expected):
        assert to_metric_token(raw) == expected


class TestNormalizeMetricName:
    def test_camel_case_alias(self):
        assert normalize_metric_name("heartRate") == "exercise.hr"

    def test_snake_case_alias(self):
        assert normalize_metric_name("step_count") == "activity.steps"

    def test_dotted_name_passes_through(self):
        assert normalize_metric_name("exercise.hr") == "exercise.hr"
        assert normalize_metric_name("Custom.Metric") == "custom.metric"

    def test_unknown_name_is_namespaced(self):
        assert normalize_metric_name("mindfulMinutes") == "iphone.mindful_minutes"

    def test_empty_name_uses_fallback(self):
        assert normalize_metric_name("", "x.fallback") == "x.fallback"
        assert normalize_metric_name(None) == DEFAULT_METRIC
        assert normalize_metric_name("___") == DEFAULT_METRIC

    def test_every_alias_target_is_namespaced(self):
        for alias, canonical in METRIC_ALIASES.items():
            assert "." in canonical, alias
            assert canonical == canonical.lower()

    def test_aliases_cover_the_expected_families(self):
        families = {canonical.split(".")[0] for canonical in METRIC_ALIASES.values()}
        assert families == {"exercise", "vitals", "activity", "sleep", "body"}


class TestGenericHint:
    @pytest.mark.parametrize("hint", ["samples", "data", "Records", "items", "values", "entries"])
    def test_container_keys_are_generic(self, hint):
        assert is_generic_hint(hint)

    def test_metric_keys_are_not_generic(self):
        assert not is_generic_hint("heartRate")


class TestParseNumeric:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (72, 72.0),
            (72.5, 72.5),
            ("74", 74.0),
            ("1,532", 1532.0),
            ("  3.5 ", 3.5),
            ("72 bpm", 72.0),
            ("-4.5 kg", -4.5),
            ("1e3", 1000.0),
        ],
    )
    def test_numbers(self, raw, expected):
        assert parse_numeric(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "n/a", True, False, [], {}, float("nan"), float("inf")])
    def test_non_numbers(self, raw):
        assert parse_numeric(raw) is None

    def test_nan_string_is_not_a_number(self):
        assert parse_numeric("NaN") is None


class TestPickNumeric:
    def test_first_parseable_alias_wins(self):
        assert pick_numeric({"hr": "80", "heartRate": 72}, ("heartRate", "hr")) == 72.0

    def test_unparseable_alias_is_skipped(self):
        assert pick_numeric({"heartRate": "n/a", "hr": 64}, ("heartRate", "hr")) == 64.0

    def test_explicit_null_is_none(self):
        assert pick_numeric({"heartRate": None, "hr": 64}, ("heartRate", "hr")) is None

    def test_empty_string_is_none(self):
        assert pick_numeric({"heartRate": ""}, ("heartRate",)) is None

    def test_unrecognised_is_missing(self):
        assert pick_numeric({"steps": 10}, ("heartRate", "hr")) is MISSING

    def test_only_unparseable_is_missing(self):
        assert pick_numeric({"heartRate": "n/a"}, ("heartRate",)) is MISSING

"""
Unit tests for label normalization and category classification.
"""
import pandas as pd
import pytest

from storm_analytics.data.normalize import (
    build_rules, classify_events, classify_label, classify_labels,
    normalize_label, normalize_labels,
)
from storm_analytics.data.schemas import EventCategory
from tests.conftest import make_frame, make_row


class TestNormalizeLabel:

    @pytest.mark.unit
    def test_uppercases_and_trims(self):
        assert normalize_label("  Thunderstorm Wind ") == ("THUNDERSTORM WIND", True)

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["SUMMARY OF MARCH", "Summary August 10", "summary jan 17", "MONTHLY SUMMARY"])
    def test_summary_rows_are_not_kept(self, raw):
        label, keep = normalize_label(raw)
        assert keep is False
        assert label == raw.upper().strip()

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", [None, float("nan"), pd.NA, "", "   "])
    def test_missing_labels_are_empty_and_kept(self, raw):
        assert normalize_label(raw) == ("", True)

    @pytest.mark.unit
    @pytest.mark.parametrize("raw, expected", [
        ("\ufb01re", "\ufb01RE"),
        ("stra\u00dfe wind", "STRA\u00dfE WIND"),
        ("caf\u00e9 fog", "CAF\u00e9 FOG"),
    ])
    def test_only_ascii_letters_are_uppercased(self, raw, expected):
        assert normalize_label(raw) == (expected, True)

    @pytest.mark.unit
    def test_vectorized_folding_matches_scalar(self):
        raws = ["\ufb01re", " Hail ", "stra\u00dfe wind"]
        out, _ = normalize_labels(make_frame([make_row(r) for r in raws]))
        assert out["EVTYPE_NORM"].tolist() == [normalize_label(r)[0] for r in raws]
        assert classify_labels(out["EVTYPE_NORM"]).tolist() == ["\ufb01RE", "HAIL", "WIND"]

    @pytest.mark.unit
    def test_normalize_labels_drops_summary_rows(self):
        df = make_frame([make_row("Tornado"), make_row("SUMMARY OF JUNE"), make_row(None)])
        out, dropped = normalize_labels(df)

        assert dropped == 1
        assert out["EVTYPE_NORM"].tolist() == ["TORNADO", ""]
        assert "EVTYPE_NORM" not in df.columns


class TestClassifyLabel:

    @pytest.mark.unit
    @pytest.mark.parametrize("label, expected", [
        ("BLIZZARD", "COLD"),
        ("WINTER STORM HIGH WINDS", "COLD"),
        ("ICE STORM", "COLD"),
        ("TSTM WIND/HAIL", "HAIL"),
        ("FLASH FLOOD", "FLOOD"),
        ("HIGH SURF", "FLOOD"),
        ("HURRICANE/TYPHOON", "HURRICANE"),
        ("TROPICAL STORM", "HURRICANE"),
        ("THUNDERSTORM WINDS", "THUNDERSTORM"),
        ("MARINE TSTM WIND", "THUNDERSTORM"),
        ("HEAVY RAIN", "THUNDERSTORM"),
        ("EXCESSIVE HEAT", "HEAT_DRY"),
        ("DROUGHT", "HEAT_DRY"),
        ("TORNADO F3", "TORNADO"),
        ("WATERSPOUT", "TORNADO"),
        ("FUNNEL CLOUD", "TORNADO"),
        ("DUST DEVIL", "TORNADO"),
        ("HIGH WIND", "WIND"),
        ("MICROBURST", "WIND"),
        ("HEAVY SNOW", "SNOW"),
        ("WILDFIRE", "FIRE"),
        ("DENSE SMOKE", "FIRE"),
        ("VOLCANIC ASH", "VOLCANO"),
        ("DENSE FOG", "FOG"),
    ])
    def test_rule_categories(self, label, expected):
        assert classify_label(label) == expected

    @pytest.mark.unit
    def test_every_rule_category_is_canonical(self):
        assert {r.category for r in build_rules()} == {c.value for c in EventCategory}

    @pytest.mark.unit
    def test_rules_must_name_a_canonical_category(self):
        with pytest.raises(ValueError):
            build_rules([("SLEET", ["ICE"])])
        assert build_rules([(EventCategory.FOG, ["MIST"])])[0].category == "FOG"

    @pytest.mark.unit
    @pytest.mark.parametrize("label", ["STORM SURGE", "HURRICANE STORM SURGE", "STORM SURGE/TIDE"])
    def test_surge_always_classifies_as_flood(self, label):
        assert classify_label(label) == "FLOOD"

    @pytest.mark.unit
    def test_tstm_needs_leading_space(self):
        # No space before TSTM, so the WIND rule is the first hit
        assert classify_label("TSTM WIND") == "WIND"

    @pytest.mark.unit
    def test_whirlwind_goes_to_tornado_before_wind(self):
        assert classify_label("WHIRLWIND") == "TORNADO"

    @pytest.mark.unit
    @pytest.mark.parametrize("label", ["LIGHTNING", "RIP CURRENT", "AVALANCHE", ""])
    def test_unmatched_label_is_its_own_category(self, label):
        assert classify_label(label) == label

    @pytest.mark.unit
    def test_rule_order_decides_overlaps(self):
        flood_first = build_rules([("FLOOD", ["SURGE"]), ("HURRICANE", ["SURGE"])])
        hurricane_first = build_rules([("HURRICANE", ["SURGE"]), ("FLOOD", ["SURGE"])])

        assert classify_label("STORM SURGE", flood_first) == "FLOOD"
        assert classify_label("STORM SURGE", hurricane_first) == "HURRICANE"

    @pytest.mark.unit
    def test_classification_is_idempotent(self):
        labels = pd.Series(["TORNADO", "HAIL 1.75", "STORM SURGE", "LIGHTNING", "HIGH WIND", ""])
        first = classify_labels(labels)
        second = classify_labels(labels)
        assert first.tolist() == second.tolist()
        # categories are fixed points of the classifier
        assert classify_labels(first).tolist() == first.tolist()


class TestClassifyEvents:

    @pytest.mark.unit
    def test_adds_evcat_without_touching_input(self):
        df = make_frame([make_row("Tornado"), make_row("storm surge")])
        normalized, _ = normalize_labels(df)
        out = classify_events(normalized)

        assert out["EVCAT"].tolist() == ["TORNADO", "FLOOD"]
        assert "EVCAT" not in normalized.columns

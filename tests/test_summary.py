"""
Unit tests for grouped summaries, rankings and the shared math helpers.
"""
import math

import numpy as np
import pandas as pd
import pytest

from storm_analytics.analytics.common import quartiles, safe_divide, sanitize_for_json
from storm_analytics.analytics.impact import impact_totals, rank_categories, yearly_trend
from storm_analytics.analytics.summary import category_counts, summarize, summary_columns
from storm_analytics.data.pipeline import run_pipeline
from storm_analytics.data.schemas import GroupBy


@pytest.fixture
def cleaned(mixed_frame):
    return run_pipeline(mixed_frame, min_support=0).cleaned


class TestQuartiles:

    @pytest.mark.unit
    def test_linear_interpolation(self):
        assert quartiles([0, 0, 0, 100, 100, 1_000_000]) == (0.0, 50.0, 750025.0)

    @pytest.mark.unit
    def test_matches_numpy_linear(self):
        values = [3.0, 1.0, 4.0, 1.0, 5.0, 9.0, 2.0, 6.0]
        expected = np.quantile(values, [0.25, 0.5, 0.75], method="linear")
        assert quartiles(values) == pytest.approx(tuple(expected))

    @pytest.mark.unit
    def test_single_value_and_nan(self):
        assert quartiles([7.0, float("nan")]) == (7.0, 7.0, 7.0)
        assert all(math.isnan(q) for q in quartiles([]))


class TestSummarize:

    @pytest.mark.unit
    def test_by_category(self, cleaned):
        out = summarize(cleaned, GroupBy.CATEGORY, ["PROPDMG_TOT", "FATALITIES"])
        assert out["EVCAT"].tolist() == ["FLOOD", "LIGHTNING", "TORNADO"]
        assert out["count"].tolist() == [3, 1, 6]

        tornado = out.set_index("EVCAT").loc["TORNADO"]
        assert tornado["PROPDMG_TOT_sum"] == pytest.approx(1_000_200)
        assert tornado["PROPDMG_TOT_mean"] == pytest.approx(1_000_200 / 6)
        assert tornado["PROPDMG_TOT_q25"] == pytest.approx(0)
        assert tornado["PROPDMG_TOT_q50"] == pytest.approx(50)
        assert tornado["PROPDMG_TOT_q75"] == pytest.approx(750025)
        assert tornado["FATALITIES_sum"] == 2

    @pytest.mark.unit
    def test_quartiles_agree_with_helper(self, cleaned):
        out = summarize(cleaned, "category", ["PROPDMG_TOT"]).set_index("EVCAT")
        for cat, group in cleaned.groupby("EVCAT"):
            expected = quartiles(group["PROPDMG_TOT"])
            got = tuple(out.loc[cat, [f"PROPDMG_TOT_q{q}" for q in (25, 50, 75)]])
            assert got == pytest.approx(expected)

    @pytest.mark.unit
    def test_by_year_skips_unparsed_dates(self, cleaned):
        out = summarize(cleaned, GroupBy.CATEGORY_YEAR, ["HARM"])
        counts = dict(zip(zip(out["EVCAT"], out["YEAR"].astype(int)), out["count"]))
        assert counts == {
            ("FLOOD", 2005): 3,
            ("LIGHTNING", 1950): 1,
            ("TORNADO", 1950): 3,
            ("TORNADO", 1951): 2,
        }

    @pytest.mark.unit
    def test_by_region_uses_geographic_subset(self, loaded_store):
        by = GroupBy.CATEGORY_REGION
        out = summarize(loaded_store.events_for(by), by, ["TOTAL_DMG"])
        counts = dict(zip(zip(out["EVCAT"], out["FIPS"].astype(int)), out["count"]))
        assert counts == {
            ("FLOOD", 22071): 2,
            ("FLOOD", 29097): 1,
            ("LIGHTNING", 29097): 1,
            ("TORNADO", 29097): 4,
        }

    @pytest.mark.unit
    def test_by_state_drops_non_contiguous(self, cleaned):
        out = summarize(cleaned, GroupBy.CATEGORY_STATE, ["HARM"])
        assert "alaska" not in set(out["STATENAME"])
        tornado = out[out["EVCAT"] == "TORNADO"]
        assert tornado["STATENAME"].tolist() == ["missouri"]
        # the Missouri tornado without coordinates is not contiguous-US
        assert tornado["count"].iloc[0] == 4
        assert out["count"].sum() == 8

    @pytest.mark.unit
    def test_by_region_on_cleaned_table(self, cleaned):
        out = summarize(cleaned, GroupBy.CATEGORY_REGION, ["TOTAL_DMG"])
        counts = dict(zip(zip(out["EVCAT"], out["FIPS"].astype(int)), out["count"]))
        assert 2020 not in {fips for _, fips in counts}
        assert counts == {
            ("FLOOD", 22071): 2,
            ("FLOOD", 29097): 1,
            ("LIGHTNING", 29097): 1,
            ("TORNADO", 29097): 4,
        }

    @pytest.mark.unit
    def test_group_counts_add_up(self, cleaned):
        out = summarize(cleaned, GroupBy.CATEGORY)
        assert out["count"].sum() == len(cleaned)

    @pytest.mark.unit
    def test_empty_input_keeps_columns(self, cleaned):
        out = summarize(cleaned.iloc[:0], GroupBy.CATEGORY_YEAR, ["HARM"])
        assert out.empty
        assert list(out.columns) == summary_columns(GroupBy.CATEGORY_YEAR, ["HARM"])

    @pytest.mark.unit
    def test_unknown_grouping_rejected(self, cleaned):
        with pytest.raises(ValueError):
            summarize(cleaned, "county")

    @pytest.mark.unit
    def test_category_counts(self, cleaned):
        out = category_counts(cleaned)
        assert out["EVCAT"].tolist() == ["TORNADO", "FLOOD", "LIGHTNING"]
        assert out["pct_of_events"].tolist() == [60.0, 30.0, 10.0]


class TestImpact:

    @pytest.mark.unit
    def test_totals(self, cleaned):
        totals = impact_totals(cleaned)
        assert totals["events"] == 10
        assert totals["categories"] == 3
        assert totals["fatalities"] == 4
        assert totals["injuries"] == 16
        assert totals["crop_damage"] == pytest.approx(3e6)

    @pytest.mark.unit
    def test_rank_by_harm_breaks_ties_alphabetically(self, cleaned):
        ranked = rank_categories(cleaned, "harm")
        assert ranked["EVCAT"].tolist() == ["TORNADO", "FLOOD", "LIGHTNING"]
        assert ranked["rank"].tolist() == [1, 2, 3]
        assert ranked["total"].tolist() == [18, 1, 1]
        assert ranked["pct_of_total"].tolist() == [90.0, 5.0, 5.0]

    @pytest.mark.unit
    def test_rank_by_damage_with_top(self, cleaned):
        ranked = rank_categories(cleaned, "TOTAL_DMG", top=1)
        assert len(ranked) == 1
        assert ranked["EVCAT"].iloc[0] == "FLOOD"

    @pytest.mark.unit
    def test_rank_unknown_metric(self, cleaned):
        with pytest.raises(ValueError, match="Unknown ranking metric"):
            rank_categories(cleaned, "REMARKS")

    @pytest.mark.unit
    def test_yearly_trend(self, cleaned):
        trend = yearly_trend(cleaned, "HARM")
        assert [int(y) for y in trend.index] == [1950, 1951, 2005]
        assert trend.loc[1950, "TORNADO"] == 17
        assert trend.loc[1951, "TORNADO"] == 1
        assert trend.loc[2005, "FLOOD"] == 1
        assert trend.loc[2005, "TORNADO"] == 0


class TestCommon:

    @pytest.mark.unit
    def test_safe_divide(self):
        assert safe_divide(1, 0) == 0.0
        assert safe_divide(1, float("nan"), default=-1) == -1
        assert safe_divide(3, 4) == 0.75

    @pytest.mark.unit
    def test_sanitize_for_json(self):
        out = sanitize_for_json({
            "a": np.int64(3),
            "b": float("nan"),
            "c": [np.float64(1.5), pd.NA],
            "d": pd.Timestamp("1950-04-18"),
            1950: np.bool_(True),
        })
        assert out == {"a": 3, "b": None, "c": [1.5, None], "d": "1950-04-18", "1950": True}

"""Tests for agency size tiers and award selection."""

import numpy as np
import pandas as pd
import pytest
from pandas.testing import assert_frame_equal

from transit_emissions.analysis.awards import (
    ALL_TIERS,
    AWARD_COLUMNS,
    classify_agency_size,
    select_awards,
)
from transit_emissions.validate import PipelineDiagnostics


@pytest.mark.parametrize(
    "upt,tier",
    [
        (0, "Small"),
        (999_999, "Small"),
        (1_000_000, "Medium"),
        (99_999_999, "Medium"),
        (100_000_000, "Large"),
        (3_000_000_000, "Large"),
    ],
)
def test_classify_agency_size(upt, tier):
    assert classify_agency_size(pd.Series([upt], dtype="Int64")).tolist() == [tier]


def _candidates(**overrides) -> pd.DataFrame:
    data = {
        "ntd_id": [1, 2, 3, 4],
        "agency_name": ["A", "B", "C", "D"],
        "mode": ["Motor Bus", "Light Rail", "Motor Bus", "Vanpool"],
        "agency_size": ["Small", "Small", "Medium", "Large"],
        "emissions_lbs_per_upt": [1.0, 2.0, 3.0, 4.0],
        "emissions_lbs_per_mile": [0.5, 0.1, 0.9, 0.3],
        "emissions_avoided_lbs": [100.0, 50.0, 10.0, 1_000.0],
        "electric_fraction": [0.0, 1.0, 0.2, 0.0],
    }
    return pd.DataFrame(data | overrides).astype(
        {"ntd_id": "Int64", "agency_size": "string"}
    )


def _winners(awards: pd.DataFrame, tier: str = ALL_TIERS) -> dict[str, str]:
    in_tier = awards.loc[awards["agency_size"] == tier]
    return dict(zip(in_tier["award"], in_tier["agency_name"], strict=True))


def test_select_awards():
    awards = select_awards(_candidates())
    assert list(awards.columns) == AWARD_COLUMNS
    assert _winners(awards) == {
        "Greenest": "B",
        "Most Emissions Avoided": "D",
        "Best Electrified": "B",
        "Worst Polluter": "C",
    }
    greenest = awards.set_index("award").loc["Greenest"]
    assert greenest["value"] == 0.1
    assert greenest["median"] == pytest.approx(0.4)
    assert greenest["n_candidates"] == 4
    assert greenest["metric"] == "emissions_lbs_per_mile"
    assert greenest["mode"] == "Light Rail"


def test_select_awards_by_tier():
    awards = select_awards(_candidates(), by_tier=True)
    assert awards["agency_size"].unique().tolist() == [
        "All",
        "Small",
        "Medium",
        "Large",
    ]
    assert _winners(awards, "Small") == {
        "Greenest": "B",
        "Most Emissions Avoided": "A",
        "Best Electrified": "B",
        "Worst Polluter": "A",
    }
    assert set(_winners(awards, "Large").values()) == {"D"}


def test_empty_tiers_are_skipped():
    awards = select_awards(
        _candidates(agency_size=["Small"] * 4), by_tier=True
    )
    assert set(awards["agency_size"]) == {"All", "Small"}


def test_ties_go_to_the_first_row():
    df = _candidates(
        emissions_lbs_per_mile=[0.2, 0.1, 0.1, 0.2],
        emissions_avoided_lbs=[5.0, 5.0, 5.0, 5.0],
        electric_fraction=[0.0, 1.0, 1.0, 0.0],
    )
    assert _winners(select_awards(df)) == {
        "Greenest": "B",
        "Most Emissions Avoided": "A",
        "Best Electrified": "B",
        "Worst Polluter": "A",
    }


def test_selection_is_deterministic():
    df = _candidates()
    assert_frame_equal(
        select_awards(df, by_tier=True), select_awards(df, by_tier=True)
    )


def test_undefined_metrics_are_excluded():
    df = _candidates(
        emissions_lbs_per_mile=[0.5, np.nan, 0.9, 0.3],
        electric_fraction=[0.0, 1.0, np.nan, 0.0],
    )
    diagnostics = PipelineDiagnostics()
    awards = select_awards(df, diagnostics=diagnostics)
    assert _winners(awards) == {
        "Greenest": "D",
        "Most Emissions Avoided": "D",
        "Best Electrified": "A",
        "Worst Polluter": "C",
    }
    assert diagnostics["award_rows_undefined_metrics"] == 1
    assert diagnostics["award_rows_undefined_electric_fraction"] == 1
    electrified = awards.set_index("award").loc["Best Electrified"]
    assert electrified["n_candidates"] == 2


def test_no_candidates():
    awards = select_awards(_candidates().iloc[0:0], by_tier=True)
    assert awards.empty
    assert list(awards.columns) == AWARD_COLUMNS


def test_emissions_awards(emissions):
    awards = select_awards(emissions, by_tier=True)
    assert len(awards) == 16
    winners = awards.loc[awards["agency_size"] == ALL_TIERS].set_index("award")
    assert winners.loc["Greenest", "agency_name"] == "Big City Transit"
    assert winners.loc["Greenest", "mode"] == "Motor Bus"
    assert winners.loc["Greenest", "median"] == pytest.approx(0.028)
    # Heavy rail and light rail are both fully electric: the first one wins.
    assert winners.loc["Best Electrified", "mode"] == "Heavy Rail"
    assert winners.loc["Worst Polluter", "agency_name"] == "Sound Transit"
    assert winners.loc["Most Emissions Avoided", "value"] == pytest.approx(763_840_000)

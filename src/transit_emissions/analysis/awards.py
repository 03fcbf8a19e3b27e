"""Classify agencies by size and pick the greenest (and dirtiest) transit services.

Every award is the extremum of one metric. Ties are broken in favor of the row which
comes first in the input, so running the selection twice on the same table always
gives the same winners.
"""

from typing import Literal, NamedTuple

import numpy as np
import pandas as pd

import transit_emissions.logging_helpers
from transit_emissions.metadata.constants import AGENCY_SIZE_THRESHOLDS
from transit_emissions.validate import PipelineDiagnostics

logger = transit_emissions.logging_helpers.get_logger(__name__)

ALL_TIERS: str = "All"
"""Tier label of the awards given across agencies of every size."""

AWARD_COLUMNS: list[str] = [
    "award",
    "agency_size",
    "ntd_id",
    "agency_name",
    "mode",
    "metric",
    "value",
    "median",
    "n_candidates",
]


class AwardSpec(NamedTuple):
    """An award, and the metric that decides it."""

    name: str
    metric: str
    direction: Literal["min", "max"]


AWARDS: list[AwardSpec] = [
    AwardSpec("Greenest", "emissions_lbs_per_mile", "min"),
    AwardSpec("Most Emissions Avoided", "emissions_avoided_lbs", "max"),
    AwardSpec("Best Electrified", "electric_fraction", "max"),
    AwardSpec("Worst Polluter", "emissions_lbs_per_mile", "max"),
]
"""The awards handed out, in the order they are reported."""

REQUIRED_METRICS: list[str] = ["emissions_lbs_per_upt", "emissions_lbs_per_mile"]
"""Rows where any of these is undefined can't compete for any award."""


def classify_agency_size(upt: pd.Series) -> pd.Series:
    """Bucket agencies into Small, Medium and Large tiers by unlinked passenger trips.

    Each tier includes its lower bound, so 1,000,000 trips is Medium, not Small.
    """
    labels = list(AGENCY_SIZE_THRESHOLDS)
    bins = [*AGENCY_SIZE_THRESHOLDS.values(), np.inf]
    return (
        pd.cut(upt.astype("float64"), bins=bins, labels=labels, right=False)
        .astype("string")
    )


def _is_finite(col: pd.Series) -> pd.Series:
    return pd.Series(np.isfinite(col.astype("float64")), index=col.index)


def valid_award_rows(
    df: pd.DataFrame, diagnostics: PipelineDiagnostics | None = None
) -> pd.DataFrame:
    """Drop rows whose per-trip or per-mile emissions are undefined."""
    if diagnostics is None:
        diagnostics = PipelineDiagnostics()
    valid = _is_finite(df[REQUIRED_METRICS[0]]) & _is_finite(df[REQUIRED_METRICS[1]])
    diagnostics.record(
        "award_rows_undefined_metrics",
        (~valid).sum(),
        "records excluded from the awards because of undefined metrics.",
    )
    return df.loc[valid]


def _select_winner(candidates: pd.DataFrame, award: AwardSpec) -> int:
    """Position of the first row holding the extreme value of the award metric."""
    values = candidates[award.metric].to_numpy(dtype="float64")
    return int(np.argmin(values) if award.direction == "min" else np.argmax(values))


def _select_tier_awards(
    df: pd.DataFrame, tier: str, diagnostics: PipelineDiagnostics
) -> list[dict]:
    rows = []
    for award in AWARDS:
        finite = _is_finite(df[award.metric])
        # Tiers are subsets of the full table, so only count exclusions once.
        if tier == ALL_TIERS and not finite.all():
            diagnostics.record(
                f"award_rows_undefined_{award.metric}",
                (~finite).sum(),
                f"records not considered for the {tier} {award.name} award.",
            )
        candidates = df.loc[finite]
        if candidates.empty:
            logger.warning(f"No candidates for the {tier} {award.name} award.")
            continue
        winner = candidates.iloc[_select_winner(candidates, award)]
        rows.append(
            {
                "award": award.name,
                "agency_size": tier,
                "ntd_id": winner["ntd_id"],
                "agency_name": winner["agency_name"],
                "mode": winner.get("mode", pd.NA),
                "metric": award.metric,
                "value": float(winner[award.metric]),
                "median": float(candidates[award.metric].median()),
                "n_candidates": len(candidates),
            }
        )
    return rows


def select_awards(
    df: pd.DataFrame,
    by_tier: bool = False,
    diagnostics: PipelineDiagnostics | None = None,
) -> pd.DataFrame:
    """Pick the winner of each award.

    The median of each award's metric across all of the candidates is reported next
    to the winning value, for context. It plays no part in the selection.

    Args:
        df: The ``emissions`` table, or the ``emissions_by_agency`` table (which has
            no ``mode``).
        by_tier: If True, also pick winners within each agency size tier, so that
            agencies are compared against others of a similar size.
        diagnostics: Where to record the rows excluded from consideration.

    Returns:
        One row per award (and tier), with the winning agency and value.
    """
    if diagnostics is None:
        diagnostics = PipelineDiagnostics()
    valid = valid_award_rows(df, diagnostics=diagnostics)
    rows = _select_tier_awards(valid, ALL_TIERS, diagnostics)
    if by_tier:
        for tier in AGENCY_SIZE_THRESHOLDS:
            in_tier = valid.loc[valid["agency_size"].eq(tier).fillna(False)]
            if in_tier.empty:
                logger.info(f"No {tier} agencies to give awards to.")
                continue
            rows += _select_tier_awards(in_tier, tier, diagnostics)
    awards = pd.DataFrame(rows, columns=AWARD_COLUMNS)
    return awards.astype(
        {
            "award": "string",
            "agency_size": "string",
            "ntd_id": "Int64",
            "agency_name": "string",
            "mode": "string",
            "metric": "string",
            "value": "float64",
            "median": "float64",
            "n_candidates": "Int64",
        }
    )

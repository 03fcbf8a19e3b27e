"""Static dataframes used in normalizing the raw data."""

from io import StringIO

import pandas as pd

US_STATES: pd.DataFrame = pd.read_csv(
    StringIO(
        """state,state_name
AL,Alabama
AK,Alaska
AZ,Arizona
AR,Arkansas
CA,California
CO,Colorado
CT,Connecticut
DE,Delaware
FL,Florida
GA,Georgia
HI,Hawaii
ID,Idaho
IL,Illinois
IN,Indiana
IA,Iowa
KS,Kansas
KY,Kentucky
LA,Louisiana
ME,Maine
MD,Maryland
MA,Massachusetts
MI,Michigan
MN,Minnesota
MS,Mississippi
MO,Missouri
MT,Montana
NE,Nebraska
NV,Nevada
NH,New Hampshire
NJ,New Jersey
NM,New Mexico
NY,New York
NC,North Carolina
ND,North Dakota
OH,Ohio
OK,Oklahoma
OR,Oregon
PA,Pennsylvania
RI,Rhode Island
SC,South Carolina
SD,South Dakota
TN,Tennessee
TX,Texas
UT,Utah
VT,Vermont
VA,Virginia
WA,Washington
WV,West Virginia
WI,Wisconsin
WY,Wyoming
"""
    ),
    dtype="string",
)
"""The 50 US states, with their two-letter postal abbreviations.

The District of Columbia and the territories have no EIA State Electricity Profile in
this set, so transit agencies located there end up without grid data.
"""

STATE_ABBREVIATIONS: dict[str, str] = dict(
    zip(US_STATES.state_name, US_STATES.state, strict=True)
)
"""Mapping of state name to two-letter postal abbreviation."""

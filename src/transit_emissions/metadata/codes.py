"""NTD mode codes and the descriptive labels used in reports."""

import pandas as pd

MODE_CODES: pd.DataFrame = pd.DataFrame(
    columns=["code", "label", "description"],
    data=[
        ("HR", "Heavy Rail", "High capacity rail in an exclusive right-of-way."),
        ("MB", "Motor Bus", "Rubber-tired passenger vehicles on fixed routes."),
        ("CR", "Commuter Rail", "Regional rail between a central city and suburbs."),
        ("LR", "Light Rail", "Lightweight passenger rail cars on shared or exclusive tracks."),
        ("RB", "Rapid Bus", "Bus rapid transit with fixed stations and priority lanes."),
        ("TB", "Trolleybus", "Electric rubber-tired buses powered from overhead wires."),
        ("CC", "Cable Car", "Rail cars propelled by a moving cable under the street."),
        ("SR", "Streetcar", "Rail cars operating mostly in mixed street traffic."),
        ("VP", "Vanpool", "Ridesharing in vans operated by the riders."),
        ("DR", "Demand Response", "Vehicles dispatched in response to rider calls."),
    ],
).convert_dtypes()

UNKNOWN_MODE: str = "Unknown"
"""Label given to mode codes that aren't in :data:`MODE_CODES`."""

MODE_LABELS: dict[str, str] = dict(zip(MODE_CODES.code, MODE_CODES.label, strict=True))
"""Mapping of NTD mode code to its descriptive label."""

"""Constants used throughout the transit emissions calculations."""

from enum import StrEnum, unique


@unique
class Fuel(StrEnum):
    """Fuel types whose consumption is converted into CO2 emissions.

    The values are the canonical column names of the consumption quantities in the
    normalized NTD energy table.
    """

    DIESEL_FUEL = "diesel_fuel"
    GASOLINE = "gasoline"
    COMPRESSED_NATURAL_GAS = "compressed_natural_gas"
    LIQUEFIED_PETROLEUM_GAS = "liquefied_petroleum_gas"
    BUNKER_FUEL = "bunker_fuel"
    ETHANOL = "ethanol"
    ELECTRIC_PROPULSION = "electric_propulsion"

    @property
    def emissions_col(self) -> str:
        """Name of the column holding the emissions attributed to this fuel."""
        return f"{self.value}_emissions_lbs"


COMBUSTION_EMISSION_FACTORS: dict[Fuel, float] = {
    Fuel.DIESEL_FUEL: 22.4,
    Fuel.GASOLINE: 19.6,
    Fuel.COMPRESSED_NATURAL_GAS: 11.7,
    Fuel.LIQUEFIED_PETROLEUM_GAS: 12.7,
    Fuel.BUNKER_FUEL: 26.0,
    Fuel.ETHANOL: 12.5,
}
"""Pounds of CO2 emitted per gallon (or gallon equivalent) of each combustion fuel.

Electric propulsion has no fixed factor. Its emissions use the CO2 intensity of the
grid in the state where the agency operates.
"""

UNMODELLED_FUELS: list[str] = [
    "bio_diesel",
    "electric_battery",
    "hydrogen",
    "kerosene",
    "liquefied_natural_gas",
    "methanol",
]
"""Other NTD energy columns. Kept for the zero-energy filter, no emission factor."""

ALL_FUELS: list[str] = [fuel.value for fuel in Fuel] + UNMODELLED_FUELS
"""Every fuel consumption column in the normalized energy table."""

CAR_MILES_PER_GALLON: float = 25.0
"""Assumed fuel economy of the private car each passenger mile would replace."""

CAR_LBS_CO2_PER_GALLON: float = 19.6
"""Pounds of CO2 per gallon of gasoline burned by that hypothetical car."""

AGENCY_SIZE_THRESHOLDS: dict[str, float] = {
    "Small": 0,
    "Medium": 1e6,
    "Large": 1e8,
}
"""Lower UPT bound (inclusive) of each agency size tier, in increasing order."""

FIELD_DTYPES_PANDAS: dict[str, str] = {
    "string": "string",
    "number": "float64",
    "integer": "Int64",
}
"""Pandas data type by field type."""

"""
Aircheck configuration and constants.

All engine inputs are inch-pound: CFM, ft², ft³, °F, %RH, mph, inHg, feet.
Envelope and duct test pressures are in pascals.
"""

from enum import Enum


class LimitBasis(str, Enum):
    PERCENT_OF_FLOW = "percent_of_flow"  # CFM25 / system airflow × 100
    PER_100_SQFT = "per_100_sqft"        # CFM25 / conditioned area × 100


# Standard sea-level barometric pressure
STANDARD_BAROMETRIC_INHG = 29.92
PSI_PER_INHG = 0.491154

# Blower-door reference pressures
REFERENCE_PRESSURE_PA = 50.0
ELA_REFERENCE_PRESSURE_PA = 4.0

# Regression validity thresholds
MIN_HOUSE_PRESSURE_PA = 10.0   # readings below this are too noisy to use
MIN_CORRELATION = 0.99         # recommended minimum r for a multipoint fit
DEFAULT_FLOW_EXPONENT = 0.65   # single-point extrapolation
FLOW_EXPONENT_RANGE = (0.5, 1.0)
OUTLIER_DEVIATION = 0.20       # fraction off the fitted curve

# ELA (LBL method): air density and discharge coefficient
ELA_AIR_DENSITY_KG_M3 = 1.2
ELA_DISCHARGE_COEFFICIENT = 1.0
M3S_PER_CFM = 0.000471947
SQIN_PER_M2 = 1550.0031

# Realistic weather input ranges
TEMPERATURE_RANGE_F = (-100.0, 150.0)
BAROMETRIC_RANGE_INHG = (20.0, 32.0)
MAX_WIND_SPEED_MPH = 10.0

# Equipment calibration interval
CALIBRATION_INTERVAL_DAYS = 730

# Blower-door fan calibration: CFM = C × (fan pressure)^n
BLOWER_DOOR_RING_CALIBRATION = {
    "open": {"C": 235.0, "n": 0.5},
    "ring_a": {"C": 176.0, "n": 0.5},
    "ring_b": {"C": 127.0, "n": 0.5},
    "ring_c": {"C": 85.0, "n": 0.5},
    "ring_d": {"C": 56.0, "n": 0.5},
}

# ASHRAE 62.2 whole-house rate: Qtotal = 0.03 × area + 7.5 × (bedrooms + 1)
ASHRAE_AREA_FACTOR = 0.03
ASHRAE_OCCUPANT_FACTOR = 7.5

# Local exhaust minimums (CFM) by exhaust type
KITCHEN_EXHAUST_MINIMUMS = {
    "intermittent": 100.0,
    "continuous": 25.0,
}
BATHROOM_EXHAUST_MINIMUMS = {
    "intermittent": 50.0,
    "continuous": 20.0,
}
MAX_BATHROOMS = 4

# Duct leakage
DUCT_TEST_PRESSURE_PA = 25.0
DUCT_FLOW_EXPONENT = 0.6
DLO_HOUSE_PRESSURE_PA = -25.0
DLO_HOUSE_PRESSURE_TOLERANCE_PA = 2.0
PRESSURE_PAN_PASS_PA = 1.0
PRESSURE_PAN_MARGINAL_PA = 3.0
CFM25_OUTLIER_DEVIATION = 0.20   # fraction off the median reading
CFM25_OUTLIER_MIN_READINGS = 3

DEFAULT_CODE_YEAR = "2020"

# ACH50 limits by code year. Keys are climate zones; "*" applies to any zone.
DEFAULT_ACH50_LIMITS = {
    "2009": {"*": 7.0},
    "2012": {"1": 5.0, "2": 5.0, "3": 3.0, "4": 3.0, "5": 3.0, "6": 3.0, "7": 3.0, "8": 3.0},
    "2015": {"1": 5.0, "2": 5.0, "3": 3.0, "4": 3.0, "5": 3.0, "6": 3.0, "7": 3.0, "8": 3.0},
    "2018": {"1": 5.0, "2": 5.0, "3": 3.0, "4": 3.0, "5": 3.0, "6": 3.0, "7": 3.0, "8": 3.0},
    "2020": {"*": 3.0},  # Minnesota 2020 Energy Code
    "2021": {"1": 5.0, "2": 5.0, "3": 3.0, "4": 3.0, "5": 3.0, "6": 3.0, "7": 3.0, "8": 3.0},
}

# Duct leakage limits by code year
DEFAULT_DUCT_LIMITS = {
    "2020": {"tdl": 4.0, "dlo": 3.0, "basis": LimitBasis.PERCENT_OF_FLOW.value},
}

# Field-app dev server allowed to call the API from the browser
CORS_ORIGINS = ["http://localhost:5173"]

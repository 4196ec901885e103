"""
Configuration constants for the road-fine enforcement data pipeline.
"""

import os
from typing import Dict, List, Literal, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
# Directory or http(s) base URL the relative source paths are resolved against.
DATA_SOURCE_ROOT: str = os.getenv("DATA_SOURCE_ROOT", "data")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

REQUEST_TIMEOUT: int = 30

ChartModule = Literal["age", "fine_types", "trend"]

SOURCES: Dict[str, str] = {
    "age": "Q4.csv",
    "fine_types": "police_enforcement_2024_fines-1.csv",
    "trend": "Q3.csv",
}

# Header names are contract (case-sensitive)
YEAR_HEADER: str = "YEAR"
JURISDICTION_HEADER: str = "JURISDICTION"
AGE_GROUP_HEADER: str = "AGE_GROUP"
SUM_FINES_HEADER: str = "Sum(FINES)"
METRIC_HEADER: str = "METRIC"
FINES_HEADER: str = "FINES"
CAMERA_HEADER: str = "Camera-based"
POLICE_HEADER: str = "Police-issued"

# ======================================================
#  ENUMERATIONS
# ======================================================
JURISDICTIONS: Tuple[str, ...] = ("ACT", "NSW", "NT", "QLD", "SA", "TAS", "VIC", "WA")

AGE_BANDS: Tuple[str, ...] = ("0-16", "17-25", "26-39", "40-64", "65 and over")
ALL_AGES: str = "All ages"
UNKNOWN_AGE: str = "Unknown"

# Age bands are reported from this year on; earlier years only carry "All ages".
AGE_BAND_CUTOFF_YEAR: int = 2023

# Camera-based detection introduced; splits the trend into before/after periods.
CAMERA_CUTOFF_YEAR: int = 2020

HIGHLIGHT_METRIC: str = "mobile_phone_use"

# ======================================================
#  PER-CAPITA NORMALIZATION
# ======================================================
# Estimated driver licence holders per jurisdiction
LICENCE_HOLDERS: Dict[str, int] = {
    "ACT": 350_000,
    "NSW": 5_500_000,
    "NT": 180_000,
    "QLD": 3_800_000,
    "SA": 1_300_000,
    "TAS": 420_000,
    "VIC": 4_300_000,
    "WA": 1_800_000,
}
DEFAULT_LICENCE_HOLDERS: int = 1_000_000
RATE_SCALE: int = 10_000

# ======================================================
#  UI DEFAULTS
# ======================================================
JURISDICTION_OPTIONS: List[Tuple[str, str]] = [
    ("Australian Capital Territory", "ACT"),
    ("New South Wales", "NSW"),
    ("Northern Territory", "NT"),
    ("Queensland", "QLD"),
    ("South Australia", "SA"),
    ("Tasmania", "TAS"),
    ("Victoria", "VIC"),
    ("Western Australia", "WA"),
]

NO_DATA_MESSAGE: str = "No data available for selected filters"
PROPORTIONAL_NOTE: str = (
    "(2008-2022: Total fines distributed proportionally across age groups)"
)
GRANULAR_NOTE: str = "(2023+: Actual age group breakdown)"

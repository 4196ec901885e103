"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pandas as pd
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def age_csv_text():
    """Age / jurisdiction export straddling the 2023 methodology change."""
    return "\n".join(
        [
            '"YEAR","JURISDICTION","AGE_GROUP","Sum(FINES)"',
            '"2022","NSW","All ages","1000"',
            '"2022","VIC","All ages","12,345"',
            '"2022","VIC","Unknown","50"',
            '"2023","NSW","0-16","10"',
            '"2023","NSW","17-25","200"',
            '"2023","NSW","26-39","300"',
            '"2023","NSW","40-64","400"',
            '"2023","NSW","65 and over","90"',
            '"2023","NSW","Unknown","999"',
            '"2023","NSW","All ages","5000"',
            '"2023","VIC","17-25","150"',
            "",
            '"2023","WA","17-25"',
            '"n/a","WA","17-25","20"',
        ]
    )


@pytest.fixture
def age_records():
    """Typed records as produced by the age manifest."""
    rows = [
        (2015, "NSW", "All ages", 1000),
        (2015, "VIC", "All ages", 500),
        (2015, "VIC", "17-25", 77),
        (2015, "QLD", "All ages", 250),
        (2022, "NSW", "All ages", 2000),
        (2022, "NSW", "Unknown", 30),
        (2023, "NSW", "0-16", 10),
        (2023, "NSW", "17-25", 200),
        (2023, "NSW", "26-39", 300),
        (2023, "NSW", "40-64", 400),
        (2023, "NSW", "65 and over", 90),
        (2023, "NSW", "Unknown", 999),
        (2023, "NSW", "All ages", 5000),
        (2023, "VIC", "17-25", 150),
        (2023, "VIC", "40-64", 50),
    ]
    return pd.DataFrame(rows, columns=["year", "jurisdiction", "age_group", "fines"])


@pytest.fixture
def trend_csv_text():
    return "\n".join(
        [
            "YEAR,JURISDICTION,Camera-based,Police-issued",
            "2018,NSW,,60",
            "2018,VIC,,40",
            "2019,NSW,,80",
            "2020,NSW,100,50",
            "2021,NSW,90,60",
            "2021,VIC,,",
            "bad,NSW,1,1",
        ]
    )


@pytest.fixture
def fine_type_csv_text():
    return "\n".join(
        [
            "YEAR,JURISDICTION,METRIC,FINES",
            "2024,NSW,speed_fines,500",
            "2024,NSW,mobile_phone_use,300",
            "2024,VIC,speed_fines,250",
            "2024,VIC,non_wearing_seatbelts,",
            "2024,VIC,mobile_phone_use,100",
        ]
    )

"""Ingestion pipeline: raw CSV text to typed fine records.

All three chart modules share one parser and one coercer; they differ only
in the field manifest declared here.  The primary entry point is
:func:`ingest`, which returns the typed records together with the number
of lines skipped by the parser and rows discarded by the coercer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

import pandas as pd

from .coercion import FieldManifest, FieldSpec, coerce_records
from .config import (
    AGE_GROUP_HEADER,
    CAMERA_HEADER,
    FINES_HEADER,
    JURISDICTION_HEADER,
    METRIC_HEADER,
    POLICE_HEADER,
    SUM_FINES_HEADER,
    YEAR_HEADER,
)
from .csv_parser import parse_csv

# Module‑level logger
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Field manifests
# ---------------------------------------------------------------------------

AGE_MANIFEST: FieldManifest = (
    FieldSpec(YEAR_HEADER, "year", "int"),
    FieldSpec(JURISDICTION_HEADER, "jurisdiction"),
    FieldSpec(AGE_GROUP_HEADER, "age_group"),
    FieldSpec(SUM_FINES_HEADER, "fines", "int"),
)

FINE_TYPE_MANIFEST: FieldManifest = (
    FieldSpec(METRIC_HEADER, "metric"),
    FieldSpec(FINES_HEADER, "fines", "int_or_zero"),
)

TREND_MANIFEST: FieldManifest = (
    FieldSpec(YEAR_HEADER, "year", "int"),
    FieldSpec(CAMERA_HEADER, "camera", "int_or_zero"),
    FieldSpec(POLICE_HEADER, "police", "int_or_zero"),
)

MANIFESTS: Dict[str, FieldManifest] = {
    "age": AGE_MANIFEST,
    "fine_types": FINE_TYPE_MANIFEST,
    "trend": TREND_MANIFEST,
}


@dataclass(frozen=True)
class IngestResult:
    """Typed records plus load diagnostics."""

    records: pd.DataFrame
    skipped_lines: int
    discarded_rows: int

    @property
    def dropped(self) -> int:
        return self.skipped_lines + self.discarded_rows


def ingest(text: str, manifest: FieldManifest) -> IngestResult:
    """Parse and coerce a CSV document.

    Parameters
    ----------
    text : str
        The complete CSV document.
    manifest : FieldManifest
        Which headers to keep and how to type them.

    Returns
    -------
    IngestResult
        Bad lines and rows are dropped and counted; only a missing header
        column raises (``KeyError``).
    """
    parsed = parse_csv(text)
    coerced = coerce_records(parsed.rows, manifest)
    result = IngestResult(
        records=coerced.records,
        skipped_lines=parsed.skipped,
        discarded_rows=coerced.discarded,
    )
    logger.info(
        "Ingested %d records (%d lines skipped, %d rows discarded)",
        len(result.records),
        result.skipped_lines,
        result.discarded_rows,
    )
    return result

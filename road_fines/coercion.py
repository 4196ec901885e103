"""Field coercion for parsed fine rows.

Each dataset declares a :data:`FieldManifest` listing which headers it
needs and how to type them.  :func:`coerce_records` applies the manifest
to the raw string table from :mod:`road_fines.csv_parser`, renames the
columns to their record names and drops rows whose strict integer fields
cannot be parsed.  Every numeric field is a year or a count, so negative
values count as unparseable.  Dropped rows are counted and logged, never
raised.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

FieldKind = Literal["int", "int_or_zero", "category"]

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")

_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


@dataclass(frozen=True)
class FieldSpec:
    header: str
    name: str
    kind: FieldKind = "category"


FieldManifest = Tuple[FieldSpec, ...]


@dataclass(frozen=True)
class CoercedRecords:
    records: pd.DataFrame
    discarded: int


def parse_int(value: object) -> Optional[int]:
    """Best-effort integer parse of a raw field.

    Thousands separators are removed, then the leading integer prefix is
    taken (``"12,345" -> 12345``, ``"12.7" -> 12``).  Returns ``None``
    when no digits lead the value or the number does not fit in int64.
    """
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    match = _INT_PREFIX.match(str(value).replace(",", ""))
    if match is None:
        return None
    number = int(match.group(1))
    if not _INT64_MIN <= number <= _INT64_MAX:
        return None
    return number


def parse_count(value: object) -> Optional[int]:
    """Like :func:`parse_int`, but negative numbers are unparseable too."""
    number = parse_int(value)
    if number is None or number < 0:
        return None
    return number


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise an error if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")


def coerce_records(rows: pd.DataFrame, manifest: FieldManifest) -> CoercedRecords:
    """Type the raw rows according to ``manifest``.

    Parameters
    ----------
    rows : pd.DataFrame
        Raw string table keyed by header names.
    manifest : FieldManifest
        Fields to keep, in output column order.

    Returns
    -------
    CoercedRecords
        ``records`` holds one column per manifest entry, named by
        ``FieldSpec.name``; integer columns are ``int64``.  ``discarded``
        counts rows dropped for an unparseable strict integer field.
    """
    if len(rows.columns):
        ensure_columns(rows, [spec.header for spec in manifest])
    if rows.empty:
        empty = pd.DataFrame(
            {spec.name: pd.Series(dtype=_dtype_for(spec)) for spec in manifest}
        )
        return CoercedRecords(records=empty, discarded=0)

    typed = pd.DataFrame(index=rows.index)
    valid = pd.Series(True, index=rows.index, dtype=bool)
    for spec in manifest:
        column = rows[spec.header]
        if spec.kind == "category":
            typed[spec.name] = column.astype(str).str.strip()
            continue

        parsed = pd.Series([parse_count(v) for v in column], index=column.index, dtype=object)
        if spec.kind == "int":
            valid &= parsed.notna()
        else:
            parsed = parsed.where(parsed.notna(), 0)
        typed[spec.name] = parsed

    discarded = int((~valid).sum())
    if discarded:
        bad_lines = [int(i) for i in rows.index[~valid][:10]]
        logger.warning(
            "Discarded %d of %d rows with invalid numeric values (row positions %s%s)",
            discarded,
            len(rows),
            bad_lines,
            "..." if discarded > len(bad_lines) else "",
        )

    records = typed.loc[valid].reset_index(drop=True)
    for spec in manifest:
        if spec.kind != "category":
            records[spec.name] = records[spec.name].astype("int64")

    return CoercedRecords(records=records, discarded=discarded)


def _dtype_for(spec: FieldSpec) -> str:
    return "object" if spec.kind == "category" else "int64"

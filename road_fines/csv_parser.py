"""Quote-aware tokenizer for the fine datasets.

The source files are small comma-separated exports with an optional
double-quote around any field.  :func:`parse_csv` turns a whole document
into a DataFrame of raw strings keyed by the header names, skipping lines
whose field count disagrees with the header.

Embedded quotes are not supported: a bare ``"`` always toggles the
inside-quotes state, and ``""`` is not read as an escaped quote.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedCsv:
    """Raw rows (all strings) plus the number of rejected lines."""

    rows: pd.DataFrame
    headers: Tuple[str, ...]
    skipped: int


def _clean_token(token: str) -> str:
    return token.replace('"', "").strip()


def split_line(line: str, sep: str = ",") -> List[str]:
    """Split one line on ``sep``, ignoring separators inside quoted spans."""
    fields: List[str] = []
    current: List[str] = []
    inside_quotes = False

    for char in line:
        if char == '"':
            inside_quotes = not inside_quotes
        elif char == sep and not inside_quotes:
            fields.append(_clean_token("".join(current)))
            current = []
        else:
            current.append(char)

    fields.append(_clean_token("".join(current)))
    return fields


def parse_header(line: str, sep: str = ",") -> Tuple[str, ...]:
    # Header names never carry separators, so a plain split is enough
    return tuple(_clean_token(h) for h in line.split(sep))


def parse_csv(text: str, sep: str = ",") -> ParsedCsv:
    """Parse a delimited document into raw rows.

    Parameters
    ----------
    text : str
        The complete document, header line first.
    sep : str, optional
        Field delimiter; defaults to ``","``.

    Returns
    -------
    ParsedCsv
        ``rows`` has one column per header name and one row per accepted
        data line, in document order.  ``skipped`` counts lines rejected
        for a field-count mismatch; blank lines are not counted.
    """
    lines = text.strip().split("\n")
    if not lines or not lines[0].strip():
        return ParsedCsv(rows=pd.DataFrame(), headers=(), skipped=0)

    headers = parse_header(lines[0], sep)
    records: List[List[str]] = []
    skipped = 0

    for line_no, raw_line in enumerate(lines[1:], start=2):
        line = raw_line.strip()
        if not line:
            continue

        values = split_line(line, sep)
        if len(values) != len(headers):
            logger.warning(
                "Line %d: expected %d values, got %d; skipping",
                line_no,
                len(headers),
                len(values),
            )
            skipped += 1
            continue
        records.append(values)

    rows = pd.DataFrame(records, columns=list(headers), dtype=str)
    logger.debug("Parsed %d rows (%d skipped) with headers %s", len(rows), skipped, headers)
    return ParsedCsv(rows=rows, headers=headers, skipped=skipped)

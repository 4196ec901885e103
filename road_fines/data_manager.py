"""Data manager for fetching and holding the chart datasets.

This module resolves each chart module's relative data-source path,
fetches the document once (local file or http(s) URL), and runs it
through :func:`road_fines.pipeline.ingest`.  Results are memoized in
process memory for the lifetime of the app; nothing is written to disk.

A fetch that fails (missing file, network error, non-success status) is
fatal for that chart module only and surfaces as :class:`DataFetchError`.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

import requests

from . import pipeline
from .config import DATA_SOURCE_ROOT, REQUEST_TIMEOUT, SOURCES, ChartModule

logger = logging.getLogger(__name__)


class DataFetchError(RuntimeError):
    """The data document for a chart module could not be retrieved."""


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def resolve_source(module: ChartModule, root: str = DATA_SOURCE_ROOT) -> str:
    """Join the module's relative source path onto ``root``.

    ``root`` may be a directory or an http(s) base URL.  Relative
    directories are taken from the repository root.
    """
    try:
        relative = SOURCES[module]
    except KeyError:
        raise KeyError(f"Unknown chart module: {module!r}") from None

    if _is_url(root):
        return f"{root.rstrip('/')}/{relative}"

    base = Path(root).expanduser()
    if not base.is_absolute():
        # Repo root (one level up from this package)
        base = Path(__file__).resolve().parent.parent / base
    return str(base / relative)


def fetch_text(source: str, timeout: int = REQUEST_TIMEOUT) -> str:
    """Return the document at ``source`` as text.

    Raises
    ------
    DataFetchError
        If the file is missing or not valid UTF-8, or the HTTP request
        fails or returns a non-success status.
    """
    if _is_url(source):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise DataFetchError(f"Error loading data: {exc}") from exc
        return response.text

    path = Path(source)
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise DataFetchError(f"Error loading data: {path} ({exc.strerror})") from exc
    except UnicodeDecodeError as exc:
        raise DataFetchError(f"Error loading data: {path} is not valid UTF-8 ({exc.reason})") from exc


@lru_cache(maxsize=None)
def load_dataset(module: ChartModule) -> pipeline.IngestResult:
    """Fetch and ingest one chart module's dataset, once per process."""
    source = resolve_source(module)
    logger.info("Loading %s dataset from %s", module, source)
    text = fetch_text(source)
    logger.info("Received %d characters for %s", len(text), module)
    return pipeline.ingest(text, pipeline.MANIFESTS[module])


def try_load_dataset(
    module: ChartModule,
) -> Tuple[Optional[pipeline.IngestResult], Optional[str]]:
    """Like :func:`load_dataset`, but return the error message instead of raising.

    Used by the app so a failing module renders an inline message while
    the other charts keep working.
    """
    try:
        return load_dataset(module), None
    except DataFetchError as exc:
        logger.error("Could not load %s dataset: %s", module, exc)
        return None, str(exc)
    except KeyError as exc:
        logger.error("Malformed %s dataset: %s", module, exc)
        return None, f"Error loading data: {exc.args[0] if exc.args else exc}"

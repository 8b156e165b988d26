from __future__ import annotations

import asyncio
import logging
import math
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import pandas as pd

from wine_browser.core.exceptions import ConfigurationError, LoadError, ParseError
from wine_browser.core.records import RecordColumns, RecordStore, WineRecord

logger = logging.getLogger(__name__)

PARSE_POLICIES = ("reject", "skip")

Source = Union[str, Path]


def _text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, float) and math.isnan(raw):
        return ""
    return str(raw).strip()


def _parse_int(text: str, row: int, field: str) -> int:
    """
    Parse trimmed text as an integer.

    "30.0" is accepted as 30; "87.5" and "abc" are not.
    """
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        raise ParseError(
            f"Row {row}: field '{field}' is not numeric: {text!r}",
            row=row, field=field, value=text,
        ) from None
    if not math.isfinite(value) or not value.is_integer():
        raise ParseError(
            f"Row {row}: field '{field}' is not an integer: {text!r}",
            row=row, field=field, value=text,
        )
    return int(value)


def _required_text(raw_row: Mapping[str, Any], column: str, field: str, row: int) -> str:
    text = _text(raw_row.get(column))
    if not text:
        raise ParseError(
            f"Row {row}: required field '{field}' (column '{column}') is missing",
            row=row, field=field, value=raw_row.get(column),
        )
    return text


def parse_row(raw_row: Mapping[str, Any], row: int, columns: RecordColumns = RecordColumns()) -> WineRecord:
    """
    Turn one raw text row into a WineRecord.

    :param raw_row: mapping of column name -> raw text
    :param row: 1-based row number, used in error messages
    :raises ParseError: missing required field or bad numeric value
    """
    country = _required_text(raw_row, columns.country, "country", row)
    variety = _required_text(raw_row, columns.variety, "variety", row)
    points = _parse_int(_required_text(raw_row, columns.points, "points", row), row, "points")

    price_text = _text(raw_row.get(columns.price))
    price: Optional[int] = _parse_int(price_text, row, "price") if price_text else None

    return WineRecord(country=country, variety=variety, points=points, price=price)


def parse_rows(
    rows: Iterable[Mapping[str, Any]],
    columns: RecordColumns = RecordColumns(),
    on_parse_error: str = "reject",
) -> RecordStore:
    """
    Parse raw rows into a RecordStore.

    Policies:
    - "reject": the first bad row raises ParseError and nothing is built
    - "skip": bad rows are excluded and logged
    """
    if on_parse_error not in PARSE_POLICIES:
        raise ConfigurationError(
            f"on_parse_error must be one of {PARSE_POLICIES}, got {on_parse_error!r}"
        )

    records = []
    skipped = 0
    for row, raw_row in enumerate(rows, start=1):
        try:
            records.append(parse_row(raw_row, row, columns))
        except ParseError as e:
            if on_parse_error == "reject":
                raise
            skipped += 1
            logger.warning(
                "Skipping unparseable row",
                extra={"row": e.row, "field": e.field, "value": str(e.value), "error": str(e)},
            )

    if skipped:
        logger.info(
            "Rows skipped while parsing dataset",
            extra={"n_skipped": skipped, "n_records": len(records)},
        )

    return RecordStore(records)


def _check_header(df: pd.DataFrame, columns: RecordColumns, source: Source) -> None:
    missing = [col for col in columns.as_dict().values() if col not in df.columns]
    if missing:
        msg = f"Dataset '{source}' is missing required column(s): {missing}"
        logger.error(msg, extra={"source": str(source), "missing": missing})
        raise ParseError(msg, field=missing[0])


def load_records(
    source: Source,
    columns: RecordColumns = RecordColumns(),
    on_parse_error: str = "reject",
) -> RecordStore:
    """
    Read a CSV file (path or URL) and parse it into a RecordStore.

    Everything is read as text so numeric parsing stays explicit.

    :raises LoadError: file missing, unreachable or not a readable CSV
    :raises ParseError: header lacks a required column, or a bad row under "reject"
    """
    if isinstance(source, Path) and not source.is_file():
        raise LoadError(f"Dataset file not found at {source}.")

    logger.info("Loading dataset", extra={"source": str(source)})

    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    except FileNotFoundError as e:
        raise LoadError(f"Dataset file not found at {source}.") from e
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise LoadError(f"Could not read dataset '{source}': {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    _check_header(df, columns, source)

    store = parse_rows(df.to_dict(orient="records"), columns=columns, on_parse_error=on_parse_error)

    logger.info(
        "Dataset loaded",
        extra={"source": str(source), "n_rows": len(df), "n_records": store.size()},
    )
    return store


async def load_records_async(
    source: Source,
    columns: RecordColumns = RecordColumns(),
    on_parse_error: str = "reject",
) -> RecordStore:
    """Run load_records on a worker thread."""
    return await asyncio.to_thread(load_records, source, columns, on_parse_error)


class DatasetLoader:
    """
    One-shot asynchronous loader.

    The first `await load()` fetches and parses the dataset; every later call
    returns the same RecordStore, or re-raises the same failure. The cross-filter
    index is only ever built from a fully materialised store.
    """

    def __init__(
        self,
        source: Source,
        columns: RecordColumns = RecordColumns(),
        on_parse_error: str = "reject",
    ):
        self.source = source
        self.columns = columns
        self.on_parse_error = on_parse_error
        self._store: Optional[RecordStore] = None
        self._error: Optional[BaseException] = None
        self._lock: Optional[asyncio.Lock] = None
        self.n_loads = 0

    @property
    def is_loaded(self) -> bool:
        return self._store is not None

    async def load(self) -> RecordStore:
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            if self._store is not None:
                return self._store
            if self._error is not None:
                raise self._error

            self.n_loads += 1
            try:
                self._store = await load_records_async(self.source, self.columns, self.on_parse_error)
            except (LoadError, ParseError, ConfigurationError) as e:
                self._error = e
                logger.error(
                    "Dataset load failed",
                    extra={"source": str(self.source), "error": str(e)},
                )
                raise
            return self._store

    def load_sync(self) -> RecordStore:
        """Drive `load()` to completion from synchronous code (app startup)."""
        return asyncio.run(self.load())

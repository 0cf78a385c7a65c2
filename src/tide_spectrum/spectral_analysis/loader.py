"""
Water level file loading.

Reads the comma-separated exports offered by NOAA Tides & Currents
(CO-OPS) into a
:class:`~tide_spectrum.spectral_analysis.series.WaterLevelSeries`.
Two layouts are recognized from the header line:

* Station web page export::

      Date,Time (GMT),Predicted (m),Preliminary (m),Verified (m)
      2024/01/01,00:00,0.412,-,0.455

* Data API (``datagetter?...&format=csv``)::

      Date Time, Water Level, Sigma, O or I (for verified), F, R, L, Quality
      2024-01-01 00:00,0.455,0.003,0,0,0,0,v

Blank lines are skipped.  Heights that are empty or ``-`` (the CO-OPS
marker for a missing reading) drop the sample so the resampler sees a gap;
any other unreadable value, or a record with more or fewer fields than the
header, aborts the load with a :class:`ParseError`.
"""
from __future__ import annotations

import io
import logging
import os
import re
from typing import IO, Union

import numpy as np
import pandas as pd

from .errors import ParseError
from .series import WaterLevelSeries

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, IO[str]]

HEIGHT_COLUMN_PREFERENCE = (
    'Verified (m)',
    'Verified (ft)',
    'Water Level',
    'Preliminary (m)',
    'Preliminary (ft)',
    'Predicted (m)',
    'Predicted (ft)',
)
"""Height columns tried, in order, when none is named explicitly."""

MISSING_MARKERS = frozenset({'', '-'})

# The header occupies line 1; the first data row is line 2.
_FIRST_DATA_LINE = 2

# pandas C tokenizer message for a record with too many fields.
_EXTRA_FIELDS = re.compile(r'Expected (\d+) fields in line (\d+), saw (\d+)')


def read_water_levels(
    source: Source,
    height_column: str | None = None,
    time_format: str | None = None,
    logger: logging.Logger | None = None,
) -> WaterLevelSeries:
    """
    Load a CO-OPS water level CSV export.

    Parameters
    ----------
    source : str, path-like or file-like
        File path or open text stream.
    height_column : str, optional
        Column holding the water level.  If ``None`` (default), the first
        column of :data:`HEIGHT_COLUMN_PREFERENCE` present in the header is
        used.
    time_format : str, optional
        :func:`~datetime.datetime.strptime` format of the timestamps.  If
        ``None``, the format is inferred from the first record and applied
        to all of them.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    WaterLevelSeries
        Samples with strictly increasing timestamps.

    Raises
    ------
    ParseError
        If the header lacks a timestamp or height column, a record has an
        unreadable timestamp or height, or timestamps are not strictly
        increasing.  The offending line number is attached.
    """
    _log = logger or logging.getLogger(__name__)

    try:
        table = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        raise ParseError('input is empty', line_number=1) from None
    except pd.errors.ParserError as ex:
        extra = _EXTRA_FIELDS.search(str(ex))
        if extra is None:
            raise ParseError(f"malformed CSV: {ex}") from ex
        expected, line, found = (int(g) for g in extra.groups())
        raise ParseError(
            f"record has {found} fields, header has {expected}",
            line_number=line,
        ) from ex

    table.columns = [str(c).strip() for c in table.columns]
    # Short records are padded with NaN; present but empty cells are ''.
    absent = table.isna().to_numpy()
    table = table.fillna('')
    for column in table.columns:
        table[column] = table[column].str.strip()

    line_numbers = np.arange(len(table)) + _FIRST_DATA_LINE
    blank = (table == '').all(axis=1).to_numpy()
    short = np.flatnonzero(absent.any(axis=1) & ~blank)
    if len(short):
        i = short[0]
        raise ParseError(
            f"record has {int((~absent[i]).sum())} fields, header has "
            f"{len(table.columns)}",
            line_number=int(line_numbers[i]),
        )
    table = table.loc[~blank]
    line_numbers = line_numbers[~blank]

    stamp_text = _timestamp_text(table)
    column = _resolve_height_column(table.columns, height_column)

    time = pd.to_datetime(stamp_text, format=time_format, errors='coerce')
    bad_time = np.flatnonzero(pd.isna(time).to_numpy())
    if len(bad_time):
        i = bad_time[0]
        raise ParseError(
            f"unreadable timestamp {stamp_text.iloc[i]!r}",
            line_number=int(line_numbers[i]),
        )
    time = pd.DatetimeIndex(time)

    steps = np.diff(time.asi8)
    non_increasing = np.flatnonzero(steps <= 0)
    if len(non_increasing):
        i = non_increasing[0] + 1
        raise ParseError(
            f"timestamp {time[i]} does not follow {time[i - 1]}; "
            f"timestamps must be strictly increasing",
            line_number=int(line_numbers[i]),
        )

    height_text = table[column]
    missing = height_text.isin(MISSING_MARKERS).to_numpy()
    height = pd.to_numeric(height_text.where(~missing), errors='coerce')
    bad_height = np.flatnonzero(height.isna().to_numpy() & ~missing)
    if len(bad_height):
        i = bad_height[0]
        raise ParseError(
            f"unreadable {column!r} value {height_text.iloc[i]!r}",
            line_number=int(line_numbers[i]),
        )

    keep = ~missing
    series = WaterLevelSeries(time[keep], height.to_numpy()[keep])

    _log.info(
        "Loaded %d water level samples from column '%s' (%d missing "
        'readings dropped).',
        len(series), column, int(missing.sum()),
    )
    return series


def parse_water_levels(
    text: str,
    height_column: str | None = None,
    time_format: str | None = None,
    logger: logging.Logger | None = None,
) -> WaterLevelSeries:
    """Parse CSV text already held in memory; see :func:`read_water_levels`."""
    return read_water_levels(
        io.StringIO(text),
        height_column=height_column,
        time_format=time_format,
        logger=logger,
    )


def _timestamp_text(table: pd.DataFrame) -> pd.Series:
    """Return the timestamp of each record as text."""
    if 'Date Time' in table.columns:
        return table['Date Time']

    time_columns = [c for c in table.columns if c.startswith('Time')]
    if 'Date' in table.columns and time_columns:
        return table['Date'] + ' ' + table[time_columns[0]]

    raise ParseError(
        "no timestamp column found; expected 'Date Time' or 'Date' and "
        "'Time (GMT)'",
        line_number=1,
    )


def _resolve_height_column(columns, height_column: str | None) -> str:
    if height_column is not None:
        if height_column not in columns:
            raise ParseError(
                f"height column {height_column!r} not found",
                line_number=1,
            )
        return height_column

    for candidate in HEIGHT_COLUMN_PREFERENCE:
        if candidate in columns:
            return candidate
    raise ParseError(
        'no water level column found; expected one of '
        + ', '.join(repr(c) for c in HEIGHT_COLUMN_PREFERENCE),
        line_number=1,
    )

"""
Report formatting for matched spectral peaks.

Produces a deterministic table of the detected peaks ordered by descending
amplitude (ties by ascending frequency), as a :class:`pandas.DataFrame`,
a fixed-width text block, or a CSV file with a ``# key: value`` metadata
header.  The full spectrum can also be written out for plotting tools.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

import numpy as np
import pandas as pd

from .matching import ConstituentMatch
from .spectrum import Spectrum

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    'N', 'Constituent', 'Frequency_cph', 'Frequency_cpd', 'Period_h',
    'Canonical_Frequency_cph', 'Delta_cph', 'Amplitude', 'Phase',
]


def order_matches(
    matches: Iterable[ConstituentMatch],
) -> list[ConstituentMatch]:
    """Sort matches by descending amplitude, then ascending frequency."""
    return sorted(matches, key=lambda m: (-m.amplitude, m.frequency))


def matches_to_frame(matches: Iterable[ConstituentMatch]) -> pd.DataFrame:
    """
    Tabulate matches in report order.

    Parameters
    ----------
    matches : iterable of ConstituentMatch
        Matches from
        :func:`~tide_spectrum.spectral_analysis.matching.match_constituents`.

    Returns
    -------
    pd.DataFrame
        Columns :data:`REPORT_COLUMNS`.  ``N`` is 1-based; unidentified
        peaks have ``Constituent == "unidentified"`` and NaN canonical
        frequency and delta.  Phases are wrapped to [0, 360).
    """
    ordered = order_matches(matches)

    frequency = np.array([m.frequency for m in ordered], dtype=float)
    canonical = np.array(
        [m.constituent.frequency if m.is_identified else np.nan
         for m in ordered],
        dtype=float,
    )
    delta = np.array(
        [m.delta if m.is_identified else np.nan for m in ordered],
        dtype=float,
    )

    return pd.DataFrame({
        'N': np.arange(1, len(ordered) + 1),
        'Constituent': [m.name for m in ordered],
        'Frequency_cph': frequency,
        'Frequency_cpd': frequency * 24.0,
        'Period_h': 1.0 / frequency,
        'Canonical_Frequency_cph': canonical,
        'Delta_cph': delta,
        'Amplitude': np.array([m.amplitude for m in ordered], dtype=float),
        'Phase': np.array([m.phase for m in ordered], dtype=float) % 360.0,
    }, columns=REPORT_COLUMNS)


def format_report(
    matches: Iterable[ConstituentMatch],
    title: str | None = None,
) -> str:
    """
    Render matches as a fixed-width text table.

    Parameters
    ----------
    matches : iterable of ConstituentMatch
        Matches to report.
    title : str, optional
        Heading line placed above the table.

    Returns
    -------
    str
        Report text, one row per peak in descending amplitude order.
    """
    table = matches_to_frame(matches)

    lines = []
    if title:
        lines.append(title)
    if table.empty:
        lines.append('No spectral peaks above the detection threshold.')
        return '\n'.join(lines) + '\n'

    header = (
        f"{'N':>3}  {'Constituent':<12}  {'Freq (cph)':>10}  "
        f"{'Freq (cpd)':>10}  {'Period (h)':>10}  {'Delta (cph)':>11}  "
        f"{'Amplitude':>10}  {'Phase':>7}"
    )
    lines.append(header)
    lines.append('-' * len(header))
    for row in table.itertuples(index=False):
        delta = '' if np.isnan(row.Delta_cph) else f"{row.Delta_cph:+.6f}"
        lines.append(
            f"{row.N:>3}  {row.Constituent:<12}  {row.Frequency_cph:>10.6f}  "
            f"{row.Frequency_cpd:>10.5f}  {row.Period_h:>10.4f}  "
            f"{delta:>11}  {row.Amplitude:>10.4f}  {row.Phase:>7.2f}"
        )
    return '\n'.join(lines) + '\n'


def spectrum_to_frame(spectrum: Spectrum) -> pd.DataFrame:
    """Tabulate every bin of *spectrum* (frequency in cph and cpd)."""
    return pd.DataFrame({
        'Frequency_cph': spectrum.frequency,
        'Frequency_cpd': spectrum.frequency * 24.0,
        'Period_h': spectrum.period,
        'Amplitude': spectrum.amplitude,
        'Phase': spectrum.phase % 360.0,
    })


def write_report_csv(
    matches: Iterable[ConstituentMatch],
    output_path: str,
    station_id: str = '',
    metadata: dict[str, Any] | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """
    Write the match table to CSV with a metadata header.

    Parameters
    ----------
    matches : iterable of ConstituentMatch
        Matches to write.
    output_path : str
        Destination file path.
    station_id : str, optional
        Station identifier (written in the header).
    metadata : dict, optional
        Extra key/value pairs to include in the header.
    logger : logging.Logger, optional
        Logger instance.
    """
    _write_csv(
        matches_to_frame(matches), output_path, station_id, metadata,
        logger or logging.getLogger(__name__), 'Constituent report',
    )


def write_spectrum_csv(
    spectrum: Spectrum,
    output_path: str,
    station_id: str = '',
    metadata: dict[str, Any] | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Write every spectrum bin to CSV; see :func:`write_report_csv`."""
    extra = {
        'Window': spectrum.window,
        'Samples': spectrum.n_samples,
        'Interval (h)': spectrum.dt_hours,
        'Resolution (cph)': spectrum.resolution,
    }
    extra.update(metadata or {})
    _write_csv(
        spectrum_to_frame(spectrum), output_path, station_id, extra,
        logger or logging.getLogger(__name__), 'Spectrum',
    )


def _write_csv(
    table: pd.DataFrame,
    output_path: str,
    station_id: str,
    metadata: dict[str, Any] | None,
    _log: logging.Logger,
    label: str,
) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    header_lines = []
    if station_id:
        header_lines.append(f"# Station: {station_id}")
    generated = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')
    header_lines.append(f"# Generated: {generated}")
    if metadata:
        for key, value in metadata.items():
            header_lines.append(f"# {key}: {value}")

    with open(path, 'w', newline='') as f:
        for line in header_lines:
            f.write(line + '\n')
        table.to_csv(f, index=False)

    _log.info('%s written to %s (%d rows).', label, path, len(table))

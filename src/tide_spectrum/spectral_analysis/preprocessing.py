"""
Data preprocessing: equal-interval resampling and detrending.

Converts irregularly-spaced or gapped water level records to the
equally-spaced, zero-mean series the Fourier transform assumes.  Gaps are
bridged by linear interpolation up to a configurable ceiling; a longer gap
aborts the run rather than being filled with invented data.
"""
from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from scipy.signal import detrend

from .errors import ConfigError, GapTooLargeError, InsufficientDataError
from .series import WaterLevelSeries

logger = logging.getLogger(__name__)

MIN_SAMPLE_INTERVAL = pd.Timedelta(seconds=1)


def to_equal_interval(
    series: WaterLevelSeries,
    target_interval: str = '1h',
    max_gap_hours: float = 6.0,
    logger: logging.Logger | None = None,
) -> WaterLevelSeries:
    """
    Resample a series onto an equally-spaced grid.

    The grid starts at the first sample and steps by *target_interval* up
    to (never past) the last sample.  Grid values are interpolated linearly
    in time between the neighbouring observations.

    Parameters
    ----------
    series : WaterLevelSeries
        Observations, need not be equally spaced.
    target_interval : str, optional
        Output interval as a pandas frequency/timedelta string (default
        ``"1h"``).
    max_gap_hours : float, optional
        Largest spacing between consecutive observations, in hours, that
        may be bridged by interpolation (default 6.0).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    WaterLevelSeries
        Uniform series with ``interval`` set.

    Raises
    ------
    InsufficientDataError
        If *series* has fewer than two points.
    GapTooLargeError
        If any gap between consecutive observations exceeds
        *max_gap_hours*.
    ConfigError
        If *target_interval* or *max_gap_hours* is not a positive duration.
    """
    _log = logger or logging.getLogger(__name__)

    interval = parse_interval(target_interval)
    if not max_gap_hours > 0:
        raise ConfigError('max_gap_hours', max_gap_hours, 'must be positive')
    if len(series) < 2:
        raise InsufficientDataError(
            'At least two data points are required for resampling.',
            n_samples=len(series),
            required=2,
        )

    time = series.time
    max_gap = pd.Timedelta(hours=max_gap_hours)
    gaps = time[1:] - time[:-1]
    too_large = np.flatnonzero(gaps > max_gap)
    if len(too_large):
        i = too_large[0]
        raise GapTooLargeError(time[i], time[i + 1], max_gap_hours)

    grid = pd.date_range(start=time[0], end=time[-1], freq=interval)
    _log.info(
        'Resampling %d points to %d-point regular grid (%s interval).',
        len(time), len(grid), target_interval,
    )

    # Interpolate on the union so off-grid observations still anchor the
    # values between them.
    observed = series.to_series()
    merged = observed.reindex(observed.index.union(grid))
    filled = merged.interpolate(method='time').reindex(grid)

    n_filled = int(len(grid) - grid.isin(time).sum())
    largest_gap_hours = gaps.max().total_seconds() / 3600.0
    _log.info(
        'Interpolated %d grid samples; largest gap %.2f h (limit %.2f h).',
        n_filled, largest_gap_hours, max_gap_hours,
    )

    return WaterLevelSeries(grid, filled.to_numpy(), interval=interval)


def remove_trend(
    series: WaterLevelSeries,
    linear: bool = False,
    logger: logging.Logger | None = None,
) -> WaterLevelSeries:
    """
    Remove the mean, and optionally a least-squares linear trend.

    Parameters
    ----------
    series : WaterLevelSeries
        Input series.  Linear detrending requires a uniform series.
    linear : bool, optional
        Remove a linear trend instead of only the mean (default ``False``).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    WaterLevelSeries
        New series with the baseline removed.

    Raises
    ------
    ValueError
        If *series* is empty, contains NaN values, or *linear* is requested
        on a non-uniform series.
    """
    _log = logger or logging.getLogger(__name__)

    if len(series) == 0:
        raise ValueError('Cannot detrend an empty series.')
    if np.any(np.isnan(series.height)):
        raise ValueError('height must not contain NaN values for detrending.')
    if linear and not series.is_uniform:
        raise ValueError(
            'Series must be uniformly sampled before removing a linear trend.'
        )

    kind = 'linear' if linear else 'constant'
    detrended = detrend(series.height, type=kind)
    baseline = series.height - detrended

    if linear and len(series) > 1:
        slope_per_day = (
            (baseline[-1] - baseline[0]) / series.duration_hours * 24.0
        )
    else:
        slope_per_day = 0.0
    _log.info(
        'Removed %s baseline: mean=%.4f, slope=%.6f per day.',
        kind, float(np.mean(series.height)), slope_per_day,
    )

    return WaterLevelSeries(series.time, detrended, interval=series.interval)


def parse_interval(target_interval: str) -> pd.Timedelta:
    """
    Parse a resampling interval such as ``"1h"`` or ``"6min"``.

    Raises
    ------
    ConfigError
        If *target_interval* is not a duration of at least
        :data:`MIN_SAMPLE_INTERVAL`.  A bare number parses as nanoseconds
        and is rejected by that bound.
    """
    try:
        interval = pd.Timedelta(target_interval)
    except ValueError as ex:
        raise ConfigError(
            'target_sample_interval', target_interval, str(ex)
        ) from ex
    if pd.isna(interval) or interval < MIN_SAMPLE_INTERVAL:
        raise ConfigError(
            'target_sample_interval', target_interval,
            "must be at least 1 second; give a unit, e.g. '1h' or '6min'",
        )
    return interval

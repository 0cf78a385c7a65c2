"""
End-to-end spectral analysis of a water level record.

Chains the pipeline stages, each a pure function producing a new immutable
artefact::

    read_water_levels -> to_equal_interval -> remove_trend
        -> compute_spectrum -> match_constituents -> matches_to_frame
"""
from __future__ import annotations

import logging

from .config import AnalysisConfig
from .loader import Source, read_water_levels
from .matching import match_constituents
from .preprocessing import remove_trend, to_equal_interval
from .report import matches_to_frame, order_matches
from .series import WaterLevelSeries
from .spectrum import compute_spectrum

logger = logging.getLogger(__name__)


def analyze_series(
    series: WaterLevelSeries,
    config: AnalysisConfig | None = None,
    logger: logging.Logger | None = None,
) -> dict:
    """
    Run resampling, detrending, FFT, and matching on a loaded series.

    Parameters
    ----------
    series : WaterLevelSeries
        Observed water levels.
    config : AnalysisConfig, optional
        Analysis options (defaults if ``None``).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    dict
        ``"series"`` : the observed input series.
        ``"uniform"`` : resampled, detrended series that was transformed.
        ``"spectrum"`` : :class:`~.spectrum.Spectrum`.
        ``"matches"`` : tuple of :class:`~.matching.ConstituentMatch` in
            descending amplitude order.
        ``"table"`` : :class:`pandas.DataFrame` report table.

    Raises
    ------
    GapTooLargeError, InsufficientDataError, ConfigError
        Propagated from the stages; the run is aborted.
    """
    _log = logger or logging.getLogger(__name__)
    config = config or AnalysisConfig()

    _log.info(
        'Analysing %d samples spanning %.1f days.',
        len(series), series.duration_hours / 24.0,
    )
    uniform = to_equal_interval(
        series,
        target_interval=config.target_sample_interval,
        max_gap_hours=config.max_gap_hours,
        logger=_log,
    )
    uniform = remove_trend(uniform, linear=config.detrend_linear, logger=_log)
    spectrum = compute_spectrum(
        uniform,
        window=config.window_function,
        min_cycles=config.min_cycles,
        reference_period_hours=config.reference_period_hours,
        logger=_log,
    )
    matches = tuple(order_matches(match_constituents(
        spectrum,
        constituents=config.constituents,
        peak_threshold_factor=config.peak_threshold_factor,
        frequency_tolerance=config.frequency_tolerance,
        logger=_log,
    )))

    if matches:
        _log.info(
            'Dominant peak: %s at %.4f h, amplitude %.4f.',
            matches[0].name, matches[0].period, matches[0].amplitude,
        )
    return {
        'series': series,
        'uniform': uniform,
        'spectrum': spectrum,
        'matches': matches,
        'table': matches_to_frame(matches),
    }


def analyze_water_levels(
    source: Source,
    config: AnalysisConfig | None = None,
    logger: logging.Logger | None = None,
) -> dict:
    """
    Load a CO-OPS water level export and analyse it.

    See :func:`analyze_series` for the returned keys.  ``ParseError`` from
    loading is propagated.
    """
    config = config or AnalysisConfig()
    series = read_water_levels(
        source, height_column=config.height_column, logger=logger
    )
    return analyze_series(series, config, logger=logger)

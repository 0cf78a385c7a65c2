"""
Analysis options and their INI-file representation.

Options are read from the ``[analysis]`` section of a config file such as
``conf/tide_spectrum.conf``::

    [analysis]
    target_sample_interval = 1h
    max_gap_hours = 6
    window_function = none
    detrend_linear = false
    peak_threshold_factor = 10
    frequency_tolerance =
    min_cycles = 2
    reference_period_hours = 12.4206
    constituents = M2, S2, N2, K1, O1
    height_column = Verified (m)

Empty values keep the default.
"""
from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from .constituents import (
    M2_PERIOD_HOURS,
    NOS_37_CONSTITUENTS,
    normalize_constituent_name,
)
from .errors import ConfigError
from .preprocessing import parse_interval
from .spectrum import WINDOW_FUNCTIONS

logger = logging.getLogger(__name__)

DEFAULT_SECTION = 'analysis'

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off'}


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Validated options for one analysis run.

    Attributes
    ----------
    target_sample_interval : str
        Resampling grid spacing as a pandas timedelta string.
    max_gap_hours : float
        Longest gap bridged by interpolation.
    window_function : str
        FFT window, a key of
        :data:`~tide_spectrum.spectral_analysis.spectrum.WINDOW_FUNCTIONS`.
    detrend_linear : bool
        Remove a linear trend as well as the mean.
    peak_threshold_factor : float
        Peak sensitivity relative to the median amplitude.
    frequency_tolerance : float or None
        Matching band in cycles per hour; ``None`` means one bin.
    min_cycles : float
        Reference periods the record must span.
    reference_period_hours : float
        Period of the dominant signal.
    constituents : tuple of str or None
        Constituents to match; ``None`` means the NOS standard 37.
    height_column : str or None
        Input column holding water levels; ``None`` picks automatically.
    """

    target_sample_interval: str = '1h'
    max_gap_hours: float = 6.0
    window_function: str = 'none'
    detrend_linear: bool = False
    peak_threshold_factor: float = 10.0
    frequency_tolerance: float | None = None
    min_cycles: float = 2.0
    reference_period_hours: float = M2_PERIOD_HOURS
    constituents: tuple[str, ...] | None = None
    height_column: str | None = None

    def __post_init__(self):
        parse_interval(self.target_sample_interval)

        for name in ('max_gap_hours', 'peak_threshold_factor', 'min_cycles',
                     'reference_period_hours'):
            _require_positive(name, getattr(self, name))
        if self.frequency_tolerance is not None:
            _require_positive('frequency_tolerance', self.frequency_tolerance)

        if self.window_function not in WINDOW_FUNCTIONS:
            raise ConfigError(
                'window_function', self.window_function,
                f"expected one of {', '.join(WINDOW_FUNCTIONS)}",
            )

        if self.constituents is not None:
            names = tuple(
                normalize_constituent_name(n) for n in self.constituents
            )
            unknown = [n for n in names if n not in NOS_37_CONSTITUENTS]
            if unknown or not names:
                raise ConfigError(
                    'constituents', self.constituents,
                    f"unknown constituents: {', '.join(unknown)}" if unknown
                    else 'at least one constituent is required',
                )
            object.__setattr__(self, 'constituents', names)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> AnalysisConfig:
        """
        Build a config from string-valued options (e.g. an INI section).

        Unknown keys raise :class:`ConfigError`; empty values are skipped.
        """
        known = {f.name: f for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, raw in options.items():
            if key not in known:
                raise ConfigError(key, raw, 'unknown option')
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                continue
            kwargs[key] = _coerce(key, raw)
        return cls(**kwargs)

    def updated(self, **changes: Any) -> AnalysisConfig:
        """Return a copy with *changes* applied (``None`` values ignored)."""
        return replace(
            self, **{k: v for k, v in changes.items() if v is not None}
        )


def read_config_section(
    config_file: str | Path,
    section: str = DEFAULT_SECTION,
    logger: logging.Logger | None = None,
) -> dict[str, str]:
    """
    Read one section of an INI config file.

    Parameters
    ----------
    config_file : str or Path
        Path to the config file.
    section : str, optional
        Section name (default ``"analysis"``).
    logger : logging.Logger, optional
        Logger instance.

    Returns
    -------
    dict
        Raw option strings of the section.

    Raises
    ------
    ConfigError
        If the file cannot be read or lacks *section*.
    """
    _log = logger or logging.getLogger(__name__)

    parser = configparser.ConfigParser()
    if not parser.read(config_file):
        raise ConfigError('config_file', str(config_file), 'cannot be read')
    if not parser.has_section(section):
        raise ConfigError(
            'config_file', str(config_file), f"no [{section}] section"
        )
    _log.info('Using config %s [%s].', config_file, section)
    return dict(parser.items(section))


def load_config(
    config_file: str | Path,
    section: str = DEFAULT_SECTION,
    logger: logging.Logger | None = None,
) -> AnalysisConfig:
    """Read and validate an :class:`AnalysisConfig` from an INI file."""
    return AnalysisConfig.from_mapping(
        read_config_section(config_file, section, logger=logger)
    )


def _coerce(key: str, raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    value = raw.strip()

    if key in ('target_sample_interval', 'window_function', 'height_column'):
        return value.lower() if key == 'window_function' else value
    if key == 'detrend_linear':
        if value.lower() in _TRUE:
            return True
        if value.lower() in _FALSE:
            return False
        raise ConfigError(key, raw, 'expected a boolean')
    if key == 'constituents':
        return tuple(n for n in (p.strip() for p in value.split(',')) if n)

    try:
        return float(value)
    except ValueError:
        raise ConfigError(key, raw, 'expected a number') from None


def _require_positive(name: str, value: Any) -> None:
    try:
        positive = float(value) > 0
    except (TypeError, ValueError):
        positive = False
    if not positive:
        raise ConfigError(name, value, 'must be a positive number')

"""
Spectral peak detection and tidal constituent matching.

Finite records never put a constituent exactly on its canonical frequency:
the bin grid is ``1 / (N dt)`` apart and noise shifts the maximum.  Each
significant peak is therefore matched to the nearest reference constituent
within a tolerance band instead of by exact frequency.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from scipy.signal import find_peaks

from .constituents import Constituent, select_constituents
from .errors import ConfigError
from .spectrum import Spectrum

logger = logging.getLogger(__name__)

UNIDENTIFIED = 'unidentified'

# A noise-free synthetic record has a median amplitude at rounding level;
# the noise floor never drops below this fraction of the strongest bin.
_MIN_RELATIVE_FLOOR = 1e-6


@dataclass(frozen=True)
class ConstituentMatch:
    """A spectral peak and the constituent it was matched to, if any."""

    frequency: float
    amplitude: float
    phase: float
    constituent: Constituent | None = None
    delta: float | None = None
    """Detected minus canonical frequency, cycles per hour."""

    @property
    def name(self) -> str:
        return self.constituent.name if self.constituent else UNIDENTIFIED

    @property
    def is_identified(self) -> bool:
        return self.constituent is not None

    @property
    def period(self) -> float:
        """Detected period in hours."""
        return 1.0 / self.frequency


def noise_floor(spectrum: Spectrum) -> float:
    """Median bin amplitude, clamped away from zero for clean records."""
    amplitude = spectrum.amplitude
    return max(
        float(np.median(amplitude)),
        _MIN_RELATIVE_FLOOR * float(np.max(amplitude)),
    )


def find_spectral_peaks(
    spectrum: Spectrum,
    peak_threshold_factor: float = 10.0,
) -> np.ndarray:
    """
    Return the indices of local amplitude maxima above the noise threshold.

    Parameters
    ----------
    spectrum : Spectrum
        Spectrum to search.
    peak_threshold_factor : float, optional
        A peak must reach ``noise_floor(spectrum) * peak_threshold_factor``
        (default 10.0).

    Returns
    -------
    np.ndarray
        Bin indices in ascending frequency order.  The first and last bins
        are never reported as peaks.
    """
    if not peak_threshold_factor > 0:
        raise ConfigError(
            'peak_threshold_factor', peak_threshold_factor, 'must be positive'
        )
    threshold = noise_floor(spectrum) * peak_threshold_factor
    peaks, _ = find_peaks(spectrum.amplitude, height=threshold)
    return peaks


def nearest_constituent(
    frequency: float,
    constituents: Iterable[Constituent],
    tolerance: float,
) -> tuple[Constituent | None, float | None]:
    """
    Find the reference constituent closest to *frequency*.

    Ties on absolute frequency difference go to the lexicographically
    smaller name (e.g. ``2MK3`` before ``MO3``, which share a speed).

    Parameters
    ----------
    frequency : float
        Detected frequency in cycles per hour.
    constituents : iterable of Constituent
        Reference constituents.
    tolerance : float
        Largest accepted ``|frequency - constituent.frequency|``.

    Returns
    -------
    tuple
        ``(constituent, delta)``, or ``(None, None)`` when no constituent
        lies within *tolerance*.
    """
    candidates = [
        c for c in constituents if abs(frequency - c.frequency) <= tolerance
    ]
    if not candidates:
        return None, None
    best = min(
        candidates, key=lambda c: (abs(frequency - c.frequency), c.name)
    )
    return best, frequency - best.frequency


def match_constituents(
    spectrum: Spectrum,
    constituents: Iterable[str] | None = None,
    peak_threshold_factor: float = 10.0,
    frequency_tolerance: float | None = None,
    logger: logging.Logger | None = None,
) -> tuple[ConstituentMatch, ...]:
    """
    Match the significant spectral peaks against reference constituents.

    Parameters
    ----------
    spectrum : Spectrum
        Spectrum from
        :func:`~tide_spectrum.spectral_analysis.spectrum.compute_spectrum`.
    constituents : iterable of str, optional
        Constituent names to match against.  If ``None`` (default), the
        NOS standard 37 are used.
    peak_threshold_factor : float, optional
        Peak sensitivity relative to the median amplitude (default 10.0).
    frequency_tolerance : float, optional
        Matching band in cycles per hour.  If ``None`` (default), one
        frequency bin (``spectrum.resolution``).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    tuple of ConstituentMatch
        One entry per peak, in ascending frequency order.  Peaks without a
        constituent in tolerance have ``constituent=None``.

    Raises
    ------
    ConfigError
        If *peak_threshold_factor* or *frequency_tolerance* is not
        positive, or a constituent name is unknown.
    """
    _log = logger or logging.getLogger(__name__)

    tolerance = (
        spectrum.resolution if frequency_tolerance is None
        else frequency_tolerance
    )
    if not tolerance > 0:
        raise ConfigError(
            'frequency_tolerance', frequency_tolerance, 'must be positive'
        )
    try:
        reference = select_constituents(constituents)
    except KeyError as ex:
        raise ConfigError('constituents', constituents, ex.args[0]) from ex

    peaks = find_spectral_peaks(spectrum, peak_threshold_factor)

    matches = []
    for idx in peaks:
        frequency = float(spectrum.frequency[idx])
        constituent, delta = nearest_constituent(
            frequency, reference, tolerance
        )
        matches.append(ConstituentMatch(
            frequency=frequency,
            amplitude=float(spectrum.amplitude[idx]),
            phase=float(spectrum.phase[idx]),
            constituent=constituent,
            delta=delta,
        ))

    n_identified = sum(m.is_identified for m in matches)
    _log.info(
        'Matched %d of %d peaks to %d reference constituents '
        '(tolerance=%.6f cph, threshold factor=%.1f).',
        n_identified, len(matches), len(reference), tolerance,
        peak_threshold_factor,
    )
    return tuple(matches)

"""
Amplitude/phase spectrum of an equally-spaced water level series.

The transform is :func:`scipy.fft.rfft` of the (optionally windowed)
series.  Only the ``N // 2`` positive-frequency bins are kept, and
amplitudes are scaled by the window's coherent gain so that a sinusoid of
amplitude *A* lying on a bin reports amplitude *A*::

    A_k = 2 |X_k| / sum(w)        (Nyquist bin: |X_k| / sum(w))

Windowing trades frequency resolution for leakage suppression.  With the
rectangular window (``"none"``) two constituents two bins apart, such as
M2 and S2 in a 30-day record, stay separable; tapered windows such as
``"hann"`` widen the main lobe to four bins and will merge them.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy.fft import rfft, rfftfreq
from scipy.signal import get_window

from .constituents import M2_PERIOD_HOURS
from .errors import ConfigError, InsufficientDataError
from .series import WaterLevelSeries

logger = logging.getLogger(__name__)

WINDOW_FUNCTIONS: dict[str, str] = {
    'none': 'boxcar',
    'hann': 'hann',
    'hamming': 'hamming',
    'blackman': 'blackman',
    'bartlett': 'bartlett',
    'blackmanharris': 'blackmanharris',
    'flattop': 'flattop',
}
"""Accepted window names and the :func:`scipy.signal.get_window` name."""

MIN_SAMPLES = 4


@dataclass(frozen=True)
class Spectrum:
    """
    One-sided amplitude/phase spectrum.

    Attributes
    ----------
    frequency : np.ndarray
        Bin frequencies in cycles per hour, ``k / (N dt)`` for
        ``k = 1 .. N // 2``.
    amplitude : np.ndarray
        Window-corrected amplitude of each bin, in the units of the input.
    phase : np.ndarray
        Phase of each bin in degrees, relative to the first sample time.
    dt_hours : float
        Sample interval of the transformed series.
    n_samples : int
        Number of samples transformed.
    window : str
        Window function name.
    """

    frequency: np.ndarray
    amplitude: np.ndarray
    phase: np.ndarray
    dt_hours: float
    n_samples: int
    window: str = 'none'

    def __post_init__(self):
        for name in ('frequency', 'amplitude', 'phase'):
            values = np.array(getattr(self, name), dtype=float)
            values.flags.writeable = False
            object.__setattr__(self, name, values)

    def __len__(self) -> int:
        return len(self.frequency)

    @property
    def resolution(self) -> float:
        """Bin spacing in cycles per hour, ``1 / (N dt)``."""
        return 1.0 / (self.n_samples * self.dt_hours)

    @property
    def period(self) -> np.ndarray:
        """Bin periods in hours."""
        return 1.0 / self.frequency

    def nearest_bin(self, frequency: float) -> int:
        """Index of the bin closest to *frequency* (cycles per hour)."""
        return int(np.argmin(np.abs(self.frequency - frequency)))


def compute_spectrum(
    series: WaterLevelSeries,
    window: str = 'none',
    min_cycles: float = 2.0,
    reference_period_hours: float = M2_PERIOD_HOURS,
    logger: logging.Logger | None = None,
) -> Spectrum:
    """
    Compute the amplitude/phase spectrum of a uniform series.

    Parameters
    ----------
    series : WaterLevelSeries
        Equally-spaced, gap-free series, normally zero-mean (see
        :func:`~tide_spectrum.spectral_analysis.preprocessing.remove_trend`).
    window : str, optional
        Window function, one of :data:`WINDOW_FUNCTIONS` (default
        ``"none"``, the rectangular window).
    min_cycles : float, optional
        Minimum number of reference periods the record must span
        (default 2.0).
    reference_period_hours : float, optional
        Period of the dominant signal, in hours (default the M2 period,
        about 12.42 h).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    Spectrum

    Raises
    ------
    ValueError
        If *series* is not uniformly sampled or contains NaN values.
    ConfigError
        If *window* is unknown or *min_cycles* / *reference_period_hours*
        is not positive.
    InsufficientDataError
        If the record holds fewer samples than required to cover
        *min_cycles* reference periods (or fewer than 4 samples).
    """
    _log = logger or logging.getLogger(__name__)

    if window not in WINDOW_FUNCTIONS:
        raise ConfigError(
            'window_function', window,
            f"expected one of {', '.join(WINDOW_FUNCTIONS)}",
        )
    if not min_cycles > 0:
        raise ConfigError('min_cycles', min_cycles, 'must be positive')
    if not reference_period_hours > 0:
        raise ConfigError(
            'reference_period_hours', reference_period_hours,
            'must be positive',
        )
    if not series.is_uniform:
        raise ValueError(
            'Series must be resampled to an equal interval before the '
            'Fourier transform.'
        )
    if np.any(np.isnan(series.height)):
        raise ValueError('height must not contain NaN values for the FFT.')

    n = len(series)
    dt_hours = series.interval_hours
    required = max(
        MIN_SAMPLES,
        math.ceil(min_cycles * reference_period_hours / dt_hours),
    )
    if n < required:
        raise InsufficientDataError(
            f"Record of {n} samples ({n * dt_hours:.1f} h) is shorter than "
            f"the minimum {required} samples needed to span {min_cycles:g} "
            f"periods of {reference_period_hours:.2f} h.",
            n_samples=n,
            required=required,
        )

    taper = get_window(WINDOW_FUNCTIONS[window], n)
    coefficients = rfft(series.height * taper)[1:]
    frequency = rfftfreq(n, d=dt_hours)[1:]

    amplitude = 2.0 * np.abs(coefficients) / np.sum(taper)
    if n % 2 == 0:
        amplitude[-1] /= 2.0
    phase = np.degrees(np.angle(coefficients))

    spectrum = Spectrum(
        frequency=frequency,
        amplitude=amplitude,
        phase=phase,
        dt_hours=dt_hours,
        n_samples=n,
        window=window,
    )
    _log.info(
        "FFT: %d samples at %.4f h, window '%s', %d bins, resolution "
        '%.6f cph.',
        n, dt_hours, window, len(spectrum), spectrum.resolution,
    )
    return spectrum

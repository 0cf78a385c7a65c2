"""
Exception types raised by the spectral analysis pipeline.

Every error derives from :class:`SpectralAnalysisError`, which is itself a
:class:`ValueError`, and carries the offending context (line number, gap
location, required record length, or option name) as attributes.
"""
from __future__ import annotations

import pandas as pd


class SpectralAnalysisError(ValueError):
    """Base class for all pipeline errors."""


class ParseError(SpectralAnalysisError):
    """Malformed or non-monotonic water level input."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class GapTooLargeError(SpectralAnalysisError):
    """A gap between consecutive samples exceeds the interpolation ceiling."""

    def __init__(
        self,
        gap_start: pd.Timestamp,
        gap_end: pd.Timestamp,
        max_gap_hours: float,
    ):
        self.gap_start = gap_start
        self.gap_end = gap_end
        self.max_gap_hours = max_gap_hours
        self.gap_hours = (gap_end - gap_start).total_seconds() / 3600.0
        super().__init__(
            f"Gap of {self.gap_hours:.1f} h between {gap_start} and "
            f"{gap_end} exceeds the maximum of {max_gap_hours} h that may "
            f"be interpolated."
        )


class InsufficientDataError(SpectralAnalysisError):
    """Record too short for a meaningful spectrum."""

    def __init__(
        self,
        message: str,
        n_samples: int | None = None,
        required: int | None = None,
    ):
        self.n_samples = n_samples
        self.required = required
        super().__init__(message)


class ConfigError(SpectralAnalysisError):
    """Invalid analysis option value."""

    def __init__(self, option: str, value: object, reason: str):
        self.option = option
        self.value = value
        super().__init__(f"Invalid {option}={value!r}: {reason}")

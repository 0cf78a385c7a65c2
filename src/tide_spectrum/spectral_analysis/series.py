"""Water level time series container passed between pipeline stages."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class WaterLevelSeries:
    """
    Ordered (timestamp, height) samples.

    Attributes
    ----------
    time : pd.DatetimeIndex
        Sample timestamps, strictly increasing.
    height : np.ndarray
        Water level at each timestamp (read-only).
    interval : pd.Timedelta, optional
        Uniform sample spacing, set once the series has been resampled.
    """

    time: pd.DatetimeIndex
    height: np.ndarray
    interval: pd.Timedelta | None = None

    def __post_init__(self):
        height = np.array(self.height, dtype=float)
        if len(self.time) != len(height):
            raise ValueError(
                f"time ({len(self.time)}) and height ({len(height)}) must "
                f"have the same length."
            )
        height.flags.writeable = False
        object.__setattr__(self, 'time', pd.DatetimeIndex(self.time))
        object.__setattr__(self, 'height', height)

    def __len__(self) -> int:
        return len(self.time)

    @property
    def is_uniform(self) -> bool:
        return self.interval is not None

    @property
    def interval_hours(self) -> float:
        """Sample spacing in hours; only defined for uniform series."""
        if self.interval is None:
            raise ValueError('Series is not uniformly sampled.')
        return self.interval.total_seconds() / 3600.0

    @property
    def duration_hours(self) -> float:
        if len(self.time) < 2:
            return 0.0
        return (self.time[-1] - self.time[0]).total_seconds() / 3600.0

    def to_series(self) -> pd.Series:
        return pd.Series(self.height, index=self.time, name='height')

"""
Reference table of tidal constituent frequencies.

Holds the 37 NOS standard tidal constituents (ordering of Appendix C of
NOAA Technical Report NOS CS 24, Zhang et al. 2006) with angular speeds
from Schureman (1958) Special Publication No. 98, and derives the cyclic
frequency and period of each one for matching against spectral peaks.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

# ---------------------------------------------------------------------------
# The 37 NOS standard tidal constituents, grouped by type.
# ---------------------------------------------------------------------------

# -- Semidiurnal (period ~ 12 h) --
_SEMIDIURNAL = (
    'M2', 'S2', 'N2', 'K2', '2N2', 'MU2', 'NU2', 'L2', 'T2', 'R2', 'LDA2',
)

# -- Diurnal (period ~ 24 h) --
_DIURNAL = (
    'K1', 'O1', 'P1', 'Q1', 'J1', 'M1', 'OO1', '2Q1', 'RHO1',
)

# -- Long-period (period > 1 day) --
_LONG_PERIOD = (
    'MF', 'MM', 'SSA', 'SA', 'MSM', 'MSF',
)

# -- Shallow-water / overtides --
_SHALLOW_WATER = (
    'M4', 'M6', 'M8', 'MS4', 'MN4', 'MK3', 'S4', 'S6', '2MK3', '2SM2', 'MO3',
)

NOS_37_CONSTITUENTS: tuple[str, ...] = (
    _SEMIDIURNAL + _DIURNAL + _LONG_PERIOD + _SHALLOW_WATER
)
"""Names of the 37 NOS standard tidal constituents in Appendix C order."""

# ---------------------------------------------------------------------------
# Constituent angular speeds in degrees per hour.
# Source: Schureman (1958) SP98, Table 2.
# ---------------------------------------------------------------------------

CONSTITUENT_SPEEDS: Mapping[str, float] = MappingProxyType({
    # Semidiurnal
    'M2':   28.9841042,
    'S2':   30.0000000,
    'N2':   28.4397295,
    'K2':   30.0821373,
    '2N2':  27.8953548,
    'MU2':  27.9682084,
    'NU2':  28.5125831,
    'L2':   29.5284789,
    'T2':   29.9589333,
    'R2':   30.0410667,
    'LDA2': 29.4556253,
    # Diurnal
    'K1':   15.0410686,
    'O1':   13.9430356,
    'P1':   14.9589314,
    'Q1':   13.3986609,
    'J1':   15.5854433,
    'M1':   14.4966939,
    'OO1':  16.1391017,
    '2Q1':  12.8542862,
    'RHO1': 13.4715145,
    # Long-period
    'MF':    1.0980331,
    'MM':    0.5443747,
    'SSA':   0.0821373,
    'SA':    0.0410686,
    'MSM':   0.4715211,
    'MSF':   1.0158958,
    # Shallow-water / overtides
    'M4':   57.9682084,
    'M6':   86.9523127,
    'M8':  115.9364169,
    'MS4':  58.9841042,
    'MN4':  57.4238337,
    'MK3':  44.0251729,
    'S4':   60.0000000,
    'S6':   90.0000000,
    '2MK3': 42.9271398,
    '2SM2': 31.0158958,
    'MO3':  42.9271398,
})
"""Angular speeds (degrees/hour) for the 37 NOS standard constituents."""

# Alternate spellings seen in CO-OPS products, mapped to the names above.
CONSTITUENT_ALIASES: Mapping[str, str] = MappingProxyType({
    'LAM2': 'LDA2',
    'RHO': 'RHO1',
})


@dataclass(frozen=True)
class Constituent:
    """A named tidal constituent and its canonical frequency."""

    name: str
    speed: float
    """Angular speed in degrees per hour."""

    @property
    def frequency(self) -> float:
        """Cyclic frequency in cycles per hour."""
        return self.speed / 360.0

    @property
    def period(self) -> float:
        """Period in hours."""
        return 360.0 / self.speed


CONSTITUENT_TABLE: tuple[Constituent, ...] = tuple(
    Constituent(name, CONSTITUENT_SPEEDS[name]) for name in NOS_37_CONSTITUENTS
)
"""Immutable reference table of the NOS standard 37 constituents."""

M2_PERIOD_HOURS = 360.0 / CONSTITUENT_SPEEDS['M2']


def normalize_constituent_name(name: str) -> str:
    """
    Normalize a constituent name to NOS convention.

    Parameters
    ----------
    name : str
        Constituent name, possibly in CO-OPS spelling or lower case.

    Returns
    -------
    str
        Normalized name.  Unrecognized names are returned stripped and
        uppercased.
    """
    cleaned = name.strip().upper()
    return CONSTITUENT_ALIASES.get(cleaned, cleaned)


def select_constituents(
    names: Iterable[str] | None = None,
) -> tuple[Constituent, ...]:
    """
    Return the reference constituents for *names*, in table order.

    Parameters
    ----------
    names : iterable of str, optional
        Constituent names to keep.  ``None`` (default) returns the full
        NOS 37 table.

    Returns
    -------
    tuple of Constituent

    Raises
    ------
    KeyError
        If a name is not one of the NOS 37 constituents.
    """
    if names is None:
        return CONSTITUENT_TABLE

    wanted = {normalize_constituent_name(n) for n in names}
    unknown = sorted(wanted - set(NOS_37_CONSTITUENTS))
    if unknown:
        raise KeyError(f"Unknown tidal constituents: {', '.join(unknown)}")
    return tuple(c for c in CONSTITUENT_TABLE if c.name in wanted)

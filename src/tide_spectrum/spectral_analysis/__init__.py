"""
Spectral Analysis Subpackage

Provides functionality for:
- Loading NOAA CO-OPS water level exports
- Preprocessing (equal-interval resampling with a gap ceiling, detrending)
- Windowed FFT amplitude/phase spectra
- NOS standard 37 tidal constituent definitions
- Matching spectral peaks to tidal constituents
- Report tables, text summaries, and CSV output
"""

from tide_spectrum.spectral_analysis.config import (
    AnalysisConfig,
    load_config,
    read_config_section,
)
from tide_spectrum.spectral_analysis.constituents import (
    CONSTITUENT_SPEEDS,
    CONSTITUENT_TABLE,
    NOS_37_CONSTITUENTS,
    Constituent,
    normalize_constituent_name,
    select_constituents,
)
from tide_spectrum.spectral_analysis.errors import (
    ConfigError,
    GapTooLargeError,
    InsufficientDataError,
    ParseError,
    SpectralAnalysisError,
)
from tide_spectrum.spectral_analysis.loader import (
    parse_water_levels,
    read_water_levels,
)
from tide_spectrum.spectral_analysis.matching import (
    ConstituentMatch,
    find_spectral_peaks,
    match_constituents,
)
from tide_spectrum.spectral_analysis.pipeline import (
    analyze_series,
    analyze_water_levels,
)
from tide_spectrum.spectral_analysis.preprocessing import (
    remove_trend,
    to_equal_interval,
)
from tide_spectrum.spectral_analysis.report import (
    format_report,
    matches_to_frame,
    spectrum_to_frame,
    write_report_csv,
    write_spectrum_csv,
)
from tide_spectrum.spectral_analysis.series import WaterLevelSeries
from tide_spectrum.spectral_analysis.spectrum import (
    WINDOW_FUNCTIONS,
    Spectrum,
    compute_spectrum,
)

__all__ = [
    # Constituent definitions
    'NOS_37_CONSTITUENTS',
    'CONSTITUENT_SPEEDS',
    'CONSTITUENT_TABLE',
    'Constituent',
    'normalize_constituent_name',
    'select_constituents',
    # Errors
    'SpectralAnalysisError',
    'ParseError',
    'GapTooLargeError',
    'InsufficientDataError',
    'ConfigError',
    # Configuration
    'AnalysisConfig',
    'load_config',
    'read_config_section',
    # Loading
    'WaterLevelSeries',
    'read_water_levels',
    'parse_water_levels',
    # Preprocessing
    'to_equal_interval',
    'remove_trend',
    # Spectrum
    'WINDOW_FUNCTIONS',
    'Spectrum',
    'compute_spectrum',
    # Matching
    'ConstituentMatch',
    'find_spectral_peaks',
    'match_constituents',
    # Reporting
    'format_report',
    'matches_to_frame',
    'spectrum_to_frame',
    'write_report_csv',
    'write_spectrum_csv',
    # Pipeline
    'analyze_series',
    'analyze_water_levels',
]

"""Fourier analysis of tide-gauge records and tidal constituent matching."""

__version__ = '0.1.0'

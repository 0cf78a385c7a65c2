"""
Command-line entry point: spectrum and constituent report for one station
export.

    tide-spectrum 8454000_202401.csv -w hann -o report.csv
"""
from __future__ import annotations

import argparse
import logging
import logging.config
import sys
from pathlib import Path

from tide_spectrum.spectral_analysis import (
    AnalysisConfig,
    SpectralAnalysisError,
    WINDOW_FUNCTIONS,
    analyze_water_levels,
    format_report,
    load_config,
    write_report_csv,
    write_spectrum_csv,
)

DEFAULT_LOG_CONFIG = (
    Path(__file__).resolve().parents[2] / 'conf' / 'logging.conf'
)


def _setup_logger(log_config_file=None):
    """Configure logging from a fileConfig file, else a basic stderr setup."""
    log_config_file = Path(log_config_file or DEFAULT_LOG_CONFIG)
    if log_config_file.is_file():
        logging.config.fileConfig(
            str(log_config_file), disable_existing_loggers=False
        )
    else:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        )
    logger = logging.getLogger('tide_spectrum')
    logger.info('Using log config %s', log_config_file)
    return logger


def build_parser():
    parser = argparse.ArgumentParser(
        prog='tide-spectrum',
        description='Fourier spectrum of a NOAA CO-OPS water level export, '
                    'with peaks matched to tidal constituents.',
    )
    parser.add_argument('input', help='CO-OPS water level CSV export')
    parser.add_argument(
        '-c', '--config', help='INI config file ([analysis] section)'
    )
    parser.add_argument(
        '-i', '--interval', help="Resampling interval, e.g. '1h', '6min'"
    )
    parser.add_argument(
        '-g', '--max-gap-hours', type=float,
        help='Longest gap to interpolate',
    )
    parser.add_argument(
        '-w', '--window', choices=sorted(WINDOW_FUNCTIONS), help='FFT window'
    )
    parser.add_argument(
        '--detrend-linear', action='store_true', default=None,
        help='Remove a linear trend as well as the mean',
    )
    parser.add_argument(
        '-t', '--threshold', type=float, help='Peak threshold factor'
    )
    parser.add_argument(
        '--tolerance', type=float, help='Matching tolerance (cycles/hour)'
    )
    parser.add_argument(
        '--constituents', help='Comma-separated constituent subset'
    )
    parser.add_argument(
        '--height-column',
        help="Input column to analyse, e.g. 'Predicted (m)'",
    )
    parser.add_argument(
        '-s', '--station', default='', help='Station ID for report headers'
    )
    parser.add_argument(
        '-o', '--output', help='Write the report table to this CSV'
    )
    parser.add_argument(
        '--spectrum-output', help='Write the full spectrum to this CSV'
    )
    parser.add_argument('--log-config', help='logging.config file')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logger = _setup_logger(args.log_config)

    try:
        if args.config:
            config = load_config(args.config, logger=logger)
        else:
            config = AnalysisConfig()
        constituents = None
        if args.constituents:
            names = (p.strip() for p in args.constituents.split(','))
            constituents = tuple(n for n in names if n)
        config = config.updated(
            target_sample_interval=args.interval,
            max_gap_hours=args.max_gap_hours,
            window_function=args.window,
            detrend_linear=args.detrend_linear,
            peak_threshold_factor=args.threshold,
            frequency_tolerance=args.tolerance,
            constituents=constituents,
            height_column=args.height_column,
        )
        result = analyze_water_levels(args.input, config, logger=logger)
    except SpectralAnalysisError as ex:
        logger.error('Analysis of %s aborted: %s', args.input, ex)
        return 1
    except OSError as ex:
        logger.error('Cannot read %s: %s', args.input, ex)
        return 1

    title = f"Tidal constituents in {Path(args.input).name}"
    if args.station:
        title += f" (station {args.station})"
    sys.stdout.write(format_report(result['matches'], title=title))

    metadata = {
        'Input': args.input,
        'Window': config.window_function,
        'Interval': config.target_sample_interval,
    }
    try:
        if args.output:
            write_report_csv(
                result['matches'], args.output, station_id=args.station,
                metadata=metadata, logger=logger,
            )
        if args.spectrum_output:
            write_spectrum_csv(
                result['spectrum'], args.spectrum_output,
                station_id=args.station, metadata={'Input': args.input},
                logger=logger,
            )
    except OSError as ex:
        logger.error('Cannot write output: %s', ex)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

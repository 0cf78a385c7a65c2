"""
Tests for the tide-spectrum command-line entry point.
"""
import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def station_csv(tmp_path):
    """30 days of hourly M2 + S2 water levels in CO-OPS web export layout."""
    times = pd.date_range('2024-01-01', periods=720, freq='60min')
    hours = np.arange(720.0)
    heights = (
        1.0 * np.sin(2 * np.pi * hours / 12.42)
        + 0.3 * np.sin(2 * np.pi * hours / 12.0)
    )
    table = pd.DataFrame({
        'Date': times.strftime('%Y/%m/%d'),
        'Time (GMT)': times.strftime('%H:%M'),
        'Predicted (m)': np.round(heights, 4),
        'Verified (m)': np.round(heights, 4),
    })
    path = tmp_path / '8454000_202401.csv'
    table.to_csv(path, index=False)
    return path


@pytest.fixture
def no_log_config(tmp_path):
    return str(tmp_path / 'missing_logging.conf')


class TestCli:

    def test_report_to_stdout(self, station_csv, no_log_config, capsys):
        from tide_spectrum.cli import main

        rc = main([str(station_csv), '-s', '8454000', '--log-config', no_log_config])

        assert rc == 0
        out = capsys.readouterr().out
        lines = out.splitlines()
        assert lines[0] == 'Tidal constituents in 8454000_202401.csv (station 8454000)'
        assert lines[3].split()[:2] == ['1', 'M2']
        assert lines[4].split()[:2] == ['2', 'S2']

    def test_csv_outputs(self, station_csv, no_log_config, tmp_path):
        from tide_spectrum.cli import main

        report = tmp_path / 'report.csv'
        spectrum = tmp_path / 'spectrum.csv'
        rc = main([
            str(station_csv), '-o', str(report),
            '--spectrum-output', str(spectrum), '--log-config', no_log_config,
        ])

        assert rc == 0
        table = pd.read_csv(report, comment='#')
        assert list(table['Constituent'][:2]) == ['M2', 'S2']
        assert '# Window: none' in report.read_text()
        assert len(pd.read_csv(spectrum, comment='#')) == 360

    def test_options_override_config_file(self, station_csv, no_log_config, tmp_path):
        from tide_spectrum.cli import main

        conf = tmp_path / 'tide.conf'
        conf.write_text('[analysis]\nwindow_function = hann\nconstituents = K1, O1\n')
        report = tmp_path / 'report.csv'

        rc = main([
            str(station_csv), '-c', str(conf), '-w', 'none',
            '--constituents', 'M2,S2', '-o', str(report),
            '--log-config', no_log_config,
        ])

        assert rc == 0
        text = report.read_text()
        assert '# Window: none' in text
        assert list(pd.read_csv(report, comment='#')['Constituent'][:2]) == ['M2', 'S2']

    def test_gap_returns_error(self, station_csv, no_log_config, tmp_path, caplog):
        from tide_spectrum.cli import main

        table = pd.read_csv(station_csv)
        gapped = tmp_path / 'gapped.csv'
        table.drop(index=range(200, 300)).to_csv(gapped, index=False)

        rc = main([str(gapped), '-g', '48', '--log-config', no_log_config])

        assert rc == 1
        assert 'exceeds the maximum' in caplog.text

    def test_parse_error_returns_error(self, tmp_path, no_log_config, caplog):
        from tide_spectrum.cli import main

        bad = tmp_path / 'bad.csv'
        bad.write_text('Date,Time (GMT),Verified (m)\n2024/01/01,00:00,abc\n')

        assert main([str(bad), '--log-config', no_log_config]) == 1
        assert 'line 2' in caplog.text

    def test_unwritable_output_returns_error(
        self, station_csv, no_log_config, tmp_path, caplog,
    ):
        from tide_spectrum.cli import main

        target = tmp_path / 'reports'
        target.mkdir()

        rc = main([
            str(station_csv), '-o', str(target), '--log-config', no_log_config,
        ])

        assert rc == 1
        assert 'Cannot write output' in caplog.text

    def test_unwritable_spectrum_output_returns_error(
        self, station_csv, no_log_config, tmp_path,
    ):
        from tide_spectrum.cli import main

        rc = main([
            str(station_csv), '--spectrum-output', str(tmp_path),
            '--log-config', no_log_config,
        ])
        assert rc == 1

    def test_missing_file_returns_error(self, tmp_path, no_log_config):
        from tide_spectrum.cli import main

        assert main([str(tmp_path / 'nope.csv'), '--log-config', no_log_config]) == 1

    def test_invalid_config_value_returns_error(self, station_csv, no_log_config):
        from tide_spectrum.cli import main

        rc = main([str(station_csv), '-i', 'soon', '--log-config', no_log_config])
        assert rc == 1

    def test_unknown_window_rejected_by_parser(self, station_csv):
        from tide_spectrum.cli import main

        with pytest.raises(SystemExit):
            main([str(station_csv), '-w', 'kaiser'])

import io
import json
import sys
import warnings
from optparse import Values

import pytest

from conftest import obsfile_lines
from rinexobs import __ver__
from rinexobs.diff import ALLSYS
from rinexobs.readfile import run, main


def options(**kw):
    opts = dict(satsys=ALLSYS, snr=False, header=False, json=False, verbose=False)
    opts.update(kw)
    return Values(opts)


def output(cmd, args, **kw):
    out = io.StringIO()
    status = run(cmd, [str(arg) for arg in args], options(**kw), out)
    return status, out.getvalue()


@pytest.fixture
def other_path(tmp_path):
    path = tmp_path / 'BRUX00BEL_S_20183101900_01H_30S_MO.rnx'
    path.write_text('\n'.join(obsfile_lines(base=0.01)) + '\n')
    return path


@pytest.fixture
def argv(monkeypatch):
    def set_args(*args):
        monkeypatch.setattr(sys, 'argv', ['rinexobs'] + [str(arg) for arg in args])
    with warnings.catch_warnings():
        yield set_args


def test_stat(rinex_path):
    status, text = output('stat', [rinex_path])
    assert status == 0
    assert text == str(rinex_path) + (': 3 epochs, from 2018-11-06T19:00:00.000000 '
                                      'to 2018-11-06T19:01:00.000000, sampling 30 s\n')


def test_stat_json(rinex_path):
    status, text = output('stat', [rinex_path], json=True)
    stat = json.loads(text)
    assert stat['numEpochs'] == 3
    assert stat['sampling'] == 30.
    assert stat['timeOfLastObs'] == '2018-11-06T19:01:00.000000'


def test_diff_same(rinex_path):
    status, text = output('diff', [rinex_path, rinex_path])
    assert status == 0
    assert text == '3 common epochs, 0 differences\n'


def test_diff_different(rinex_path, other_path):
    status, text = output('diff', [rinex_path, other_path], satsys='G')
    assert status == 1
    lines = text.splitlines()
    assert len(lines) == 13
    assert all(line.startswith('diff: 2018-11-06T19:0') for line in lines[:-1])
    assert lines[-1] == '3 common epochs, 12 differences'


def test_diff_needs_two_files(rinex_path):
    with pytest.raises(ValueError):
        output('diff', [rinex_path])


def test_print(rinex_path):
    status, text = output('print', [rinex_path])
    assert status == 0
    assert text.count('Flag: 0 #prn: 3') == 3
    assert 'L1X: val=127458123.789 lli=0 snr=8' in text


def test_print_table(rinex_path):
    status, text = output('print', [rinex_path], satsys='E')
    lines = text.splitlines()
    assert len(lines) == 3
    assert all(' E11 ' in line for line in lines)


def test_header(rinex_path):
    status, text = output('header', [rinex_path], verbose=True)
    assert 'marker BRUX' in text
    assert 'G C1C L1C D1C S1C; E C1X L1X' in text
    assert text.splitlines()[-1] == 'Test data for the decoder'


def test_rnx3name(tmp_path, rinex_path):
    path = tmp_path / 'brux3100.18o'
    path.write_text(rinex_path.read_text())
    status, text = output('rnx3name', [path, 'BEL'])
    assert text == 'BRUX00BEL_U_20183100000_01D_30S_MO.rnx\n'
    with pytest.raises(ValueError):
        output('rnx3name', [path])


def test_main_stat(argv, capsys, rinex_path):
    argv('stat', rinex_path)
    assert main() == 0
    assert '3 epochs' in capsys.readouterr().out


def test_main_version(argv, capsys):
    argv('-v')
    assert main() == 0
    assert __ver__ in capsys.readouterr().out


def test_main_needs_command(argv):
    argv('frobnicate', 'x.rnx')
    with pytest.raises(SystemExit):
        main()


def test_main_needs_file(argv):
    argv('stat')
    with pytest.raises(SystemExit):
        main()


def test_main_reports_errors(argv, capsys, tmp_path):
    path = tmp_path / 'BRUX00BEL_R_20183101900_01H_30S_MO.rnx'
    path.write_text('\n'.join(obsfile_lines()[:-1]) + '\n')
    argv('stat', path)
    assert main() == 2
    assert 'unexpected end of input' in capsys.readouterr().err


def test_main_missing_file(argv, capsys, tmp_path):
    argv('stat', tmp_path / 'BRUX00BEL_R_20183101900_01H_30S_MO.rnx')
    assert main() == 2
    assert capsys.readouterr().err


def test_main_diff_status(argv, capsys, rinex_path, other_path):
    argv('diff', '-s', 'E', '--snr', rinex_path, other_path)
    assert main() == 1
    assert '3 common epochs, 6 differences' in capsys.readouterr().out


@pytest.mark.parametrize('satsys', ['g', 'Gr'])
def test_print_table_any_case(rinex_path, satsys):
    status, text = output('print', [rinex_path], satsys=satsys)
    lines = text.splitlines()
    assert len(lines) == 6
    assert sum(' G05 ' in line for line in lines) == 3
    assert not any(' E11 ' in line for line in lines)


def test_main_print_lowercase_systems(argv, capsys, rinex_path):
    argv('print', '-s', 'e', rinex_path)
    assert main() == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert all(' E11 ' in line for line in lines)

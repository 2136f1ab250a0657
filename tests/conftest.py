"""
Builders for small RINEX 3 observation files used throughout the tests.

The fixed-column lines are produced by formatting, so that column positions
are always right.
"""

import io
from datetime import datetime, timedelta

import pytest

T0 = datetime(2018, 11, 6, 19, 0, 0)


def hline(value, label):
    return value.ljust(60) + label


def obsfield(val, lli=' ', snr=' '):
    """One observation: F14.3 value, LLI and SNR columns."""
    if val is None:
        return ' ' * 16
    return '%14.3f%s%s' % (val, lli, snr)


def satline(prn, *fields):
    return prn + ''.join(fields)


def epochline(time, numsat, flag=0, offset=None):
    line = '> %4d %02d %02d %02d %02d%11.7f  %d%3d' % (
        time.year, time.month, time.day, time.hour, time.minute,
        time.second + time.microsecond / 1e6, flag, numsat)
    if offset is not None:
        line += '      %15.12f' % offset
    return line


def timeline(time, label):
    return hline('%6d%6d%6d%6d%6d%13.7f     GPS' % (
        time.year, time.month, time.day, time.hour, time.minute,
        time.second + time.microsecond / 1e6), label)


GPSTYPES = ('C1C', 'L1C', 'D1C', 'S1C')
GALTYPES = ('C1X', 'L1X')


def header_lines(first=T0, last=T0 + timedelta(seconds=60), interval='    30.000'):
    return [
        hline('     3.04           OBSERVATION DATA    M (MIXED)', 'RINEX VERSION / TYPE'),
        hline('sbf2rin-13.4.5      BKG                 20181106 200225 UTC', 'PGM / RUN BY / DATE'),
        hline('Test data for the decoder', 'COMMENT'),
        hline('BRUX', 'MARKER NAME'),
        hline('13101M010', 'MARKER NUMBER'),
        hline('                    GEODETIC', 'MARKER TYPE'),
        hline('Operator            ROB', 'OBSERVER / AGENCY'),
        hline('3001376             SEPT POLARX4TR      2.9.6', 'REC # / TYPE / VERS'),
        hline('726                 JAVRINGANT_DM   NONE', 'ANT # / TYPE'),
        hline('  4027881.8478   306998.2610  4919498.6554', 'APPROX POSITION XYZ'),
        hline('        0.4689        0.0000        0.0010', 'ANTENNA: DELTA H/E/N'),
        hline('G    4 ' + ' '.join(GPSTYPES), 'SYS / # / OBS TYPES'),
        hline('E    2 ' + ' '.join(GALTYPES), 'SYS / # / OBS TYPES'),
        hline('DBHZ', 'SIGNAL STRENGTH UNIT'),
        hline(interval, 'INTERVAL'),
        timeline(first, 'TIME OF FIRST OBS'),
        timeline(last, 'TIME OF LAST OBS'),
        hline('    18', 'LEAP SECONDS'),
        hline('     3', '# OF SATELLITES'),
        hline('', 'END OF HEADER'),
    ]


def gps_sat(prn, base=0.):
    return satline(prn, obsfield(22345678.123 + base, ' ', '7'),
                   obsfield(117458123.456 + base, '0', '7'),
                   obsfield(-1234.567), obsfield(45.25))


def gal_sat(prn, base=0.):
    return satline(prn, obsfield(24345678.321 + base), obsfield(127458123.789 + base, ' ', '8'))


def epoch_lines(time, base=0., prns=('G05', 'G12', 'E11')):
    lines = [epochline(time, len(prns))]
    for prn in prns:
        if prn.startswith('E'):
            lines.append(gal_sat(prn, base))
        else:
            lines.append(gps_sat(prn, base))
    return lines


def obsfile_lines(times=None, base=0.):
    if times is None:
        times = [T0 + timedelta(seconds=30 * k) for k in range(3)]
    lines = header_lines(times[0], times[-1])
    for time in times:
        lines += epoch_lines(time, base)
    return lines


def stream(lines):
    return io.StringIO('\n'.join(lines) + '\n')


@pytest.fixture
def rinex_text():
    return '\n'.join(obsfile_lines()) + '\n'


@pytest.fixture
def rinex_stream(rinex_text):
    return io.StringIO(rinex_text)


@pytest.fixture
def rinex_path(tmp_path, rinex_text):
    path = tmp_path / 'BRUX00BEL_R_20183101900_01H_30S_MO.rnx'
    path.write_text(rinex_text)
    return path

'''
Standard RINEX file names.

RINEX 2 short names:  ssssdddf.yyt      e.g. brux3100.18o, brux310t00.18d.Z
RINEX 3 long names:   SSSSMRCCC_S_YYYYDDDHHMM_PPP_FFF_TT.FMT[.gz]
                      e.g. BRUX00BEL_R_20183101900_01H_30S_MO.rnx

parse_filename() reads the parts of either kind into an RnxFil;
rnx3_filename() builds a long name from them.
'''

import re
from datetime import datetime, timedelta
from os import path

RNX2_PATTERN = re.compile(
    r'^(?P<station>[a-z0-9]{4})(?P<doy>\d{3})(?P<session>[a-x0])(?P<minute>\d{2})?'
    r'\.(?P<yy>\d{2})(?P<type>[odnmglhqfbs])(?:\.(?P<comp>Z|gz))?$', re.I)

RNX3_PATTERN = re.compile(
    r'^(?P<station>[A-Z0-9]{4})(?P<monument>\d)(?P<receiver>\d)(?P<country>[A-Z]{3})'
    r'_(?P<source>[RSU])_(?P<year>\d{4})(?P<doy>\d{3})(?P<hour>\d{2})(?P<minute>\d{2})'
    r'_(?P<period>\d{2}[MHDYU])(?:_(?P<freq>\d{2}[CZSMHDU]))?'
    r'_(?P<datatype>[GRECJISM][OMN])\.(?P<format>rnx|crx)(?:\.(?P<comp>gz))?$')

RNX3_LENGTH = 38   # without compression extension


class RnxFil(object):
    '''The parts of a standard RINEX file name.'''
    def __init__(self, filepath=''):
        self.path = filepath
        self.rinex_version = None  # 2 or 3, as far as the name tells
        self.four_char_id = ''
        self.monument_number = 0
        self.receiver_number = 0
        self.country_code = ''
        self.data_source = ''
        self.start_time = None
        self.file_period = ''
        self.data_freq = ''
        self.data_type = ''
        self.format = 'rnx'        # rnx or crx (Hatanaka compressed)
        self.compression = ''      # '', gz or Z

    def __repr__(self):
        return '<RnxFil %s>' % path.basename(self.path)


def session_hour(session):
    '''RINEX 2 session letters a-x are hours 0-23; 0 is a daily file.'''
    session = session.lower()
    if session == '0':
        return 0
    return ord(session) - ord('a')


def parse_filename(filepath, fil=None):
    '''Parse a RINEX 2 or RINEX 3 file name into an RnxFil (or update `fil').

    Raises ValueError for names following neither convention.
    '''
    if fil is None:
        fil = RnxFil(filepath)
    name = path.basename(filepath)
    match = RNX3_PATTERN.match(name)
    if match:
        fil.rinex_version = 3
        fil.four_char_id = match.group('station')
        fil.monument_number = int(match.group('monument'))
        fil.receiver_number = int(match.group('receiver'))
        fil.country_code = match.group('country')
        fil.data_source = match.group('source')
        fil.start_time = (datetime(int(match.group('year')), 1, 1,
                                   int(match.group('hour')), int(match.group('minute')))
                          + timedelta(days=int(match.group('doy')) - 1))
        fil.file_period = match.group('period')
        fil.data_freq = match.group('freq') or ''
        fil.data_type = match.group('datatype')
        fil.format = match.group('format')
        fil.compression = match.group('comp') or ''
        return fil
    match = RNX2_PATTERN.match(name)
    if match:
        fil.rinex_version = 2
        fil.four_char_id = match.group('station').upper()
        year = int(match.group('yy'))
        year += 2000 if year < 80 else 1900
        session = match.group('session')
        minute = int(match.group('minute') or 0)
        fil.start_time = (datetime(year, 1, 1, session_hour(session), minute)
                          + timedelta(days=int(match.group('doy')) - 1))
        if session == '0':
            fil.file_period = '01D'
        elif match.group('minute'):
            fil.file_period = '15M'
        else:
            fil.file_period = '01H'
        typ = match.group('type').upper()
        fil.format = 'crx' if typ == 'D' else 'rnx'
        fil.data_type = 'MO' if typ in 'OD' else 'M' + typ
        fil.compression = match.group('comp') or ''
        return fil
    raise ValueError('file ' + name + ' with no standard RINEX name')


def rnx3_filename(fil):
    '''Return the RINEX 3 long file name (without compression extension).

    The country code and, for RINEX 2 input, the data source and frequency
    must come from elsewhere (e.g. the header).
    '''
    if len(fil.four_char_id) != 4:
        raise ValueError('FourCharID: ' + repr(fil.four_char_id))
    if len(fil.country_code) != 3:
        raise ValueError('CountryCode: ' + repr(fil.country_code))
    if fil.start_time is None:
        raise ValueError('StartTime missing')
    if not fil.file_period or not fil.data_freq:
        raise ValueError('FilePeriod and DataFreq needed')
    name = '%s%d%d%s_%s_%s_%s_%s_%s.%s' % (
        fil.four_char_id.upper(), fil.monument_number, fil.receiver_number,
        fil.country_code.upper(), fil.data_source or 'U',
        fil.start_time.strftime('%Y%j%H%M'), fil.file_period, fil.data_freq,
        fil.data_type, 'crx' if fil.format == 'crx' else 'rnx')
    if len(name) != RNX3_LENGTH:
        raise ValueError('invalid filename: ' + name)
    return name


def data_freq(interval):
    '''The FFF part of a long name for a sampling interval in seconds.'''
    if interval >= 60:
        return '%02dM' % (interval // 60)
    if interval >= 1:
        return '%02dS' % interval
    return '%02dZ' % round(1 / interval)


def compressed_name(filepath):
    '''Name of the Hatanaka-compressed version of a RINEX observation file.'''
    dirname, name = path.split(filepath)
    if RNX3_PATTERN.match(name) and name.endswith('.rnx'):
        return path.join(dirname, name[:-4] + '.crx')
    match = RNX2_PATTERN.match(name)
    if match and match.group('type') in 'oO' and not match.group('comp'):
        return path.join(dirname, name[:-1] + ('d' if name[-1] == 'o' else 'D'))
    raise ValueError('cannot build compressed filename for ' + name)


def uncompressed_name(filepath):
    '''Name of the standard RINEX version of a Hatanaka-compressed file.'''
    dirname, name = path.split(filepath)
    if RNX3_PATTERN.match(name) and name.endswith('.crx'):
        return path.join(dirname, name[:-4] + '.rnx')
    match = RNX2_PATTERN.match(name)
    if match and match.group('type') in 'dD' and not match.group('comp'):
        return path.join(dirname, name[:-1] + ('o' if name[-1] == 'd' else 'O'))
    raise ValueError('cannot build uncompressed filename for ' + name)

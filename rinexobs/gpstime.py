'''
Times as written in RINEX 3 observation files.

RINEX writes epochs as year, month, day, hour, minute and seconds with
fractions, in the time system of the file: GPS time unless the header's
TIME OF FIRST OBS says otherwise (or the file is GLONASS-only, QZSS-only, ...).
Times are returned as naive datetime objects in that time system; nothing
here converts between time systems.

NB: Standard Python datetime objects are only precise to 1 microsecond;
RINEX seconds have seven decimals and are rounded.
'''

from datetime import datetime, timedelta

from .errors import FieldValueError

TIMESYS = {'GPS' : 'GPS time',
           'GLO' : 'UTC(SU)',
           'GAL' : 'Galileo System Time',
           'QZS' : 'QZSS time',
           'BDT' : 'BeiDou time',
           'IRN' : 'IRNSS System Time',
           'UTC' : 'UTC',
           'TAI' : 'TAI'}

# RINEX says the default for GPS, SBAS or mixed files is GPS time.
SYSTIME = {'G' : 'GPS',
           'R' : 'GLO',
           'E' : 'GAL',
           'J' : 'QZS',
           'C' : 'BDT',
           'I' : 'IRN',
           'S' : 'GPS',
           'M' : 'GPS'}


def parsetime(s):
    '''Parse a RINEX 3 time into a datetime.

    Works for both the header form (TIME OF FIRST OBS: six-column fields)
    and the epoch-line form ("2018 11 06 19 00  0.0000000"), since the fields
    are always separated by blanks.
    Raises FieldValueError if the text is not a valid time.
    '''
    fields = s.split()
    if len(fields) != 6:
        raise FieldValueError('cannot parse time from ' + repr(s))
    try:
        year, month, day, hour, minute = [int(f) for f in fields[:5]]
        usec = round(float(fields[5]) * 1000000)
        if not 0 <= usec < 61000000:
            raise ValueError('seconds out of range')
        return datetime(year, month, day, hour, minute) + timedelta(microseconds=usec)
    except ValueError as err:
        raise FieldValueError('cannot parse time from ' + repr(s) + ': ' + str(err)) from None


def timesys(tag, satsys='G'):
    '''The RINEX time system tag in effect: `tag' if given, else the default
    for the file's satellite system.'''
    tag = tag.strip().upper()
    if tag:
        return tag
    return SYSTIME.get(satsys, 'GPS')


def isoformat(dt):
    '''Format a time like RFC 3339 with fractional seconds, as used in reports.'''
    if dt is None:
        return '-'
    return dt.isoformat(timespec='microseconds')

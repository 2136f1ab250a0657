'''
Read the header of a RINEX 3 observation file.

Every header line has a value in columns 1-60 and a label from column 61 on;
the label says how the value is to be sliced.  parse_header(fid) consumes
lines up to END OF HEADER and returns an ObsHeader.

The layout of each label is described in the HEADERS table below by `field'
entries (attribute name, first column, column past the end, conversion),
except for SYS / # / OBS TYPES, whose continuation lines are handled
in the parsing loop itself by obstypes().
'''

from collections import namedtuple
from types import MappingProxyType
from warnings import warn

from .errors import RinexError, StructuralError, GrammarError, FieldValueError
from .errors import RinexWarning
from .gnss import lookup
from .gpstime import parsetime, timesys
from .utility import fileread

MAX_HEADER_LINES = 800
RNX_MAJOR = 3

OBSTYPES = 'SYS / # / OBS TYPES'
ENDLABEL = 'END OF HEADER'

Coord = namedtuple('Coord', 'x y z')
Coord.__doc__ = 'Geocentric (ECEF) coordinates in meters.'

CoordNEU = namedtuple('CoordNEU', 'n e up')
CoordNEU.__doc__ = 'North, East, Up eccentricity in meters.'


def strip(s):
    return s.strip()


def tofloat(s):
    try:
        return float(s.strip())
    except ValueError:
        raise FieldValueError('cannot parse number from ' + repr(s)) from None


def toint(s):
    try:
        return int(s.strip())
    except ValueError:
        raise FieldValueError('cannot parse integer from ' + repr(s)) from None


def tosystem(s):
    return lookup(s.strip())


def threefields(s):
    '''Three blank-separated fields, as strings.'''
    vals = s.split()
    if len(vals) != 3:
        raise GrammarError('expected three numbers, found ' + repr(s.strip()))
    return vals


def toxyz(x, y, z):
    return Coord(x, y, z)


def toneu(up, east, north):
    '''ANTENNA: DELTA H/E/N is height, east, north, in that order.'''
    return CoordNEU(north, east, up)


class field(object):
    '''
    Describes a value in a RINEX header: attribute name, position in the
    value part of the line, and how to interpret it.
    '''
    def __init__(self, name, start, stop, convert=strip):
        self.name = name
        self.start = start
        self.stop = stop
        self.convert = convert

    def read(self, value):
        return self.convert(value[self.start:self.stop])


class header(object):
    '''
    For each RINEX header label, this holds the list of fields
    which are defined in the associated line.
    This is for header values which should only occur once; when one is
    repeated, the later line replaces the earlier one, with a warning.
    '''
    def __init__(self, field_args, tolerant=False):
        self.mems = [field(*fargs) for fargs in field_args]
        self.tolerant = tolerant
        # tolerant: a value which doesn't parse leaves the default, with a warning

    def repeated(self, hdr, label, seen):
        if label in seen:
            hdr.warn('The header ' + label + ' was encountered multiple '
                     'times.  Old values clobbered.')
        seen.add(label)

    def read(self, hdr, value, label, seen):
        self.repeated(hdr, label, seen)
        for fld in self.mems:
            try:
                setattr(hdr, fld.name, fld.read(value))
            except FieldValueError as err:
                if not self.tolerant:
                    raise
                hdr.warn('Ignoring ' + label + ': ' + str(err))


class coordheader(header):
    '''
    Three numbers making up one vector, combined by `build'.

    The wrong number of fields is an error; a field which is not a number
    is taken as 0, with a warning.
    '''
    def __init__(self, name, build):
        header.__init__(self, ((name, 0, 60, threefields),))
        self.name = name
        self.build = build

    def read(self, hdr, value, label, seen):
        self.repeated(hdr, label, seen)
        nums = []
        for val in self.mems[0].read(value):
            try:
                nums.append(tofloat(val))
            except FieldValueError as err:
                hdr.warn('Using 0 in ' + label + ': ' + str(err))
                nums.append(0.)
        setattr(hdr, self.name, self.build(*nums))


class listheader(header):
    '''
    This class is for header values which may occur several times.

    Each instance of the header is considered valid, and is appended.
    '''
    def read(self, hdr, value, label, seen):
        for fld in self.mems:
            getattr(hdr, fld.name).append(fld.read(value))


HEADERS = {
    'RINEX VERSION / TYPE' : header((('rinex_version', 0, 20, tofloat),
                                     ('rinex_type', 20, 21),
                                     ('sat_system', 40, 41, tosystem))),
    'PGM / RUN BY / DATE' : header((('pgm', 0, 20),
                                    ('run_by', 20, 40),
                                    ('date', 40, 60))),
    'COMMENT' : listheader((('comments', 0, 60),)),
    'MARKER NAME' : header((('marker_name', 0, 60),)),
    # MARKER is a station, or receiving site.
    'MARKER NUMBER' : header((('marker_number', 0, 20),)),
    'MARKER TYPE' : header((('marker_type', 20, 40),)),
    'OBSERVER / AGENCY' : header((('observer', 0, 20),
                                  ('agency', 20, 60))),
    'REC # / TYPE / VERS' : header((('receiver_number', 0, 20),
                                    ('receiver_type', 20, 40),
                                    ('receiver_version', 40, 60))),
    'ANT # / TYPE' : header((('antenna_number', 0, 20),
                             ('antenna_type', 20, 40))),
    'APPROX POSITION XYZ' : coordheader('position', toxyz),
    # Position is in the ITRS (WGS84) frame.
    'ANTENNA: DELTA H/E/N' : coordheader('antenna_delta', toneu),
    'SIGNAL STRENGTH UNIT' : header((('signal_strength_unit', 0, 20),)),
    'INTERVAL' : header((('interval', 0, 60, tofloat),), tolerant=True),
    'TIME OF FIRST OBS' : header((('time_of_first_obs', 0, 43, parsetime),
                                  ('first_time_system', 48, 51))),
    'TIME OF LAST OBS' : header((('time_of_last_obs', 0, 43, parsetime),
                                 ('last_time_system', 48, 51))),
    'LEAP SECONDS' : header((('leap_seconds', 0, 6, toint),)),
    '# OF SATELLITES' : header((('num_satellites', 0, 6, toint),)),
}

LABELS = {label.replace(' ', '') : label
          for label in list(HEADERS) + [OBSTYPES, ENDLABEL]}


class ObsHeader(object):
    '''The header of a RINEX observation file.

    obs_types maps each SatSystem to the ordered tuple of observation codes
    which make up its data lines.  Once parse_header() returns, the header
    is not modified again.
    '''
    def __init__(self):
        self.rinex_version = 0.
        self.rinex_type = ''
        self.sat_system = None
        self.pgm = self.run_by = self.date = ''
        self.comments = []
        self.marker_name = self.marker_number = self.marker_type = ''
        self.observer = self.agency = ''
        self.receiver_number = self.receiver_type = self.receiver_version = ''
        self.antenna_number = self.antenna_type = ''
        self.position = Coord(0., 0., 0.)
        self.antenna_delta = CoordNEU(0., 0., 0.)
        self.obs_types = {}
        self.signal_strength_unit = ''
        self.interval = 0.
        self.time_of_first_obs = None
        self.time_of_last_obs = None
        self.first_time_system = self.last_time_system = ''
        self.time_system = 'GPS'
        self.leap_seconds = 0
        self.num_satellites = 0
        self.labels = []
        self.warnings = []

    def __str__(self):
        out = 'RINEX %.2f %s' % (self.rinex_version, self.rinex_type)
        if self.sat_system is not None:
            out += ' ' + str(self.sat_system)
        if self.marker_name:
            out += ', marker ' + self.marker_name
        out += ', observation types: '
        out += '; '.join(sys.abbr + ' ' + ' '.join(types)
                         for sys, types in self.obs_types.items())
        return out

    def warn(self, message):
        '''Record a non-fatal problem with the header, and warn about it.'''
        self.warnings.append(message)
        warn(message, RinexWarning, stacklevel=3)

    def freeze(self):
        '''Make the collections immutable, once the header is complete.'''
        self.obs_types = MappingProxyType({sys : tuple(types)
                                           for sys, types in self.obs_types.items()})
        self.comments = tuple(self.comments)
        self.labels = tuple(self.labels)
        self.warnings = tuple(self.warnings)

    def check(self, counts):
        '''Sanity checks after END OF HEADER; problems are only warned about.'''
        if not self.rinex_version:
            self.warn('No RINEX VERSION / TYPE header.')
        elif int(self.rinex_version) != RNX_MAJOR:
            self.warn('RINEX version %.2f is not supported; data records are '
                      'read as RINEX 3.' % self.rinex_version)
        if self.rinex_version and self.rinex_type.upper() != 'O':
            self.warn('RINEX file type ' + repr(self.rinex_type) +
                      ' is not observation data.')
        if not self.obs_types:
            self.warn('No SYS / # / OBS TYPES header; no observations can be read.')
        for sys, num in counts.items():
            if num != len(self.obs_types[sys]):
                self.warn('%s: %d observation types declared, %d listed.'
                          % (sys.abbr, num, len(self.obs_types[sys])))
        first = self.first_time_system.strip().upper()
        last = self.last_time_system.strip().upper()
        if first and last and first != last:
            self.warn('Time systems in TIME OF FIRST OBS and TIME OF LAST OBS '
                      'headers do not match.')
        satsys = self.sat_system.abbr if self.sat_system is not None else 'G'
        self.time_system = timesys(first or last, satsys)


def obstypes(value, current, types, counts):
    '''
    Parse one SYS / # / OBS TYPES line into `types' (and `counts').

    A blank system code continues the list of the system named on an earlier
    line, `current'.  If the count field is filled this line starts
    the list for its system, otherwise the codes are appended.
    Returns the system which a following continuation line would continue.
    '''
    code = value[0:1]
    if code.strip():
        sys = lookup(code)
    elif current is None:
        raise GrammarError('observation type continuation line without beginning')
    else:
        sys = current
    codes = value[7:].split()
    if value[3:6].strip():
        types[sys] = codes
        counts[sys] = toint(value[3:6])
    else:
        types.setdefault(sys, []).extend(codes)
    return sys


def parse_header(fid):
    '''Read header lines from fid up to END OF HEADER; return an ObsHeader.

    Raises StructuralError if there is no END OF HEADER (within
    MAX_HEADER_LINES lines), and GrammarError or FieldValueError for values
    which can't be read.  Unknown labels are only warned about.
    '''
    fid = fileread(fid)
    hdr = ObsHeader()
    current = None    # satellite system a continuation line refers to
    counts = {}
    seen = set()
    for line in fid:
        if fid.lineno > MAX_HEADER_LINES:
            raise StructuralError('header too long: line %d reached without '
                                  'finding END OF HEADER' % MAX_HEADER_LINES)
        if len(line) < 60:
            continue
        value = line[:60]
        label = line[60:].strip()
        if label not in HEADERS and label not in (OBSTYPES, ENDLABEL):
            lbl = LABELS.get(label.replace(' ', ''))
            if lbl is not None:
                hdr.warn('Label ' + label + ' recognized as ' + lbl +
                         ' despite incorrect whitespace.')
                label = lbl
        hdr.labels.append(label)
        if label == ENDLABEL:
            break
        try:
            if label == OBSTYPES:
                current = obstypes(value, current, hdr.obs_types, counts)
            elif label in HEADERS:
                HEADERS[label].read(hdr, value, label, seen)
            else:
                hdr.warn('Header line ' + label + ' unrecognized; ignoring')
        except RinexError as err:
            raise type(err)(label + ': ' + str(err), fid.lineno) from None
    else:
        raise StructuralError('no header: END OF HEADER not found', fid.lineno)
    hdr.check(counts)
    hdr.freeze()
    return hdr

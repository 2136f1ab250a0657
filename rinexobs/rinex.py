'''
Decode the data records of a RINEX 3 observation file, one epoch at a time.

Mostly you will use

    dec = ObsDecoder(fid)
    for epoch in dec:
        ...
    if dec.err is not None:
        ...   # the file is truncated or corrupt

where fid is an open file (or any object with readline(), or a sequence of
lines).  The header is read first, implicitly, and is available as
dec.header.  The decoder never opens or closes fid.

A decoder is a small state machine (see Phase).  Any fatal problem is
recorded as dec.err and ends the stream for good: later calls of
next_epoch() only report it again.  A clean end of input leaves dec.err None.
'''

from collections import namedtuple
from enum import Enum
from warnings import warn

from .errors import RinexError, GrammarError, FieldValueError, StreamError
from .errors import RinexWarning
from .gnss import lookup, newprn, toprn
from .gpstime import parsetime, isoformat
from .header import parse_header
from .utility import fileread, tofloat

RNX_VER = '3.04'
OBS_WIDTH = 14   # an observation value is F14.3, followed by LLI and SNR digits
EPOCH_MARK = '> '


class Phase(Enum):
    AWAITING_HEADER = 'awaiting header'
    STREAMING = 'streaming'
    EXHAUSTED = 'exhausted'
    FAILED = 'failed'


class Step(namedtuple('Step', 'phase epoch error')):
    '''The outcome of ObsDecoder.next_epoch().

    True while the stream goes on (epoch is the new epoch); false once the
    stream is exhausted, with error None at a clean end of input.
    '''
    __slots__ = ()

    def __bool__(self):
        return self.phase is Phase.STREAMING


Obs = namedtuple('Obs', 'val lli snr')
Obs.__new__.__defaults__ = (0., 0, 0)
Obs.__doc__ = '''A RINEX observation: value, loss of lock indicator, signal strength.

Blank fields are 0; a blank value can't be told from a recorded zero.'''

SatObs = namedtuple('SatObs', 'prn obs')
SatObs.__doc__ = '''Observations of one satellite in one epoch.

obs is a dictionary of observation code : Obs, in the order the codes are
declared in the header for the satellite's system.'''

EventRecord = namedtuple('EventRecord', 'time flag records')
EventRecord.__doc__ = '''A special event (epoch flag 2-5) and the header-style
records, as (label, value) pairs, which came with it.'''


class Epoch(object):
    """All observations (many satellites, many types) at a given time.

    Has fields time, flag (0: OK, 1: power failure since previous epoch,
    6: cycle slip records), num_sat, obs_list and clock_offset.
    Satellites can be accessed as epoch[prn], epoch['G17'] or by iteration.
    """
    def __init__(self, time, flag=0, num_sat=0, obs_list=None, clock_offset=None):
        self.time = time
        self.flag = flag
        self.num_sat = num_sat
        self.obs_list = [] if obs_list is None else obs_list
        self.clock_offset = clock_offset

    def __repr__(self):
        return '<Epoch %s flag %d, %d satellites>' % (isoformat(self.time),
                                                     self.flag, self.num_sat)

    def __len__(self):
        return len(self.obs_list)

    def __iter__(self):
        return iter(self.obs_list)

    def get(self, prn, default=None):
        '''The SatObs for satellite prn (a PRN or a string like G05), if present.'''
        if isinstance(prn, str):
            prn = toprn(prn)
        for satobs in self.obs_list:
            if satobs.prn == prn:
                return satobs
        return default

    def __getitem__(self, prn):
        satobs = self.get(prn)
        if satobs is None:
            raise KeyError(str(prn))
        return satobs

    def __contains__(self, prn):
        return self.get(prn) is not None

    def prns(self):
        return [satobs.prn for satobs in self.obs_list]

    def format(self):
        '''Multi-line listing of all observations.'''
        lines = ['%s Flag: %d #prn: %d' % (isoformat(self.time), self.flag,
                                            self.num_sat)]
        for satobs in self.obs_list:
            lines.append('%s %s' % (satobs.prn, '-' * 37))
            for typ, obs in satobs.obs.items():
                lines.append('%s: val=%.3f lli=%d snr=%d' % (typ, obs.val,
                                                             obs.lli, obs.snr))
        return '\n'.join(lines)

    def format_tab(self, satsys=None):
        '''One line per satellite (of the systems in satsys, e.g. "GRE").'''
        lines = []
        for satobs in self.obs_list:
            if satsys and satobs.prn.sys.abbr not in satsys:
                continue
            vals = ' '.join('%14.3f' % obs.val for obs in satobs.obs.values())
            lines.append('%s %s %s' % (isoformat(self.time), satobs.prn, vals))
        return '\n'.join(lines)


def parseflag(s, what):
    '''LLI and SNR are single digits; blank is 0.'''
    if s == ' ':
        return 0
    if not s.isdigit():
        raise FieldValueError('bad ' + what + ' flag ' + repr(s))
    return int(s)


def parseobs(line, types):
    '''
    Read the observations of a satellite line, following `types', the codes
    declared for the satellite's system.  Each is a 14 column value, then
    the one column LLI and SNR flags.

    Trailing blanks may be cut off the line, so a line may end before all
    types are read; the remaining types are then missing.  A line which ends
    inside a value is an error.
    '''
    obs = {}
    col = 3
    for typ in types:
        if col >= len(line):
            break
        if col + OBS_WIDTH > len(line):
            raise GrammarError('observation ' + typ + ' out of range')
        try:
            val = tofloat(line[col:col + OBS_WIDTH])
        except ValueError:
            raise FieldValueError('cannot parse the ' + typ + ' observation '
                                  + repr(line[col:col + OBS_WIDTH])) from None
        col += OBS_WIDTH
        lli = snr = 0
        if col < len(line):
            lli = parseflag(line[col], typ + ' LLI')
        col += 1
        if col < len(line):
            snr = parseflag(line[col], typ + ' SNR')
        col += 1
        obs[typ] = Obs(val, lli, snr)
    return obs


class ObsDecoder(object):
    '''
    Reads and decodes header and data records from a RINEX observation stream.

    The header must exist; without one the decoder fails with a
    StructuralError before producing any epoch.
    '''
    def __init__(self, fid):
        self.fid = fileread(fid)
        self.phase = Phase.AWAITING_HEADER
        self._header = None
        self.epoch = None
        """The most recent epoch produced."""
        self.last_event = None
        """The most recent special event record (epoch flags 2-5), if any."""
        self.err = None
        """The first fatal error encountered; None at a clean end of input."""

    def __iter__(self):
        while self.next_epoch():
            yield self.epoch

    @property
    def lineno(self):
        return self.fid.lineno

    @property
    def header(self):
        return self.read_header()

    def read_header(self):
        '''Parse the header, if not done already, and return it.

        A header which cannot be parsed ends the stream; the error is raised
        here, and on every later call.
        '''
        if self.phase is Phase.AWAITING_HEADER:
            try:
                self._header = parse_header(self.fid)
            except RinexError as err:
                self._fail(err)
            except (OSError, UnicodeError) as err:
                self._fail(StreamError('reading header failed: ' + str(err),
                                       self.lineno), err)
            else:
                self.phase = Phase.STREAMING
        if self._header is None:
            raise self.err
        return self._header

    def _fail(self, err, cause=None):
        '''Record the first fatal error; the stream is over.'''
        if cause is not None:
            err.__cause__ = cause
        if self.err is None:
            self.err = err
        self.phase = Phase.FAILED

    def set_error(self, err):
        '''Record an error found by someone driving this decoder (see sync.py).'''
        self._fail(err)

    def _step(self):
        epoch = self.epoch if self.phase is Phase.STREAMING else None
        return Step(self.phase, epoch, self.err)

    def next_epoch(self):
        '''Decode the next epoch.  Returns a Step, which is true on success.'''
        if self.phase is Phase.AWAITING_HEADER:
            try:
                self.read_header()
            except RinexError:
                return self._step()
        if self.phase is not Phase.STREAMING:
            return self._step()
        try:
            epoch = self._decode()
        except RinexError as err:
            self._fail(err)
        except (OSError, UnicodeError) as err:
            self._fail(StreamError('read error: ' + str(err), self.lineno), err)
        else:
            if epoch is None:
                self.phase = Phase.EXHAUSTED
            else:
                self.epoch = epoch
        return self._step()

    def _readline(self, what):
        try:
            return next(self.fid)
        except StopIteration:
            raise GrammarError('unexpected end of input reading ' + what,
                               self.lineno + 1) from None

    def _decode(self):
        '''Read lines until a whole observation epoch is decoded.

        Returns None at end of input.  Lines which are not epoch lines are
        skipped; special events are recorded and skipped.
        '''
        for line in self.fid:
            if not line.strip():
                continue
            if not line.startswith(EPOCH_MARK):
                warn('line %d: not an epoch line: %r' % (self.lineno, line),
                     RinexWarning, stacklevel=4)
                continue
            try:
                epoch = self._decode_epoch(line)
            except RinexError as err:
                if err.lineno is None:
                    raise type(err)(str(err), self.lineno) from None
                raise
            if epoch is not None:
                return epoch
        return None

    def _decode_epoch(self, line):
        #> 2018 11 06 19 00  0.0000000  0 31       0.000000000000
        if len(line) < 35:
            raise GrammarError('epoch line too short: ' + repr(line))
        try:
            flag = int(line[31:32])
            numsat = int(line[32:35])
        except ValueError:
            raise GrammarError('bad epoch flag or satellite count: '
                               + repr(line)) from None
        if 2 <= flag <= 5:
            self._event(line, flag, numsat)
            return None
        epoch = Epoch(parsetime(line[2:29]), flag, numsat)
        if line[41:56].strip():
            try:
                epoch.clock_offset = float(line[41:56])
            except ValueError:
                raise FieldValueError('bad receiver clock offset '
                                      + repr(line[41:56])) from None
        for _ in range(numsat):
            line = self._readline('satellite records')
            try:
                epoch.obs_list.append(self._decode_sat(line))
            except RinexError as err:
                raise type(err)(str(err), self.lineno) from None
        return epoch

    def _decode_sat(self, line):
        if len(line) < 3:
            raise GrammarError('satellite line too short: ' + repr(line))
        sys = lookup(line[0])
        try:
            num = int(line[1:3])
        except ValueError:
            raise GrammarError('parsing satellite number in ' + repr(line)) from None
        prn = newprn(sys, num)
        if not line[3:].strip():
            return SatObs(prn, {})
        types = self._header.obs_types.get(sys)
        if types is None:
            warn('No observation types declared for system ' + str(sys)
                 + '; ignoring observations of ' + str(prn), RinexWarning,
                 stacklevel=5)
            return SatObs(prn, {})
        return SatObs(prn, parseobs(line, types))

    def _event(self, line, flag, numrec):
        '''Consume the records of a special event epoch.

        The time may be blank for flags 2-4.
        '''
        time = parsetime(line[2:29]) if line[2:29].strip() else None
        records = []
        for _ in range(numrec):
            rec = self._readline('special event records')
            records.append((rec[60:].strip(), rec[:60].rstrip()))
        self.last_event = EventRecord(time, flag, records)
        warn('line %d: event flag %d with %d records skipped'
             % (self.lineno, flag, numrec), RinexWarning, stacklevel=5)


def open_decoder(fid):
    '''Create an ObsDecoder and read the header, raising if it is unusable.'''
    dec = ObsDecoder(fid)
    dec.read_header()
    return dec


def decode_all(fid):
    '''Read the whole of fid.  Returns (header, list of epochs);
    raises the decoder's error, if any.'''
    dec = open_decoder(fid)
    epochs = list(dec)
    if dec.err is not None:
        raise dec.err
    return dec.header, epochs

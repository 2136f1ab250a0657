'''
Compare the observations of two RINEX files epoch by epoch.

Differences are findings, not errors: diff_epochs() returns a list of
Discrepancy records, each of which prints as a one-line report.

Carrier phase (observation codes starting with L) is compared on the
fractional part of the cycles only, since the integer ambiguity of two
receivers (or two conversions of the same data) need not agree.
'''

import math
from collections import namedtuple

from .gpstime import isoformat
from .sync import Synchronizer

DELTA_PHASE = 0.005
ALLSYS = 'GRECJIS'

# Kinds of discrepancy
MISSING_PRN = 'missing prn'
MISSING_KEY = 'missing key'
OBS = 'obs'
SNR = 'snr'
HEADER = 'header'


class DiffOptions(object):
    '''Settings for file comparison.

    satsys: satellite systems to compare, as RINEX letters, e.g. "GRE"
    check_snr: also report differing signal strength indicators
    check_header: also compare the RINEX headers
    '''
    def __init__(self, satsys=ALLSYS, check_snr=False, check_header=False):
        self.satsys = satsys.upper()
        self.check_snr = check_snr
        self.check_header = check_header


class Discrepancy(namedtuple('Discrepancy', 'time prn typ kind obs1 obs2 message')):
    '''A difference found between two files.'''
    __slots__ = ()

    def __str__(self):
        if self.kind in (OBS, SNR):
            return '%s %s %s %s %14.03f %d %d | %14.03f %d %d' % (
                isoformat(self.time), self.prn, self.typ[:1], self.typ,
                self.obs1.val, self.obs1.lli, self.obs1.snr,
                self.obs2.val, self.obs2.lli, self.obs2.snr)
        return '%s %s' % (isoformat(self.time), self.message)


def fraction(x):
    '''Decimal part of x, with the sign of x: x - trunc(x).'''
    return math.modf(x)[0]


def diff_obs(satobs1, satobs2, time, opts):
    '''Compare all observation types of one satellite in two epochs.'''
    found = []
    prn = satobs1.prn
    for typ, o1 in satobs1.obs.items():
        o2 = satobs2.obs.get(typ)
        if o2 is None:
            found.append(Discrepancy(time, prn, typ, MISSING_KEY, o1, None,
                                     'Key %r does not exist for %s' % (typ, prn)))
            continue
        val1, val2 = o1.val, o2.val
        if typ.startswith('L'):   # phase observations
            val1, val2 = fraction(val1), fraction(val2)
        if o1.lli != o2.lli or abs(val1 - val2) > DELTA_PHASE:
            found.append(Discrepancy(time, prn, typ, OBS, o1._replace(val=val1),
                                     o2._replace(val=val2), None))
        elif opts.check_snr and o1.snr != o2.snr:
            found.append(Discrepancy(time, prn, typ, SNR, o1._replace(val=val1),
                                     o2._replace(val=val2), None))
    return found


def diff_epochs(syncepo, opts=None):
    '''Compare two epochs of the same time; return a list of Discrepancy.

    Only satellites of the systems in opts.satsys which are in the first
    epoch are looked at.
    '''
    if opts is None:
        opts = DiffOptions()
    epo1, epo2 = syncepo
    found = []
    for satobs in epo1.obs_list:
        if satobs.prn.sys.abbr not in opts.satsys:
            continue
        satobs2 = epo2.get(satobs.prn)
        if satobs2 is None:
            found.append(Discrepancy(epo1.time, satobs.prn, None, MISSING_PRN,
                                     None, None, 'No observations found for prn %s'
                                     % satobs.prn))
            continue
        found.extend(diff_obs(satobs, satobs2, epo1.time, opts))
    return found


HEADER_FIELDS = ('rinex_version', 'rinex_type', 'sat_system', 'marker_name',
                 'marker_number', 'marker_type', 'observer', 'agency',
                 'receiver_number', 'receiver_type', 'receiver_version',
                 'antenna_number', 'antenna_type', 'position', 'antenna_delta',
                 'signal_strength_unit', 'interval', 'time_of_first_obs',
                 'time_of_last_obs', 'time_system', 'leap_seconds',
                 'num_satellites')


def diff_headers(hdr1, hdr2):
    '''Compare the descriptive fields and observation type layouts of two headers.'''
    found = []
    for name in HEADER_FIELDS:
        val1, val2 = getattr(hdr1, name), getattr(hdr2, name)
        if val1 != val2:
            found.append(Discrepancy(None, None, None, HEADER, None, None,
                                     'header %s: %s | %s' % (name, val1, val2)))
    for sys in sorted(set(hdr1.obs_types).union(hdr2.obs_types),
                      key=lambda s: s.abbr):
        types1 = hdr1.obs_types.get(sys, ())
        types2 = hdr2.obs_types.get(sys, ())
        if types1 != types2:
            found.append(Discrepancy(None, None, None, HEADER, None, None,
                                     'header obs types %s: %s | %s'
                                     % (sys.abbr, ' '.join(types1), ' '.join(types2))))
    return found


def diff(dec, dec2, opts=None, report=None):
    '''
    Compare two decoders epoch by epoch.

    Returns (number of synchronized epochs, list of Discrepancy); each
    discrepancy is also passed to `report', if given, as soon as it is found.
    The error of either decoder is raised when the comparison ends.
    '''
    if opts is None:
        opts = DiffOptions()
    found = []

    def add(findings):
        for dis in findings:
            found.append(dis)
            if report is not None:
                report(dis)

    if opts.check_header:
        add(diff_headers(dec.header, dec2.header))
    nsync = 0
    for pair in Synchronizer(dec, dec2):
        nsync += 1
        add(diff_epochs(pair, opts))
    if dec.err is not None:
        raise dec.err
    return nsync, found

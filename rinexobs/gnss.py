'''
Satellite systems and satellite identifiers (PRNs) as written in RINEX files.

SYSTEMS maps the one-letter RINEX code to a SatSystem; it is read-only.
'''
from collections import namedtuple
from enum import Enum
from types import MappingProxyType

from .errors import GrammarError, UnknownSystemError

MAXPRN = 60


class SatSystem(Enum):
    '''A GNSS satellite system, valued by its RINEX abbreviation.'''
    GPS = 'G'
    GLONASS = 'R'
    GALILEO = 'E'
    QZSS = 'J'
    BEIDOU = 'C'
    IRNSS = 'I'
    SBAS = 'S'
    MIXED = 'M'

    @property
    def abbr(self):
        return self.value

    def __str__(self):
        return GNSSYS[self.value]


GNSSYS = {'G' : 'GPS',
          'R' : 'GLONASS',
          'E' : 'Galileo',
          'J' : 'QZSS',
          'C' : 'BeiDou',
          'I' : 'IRNSS',
          'S' : 'SBAS',
          'M' : 'Mixed'}

SYSTEMS = MappingProxyType({s.value : s for s in SatSystem})


def lookup(code):
    '''Return the SatSystem for the one-character RINEX code.

    Raises UnknownSystemError for anything else (including blank).
    '''
    try:
        return SYSTEMS[code]
    except (KeyError, TypeError):
        raise UnknownSystemError('unknown satellite system ' + repr(code)) from None


class PRN(namedtuple('PRN', 'sys num')):
    '''A satellite: system and number within the system, e.g. G05.'''
    __slots__ = ()

    def __str__(self):
        return '%s%02d' % (self.sys.abbr, self.num)


def newprn(sys, num):
    '''Create a PRN, checking the satellite number is in [1, MAXPRN].'''
    if sys is SatSystem.MIXED:
        raise GrammarError('satellite system M is not valid for a satellite')
    if not 1 <= num <= MAXPRN:
        raise GrammarError('check satellite number %s%02d' % (sys.abbr, num))
    return PRN(sys, num)


def toprn(s):
    '''Parse a satellite identifier like G05 or E 1 into a PRN.'''
    s = s.strip()
    if len(s) < 2:
        raise GrammarError('satellite identifier ' + repr(s) + ' too short')
    try:
        num = int(s[1:])
    except ValueError:
        raise GrammarError('bad satellite number in ' + repr(s)) from None
    return newprn(lookup(s[0]), num)

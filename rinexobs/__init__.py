'''
rinexobs Package: Decoding and comparison of RINEX 3 Observation files

The main thing provided is the class rinex.ObsDecoder, which reads the header
of a RINEX observation file and then decodes the data records one epoch at a
time, giving pseudoranges, phase, doppler and signal strength for every
satellite and observation type recorded by a receiver.

sync.Synchronizer walks two decoders in step, pairing epochs which share a
timestamp, and diff.diff_epochs() reports observations which disagree.
stats.collect() summarizes a whole file.

obsfile.ObsFile ties these to files on disk, including gzipped and
Hatanaka-compressed ones (the latter through the external CRX2RNX / RNX2CRX
programs), and filename handles the standard RINEX file names.

readfile.main() is a command-line front end.

'''

__ver__ = '0.6.0'

from .errors import (RinexError, StructuralError, GrammarError,
                     UnknownSystemError, FieldValueError, StreamError,
                     RinexWarning)
from .gnss import SatSystem, PRN, lookup, newprn
from .header import ObsHeader, parse_header
from .rinex import ObsDecoder, Epoch, SatObs, Obs, Phase, Step
from .sync import Synchronizer, SyncEpochs
from .diff import DiffOptions, Discrepancy, diff_epochs, diff_headers
from .stats import ObsStat, collect

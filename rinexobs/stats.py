"""Summary statistics of a RINEX observation stream.

collect(dec) reads all epochs of a decoder once and returns an ObsStat:
number of epochs, first and last epoch time and the sampling interval.
The sampling interval is the most common of the first MAX_INTERVALS gaps
between epochs (the shortest, if several are equally common).
Header values which disagree with what was read are warned about.
"""

from warnings import warn

import numpy as np

from .errors import RinexWarning
from .gpstime import isoformat

MAX_INTERVALS = 10


class ObsStat(object):
    """Observation statistics of one file."""
    def __init__(self):
        self.num_epochs = 0
        self.sampling = None
        """Sampling interval in seconds, if there were at least two epochs."""
        self.time_of_first_obs = None
        self.time_of_last_obs = None
        self.intervals = []
        """The first gaps between epochs, in seconds."""

    def __str__(self):
        out = '{} epochs, from {} to {}'.format(self.num_epochs,
                                               isoformat(self.time_of_first_obs),
                                               isoformat(self.time_of_last_obs))
        if self.sampling is not None:
            out += ', sampling {:g} s'.format(self.sampling)
        return out

    def as_dict(self):
        """Dictionary of the statistics, ready for json.dump."""
        return {'numEpochs' : self.num_epochs,
                'sampling' : self.sampling,
                'timeOfFirstObs' : isoformat(self.time_of_first_obs),
                'timeOfLastObs' : isoformat(self.time_of_last_obs)}


def sampling(intervals):
    """Most common interval (seconds) in the list; the smallest on ties."""
    if not len(intervals):
        return None
    vals, counts = np.unique(np.round(np.asarray(intervals, dtype=float), 6),
                             return_counts=True)
    return float(vals[np.argmax(counts)])


def collect(dec):
    """Read all epochs from the decoder dec and gather an ObsStat.

    Any error of the decoder is raised, unchanged.
    """
    stat = ObsStat()
    prev = None
    for epoch in dec:
        stat.num_epochs += 1
        if prev is None:
            stat.time_of_first_obs = epoch.time
        elif len(stat.intervals) < MAX_INTERVALS:
            stat.intervals.append((epoch.time - prev).total_seconds())
        stat.time_of_last_obs = epoch.time
        prev = epoch.time
    if dec.err is not None:
        raise dec.err
    stat.sampling = sampling(stat.intervals)
    check(dec.header, stat)
    return stat


def check(hdr, stat):
    """Check RINEX header information, if supplied, against what was read."""
    if not stat.num_epochs:
        warn('No epochs read', RinexWarning)
        return
    if hdr.time_of_first_obs is not None and hdr.time_of_first_obs != stat.time_of_first_obs:
        warn('TIME OF FIRST OBS ' + isoformat(hdr.time_of_first_obs) +
             ' does not match first epoch ' + isoformat(stat.time_of_first_obs),
             RinexWarning)
    if hdr.time_of_last_obs is not None and hdr.time_of_last_obs != stat.time_of_last_obs:
        warn('TIME OF LAST OBS ' + isoformat(hdr.time_of_last_obs) +
             ' does not match last epoch ' + isoformat(stat.time_of_last_obs),
             RinexWarning)
    if hdr.interval and stat.sampling is not None and hdr.interval != stat.sampling:
        warn('INTERVAL ' + str(hdr.interval) + ' does not match observed '
             'sampling ' + str(stat.sampling), RinexWarning)

'''
Pair up the epochs of two RINEX observation streams by time.

Both decoders must give epochs in ascending time order.  Epochs whose time
appears in only one of the streams are skipped; only common times are
paired.  The Synchronizer is the only thing which may advance the two
decoders while it is in use.
'''

from collections import namedtuple

from .errors import StreamError
from .rinex import Phase

SyncEpochs = namedtuple('SyncEpochs', 'epo1 epo2')
SyncEpochs.__doc__ = 'Two epochs, from two different streams, with the same time.'


class SyncStep(namedtuple('SyncStep', 'phase pair error')):
    '''The outcome of Synchronizer.next_pair(); true if a pair was found.'''
    __slots__ = ()

    def __bool__(self):
        return self.pair is not None


class Synchronizer(object):
    '''
    Merge two decoders on equal epoch times.

    dec is the primary stream: once synchronization ends, dec.err holds any
    error of either stream (an error of dec2 is wrapped in a StreamError).
    '''
    def __init__(self, dec, dec2):
        self.dec = dec
        self.dec2 = dec2
        self.epo1 = None
        self.epo2 = None
        self.done = False

    def __iter__(self):
        while True:
            step = self.next_pair()
            if not step:
                return
            yield step.pair

    def _pull(self, dec):
        step = dec.next_epoch()
        return step.epoch if step else None

    def next_pair(self):
        '''Return a SyncStep with the next pair of epochs with equal times,
        or without a pair once either stream is exhausted.'''
        while not self.done:
            if self.epo1 is None:
                self.epo1 = self._pull(self.dec)
                if self.epo1 is None:
                    break
            if self.epo2 is None:
                self.epo2 = self._pull(self.dec2)
                if self.epo2 is None:
                    break
            if self.epo1.time == self.epo2.time:
                pair = SyncEpochs(self.epo1, self.epo2)
                self.epo1 = self.epo2 = None
                return SyncStep(Phase.STREAMING, pair, None)
            elif self.epo1.time < self.epo2.time:
                self.epo1 = None   # next epoch of stream 1 needed
            else:
                self.epo2 = None
        return self._finish()

    def _finish(self):
        if not self.done:
            self.done = True
            if self.dec2.err is not None:
                err = StreamError('stream2 decoder error: ' + str(self.dec2.err))
                err.__cause__ = self.dec2.err
                self.dec.set_error(err)
        phase = Phase.FAILED if self.dec.err is not None else Phase.EXHAUSTED
        return SyncStep(phase, None, self.dec.err)


def sync(dec, dec2):
    '''Iterate over SyncEpochs of two decoders.'''
    return iter(Synchronizer(dec, dec2))

import warnings
from datetime import timedelta

import pytest

from conftest import T0, header_lines, epoch_lines, obsfile_lines, stream
from rinexobs.errors import GrammarError, RinexWarning
from rinexobs.rinex import ObsDecoder
from rinexobs.stats import collect, sampling, MAX_INTERVALS


def decoder(lines):
    return ObsDecoder(stream(lines))


def test_collect(rinex_stream):
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        stat = collect(ObsDecoder(rinex_stream))
    assert stat.num_epochs == 3
    assert stat.time_of_first_obs == T0
    assert stat.time_of_last_obs == T0 + timedelta(seconds=60)
    assert stat.intervals == [30., 30.]
    assert stat.sampling == 30.
    assert str(stat) == ('3 epochs, from 2018-11-06T19:00:00.000000 to '
                         '2018-11-06T19:01:00.000000, sampling 30 s')
    assert stat.as_dict() == {'numEpochs': 3, 'sampling': 30.,
                              'timeOfFirstObs': '2018-11-06T19:00:00.000000',
                              'timeOfLastObs': '2018-11-06T19:01:00.000000'}


def test_sampling():
    assert sampling([]) is None
    assert sampling([30.]) == 30.
    assert sampling([30., 30., 60., 30.]) == 30.
    assert sampling([1., 60., 60., 1., 2.]) == 1.
    assert sampling([0.1 + 0.2, 0.3, 5.]) == pytest.approx(0.3)


def test_only_first_gaps_used():
    times = [T0 + timedelta(seconds=s) for s in range(0, 30 * 15, 30)]
    times += [times[-1] + timedelta(seconds=s) for s in (1, 2, 3, 4)]
    lines = obsfile_lines(times)
    stat = collect(decoder(lines))
    assert len(stat.intervals) == MAX_INTERVALS
    assert stat.sampling == 30.
    assert stat.num_epochs == 19


def test_single_epoch():
    lines = header_lines(T0, T0) + epoch_lines(T0)
    stat = collect(decoder(lines))
    assert stat.num_epochs == 1
    assert stat.sampling is None
    assert 'sampling' not in str(stat)


def test_no_epochs():
    with pytest.warns(RinexWarning, match='No epochs read'):
        stat = collect(decoder(header_lines()))
    assert stat.num_epochs == 0
    assert stat.time_of_first_obs is None
    assert stat.as_dict()['timeOfFirstObs'] == '-'


def test_header_mismatch_warns():
    lines = header_lines(T0, T0 + timedelta(seconds=120))
    for s in (0, 15, 30):
        lines += epoch_lines(T0 + timedelta(seconds=s))
    with pytest.warns(RinexWarning) as record:
        stat = collect(decoder(lines))
    messages = [str(w.message) for w in record]
    assert any(m.startswith('TIME OF LAST OBS') for m in messages)
    assert any(m.startswith('INTERVAL') for m in messages)
    assert not any(m.startswith('TIME OF FIRST OBS') for m in messages)
    assert stat.sampling == 15.


def test_error_raised():
    with pytest.raises(GrammarError):
        collect(decoder(obsfile_lines()[:-1]))

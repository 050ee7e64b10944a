from gameshow.services.games import StageTimers
from gameshow.services.games.timers import QUESTION, RESULTS, ROLL, eviction_kind


def _timers(runner):
    return StageTimers(runner.start, runner.sleep)


def test_timer_fires_with_its_token(runner):
    timers = _timers(runner)
    fired = []
    token = timers.schedule('v1', ROLL, 3, fired.append)
    assert timers.is_pending('v1', ROLL)
    runner.run_pending()
    assert runner.slept == [3]
    assert fired == [token]


def test_rescheduling_replaces_previous_timer(runner):
    timers = _timers(runner)
    fired = []
    timers.schedule('v1', QUESTION, 60, lambda t: fired.append(('first', t)))
    second = timers.schedule('v1', QUESTION, 60, lambda t: fired.append(('second', t)))
    runner.run_pending()
    assert fired == [('second', second)]


def test_cancelled_timer_does_not_fire(runner):
    timers = _timers(runner)
    fired = []
    timers.schedule('v1', RESULTS, 5, fired.append)
    assert timers.cancel('v1', RESULTS) is True
    assert timers.cancel('v1', RESULTS) is False
    runner.run_pending()
    assert fired == []


def test_cancel_all_is_venue_scoped(runner):
    timers = _timers(runner)
    fired = []
    timers.schedule('v1', ROLL, 3, lambda t: fired.append('v1-roll'))
    timers.schedule('v1', eviction_kind('p1'), 30, lambda t: fired.append('v1-evict'))
    timers.schedule('v2', ROLL, 3, lambda t: fired.append('v2-roll'))
    assert timers.cancel_all('v1') == 2
    assert timers.pending('v1') == []
    assert timers.pending('v2') == [ROLL]
    runner.run_pending()
    assert fired == ['v2-roll']


def test_consume_claims_once(runner):
    timers = _timers(runner)
    token = timers.schedule('v1', ROLL, 3, lambda t: None)
    assert timers.consume('v1', ROLL, token + 1) is False
    assert timers.consume('v1', ROLL, token) is True
    assert timers.consume('v1', ROLL, token) is False
    assert not timers.is_pending('v1', ROLL)

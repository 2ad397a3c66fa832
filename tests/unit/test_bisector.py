import unittest

import pytest
from mock import Mock, call, patch

from revbisect import errors
from revbisect.bisector import (
    Bisection,
    Bisector,
    BisectorHandler,
    RangeHandler,
    compute_steps_left,
)
from revbisect.revision_range import RevisionRange
from revbisect.sync import RevisionSync


class FakeSync(RevisionSync):
    def __init__(self):
        self.synced = []

    def sync(self, revision):
        self.synced.append(revision)


class FakeTestRunner(object):
    """
    Output "A" for revisions before *change* and "B" from *change* on.
    Specific revisions can be given another output with *overrides*.
    """

    def __init__(self, change, overrides=None):
        self.change = change
        self.overrides = overrides or {}
        self.tested = []

    def run(self, revision):
        self.tested.append(revision)
        if revision in self.overrides:
            return self.overrides[revision]
        return b"A" if revision < self.change else b"B"


class RecordingHandler(BisectorHandler):
    def __init__(self):
        BisectorHandler.__init__(self)
        self.ranges = []

    def revision_low(self, revision, old_range):
        self.ranges.append((self.rev_range.low, self.rev_range.high))

    def revision_high(self, revision, old_range):
        self.ranges.append((self.rev_range.low, self.rev_range.high))


def bisect(low, high, runner, handler=None):
    handler = handler or RecordingHandler()
    syncer = FakeSync()
    result = Bisector(syncer, runner).bisect(handler, low, high)
    return result, handler, syncer


@pytest.mark.parametrize("steps,result", [(0, 0), (1, 0), (2, 1), (47, 5), (1000, 9)])
def test_compute_steps_left(steps, result):
    assert compute_steps_left(steps) == result


def test_bisect_finds_change():
    runner = FakeTestRunner(952)
    result, handler, syncer = bisect(920, 967, runner)
    assert result == Bisection.FINISHED
    assert (handler.rev_range.low, handler.rev_range.high) == (951, 952)
    # anchors are tested first, then mid points
    assert runner.tested[:3] == [920, 967, 943]
    # every tested revision was synced before
    assert syncer.synced == runner.tested


@pytest.mark.parametrize("change,expected", [(12, (11, 12)), (11, (10, 11))])
def test_bisect_smallest_range(change, expected):
    runner = FakeTestRunner(change)
    result, handler, _ = bisect(10, 12, runner)
    assert runner.tested == [10, 12, 11]
    assert (handler.rev_range.low, handler.rev_range.high) == expected


@pytest.mark.parametrize("change", [1, 2, 17, 50, 99, 100])
def test_bisect_narrows_monotonically(change):
    runner = FakeTestRunner(change)
    result, handler, _ = bisect(0, 100, runner)
    lows = [r[0] for r in handler.ranges]
    highs = [r[1] for r in handler.ranges]
    assert lows == sorted(lows)
    assert highs == sorted(highs, reverse=True)
    assert (handler.rev_range.low, handler.rev_range.high) == (change - 1, change)
    # each revision is tested only once
    assert len(runner.tested) == len(set(runner.tested))


def test_bisect_is_idempotent():
    first = bisect(920, 967, FakeTestRunner(952))[1].rev_range
    second = bisect(920, 967, FakeTestRunner(952))[1].rev_range
    assert first == second


def test_bisect_inconsistent_output():
    runner = FakeTestRunner(952, overrides={943: b"C"})
    handler = RecordingHandler()
    handler.failed = Mock()
    with pytest.raises(errors.InconsistentOutputError, match="r943") as excinfo:
        bisect(920, 967, runner, handler=handler)
    assert excinfo.value.revision == 943
    # no other revision was tested after the failure
    assert runner.tested == [920, 967, 943]
    handler.failed.assert_called_once_with(excinfo.value)


def test_bisect_identical_anchors():
    runner = FakeTestRunner(1000)
    with pytest.raises(errors.IdenticalAnchorsError, match="r920 and r967"):
        bisect(920, 967, runner)
    assert runner.tested == [920, 967]


def test_bisect_sync_error_stops():
    syncer = Mock(sync=Mock(side_effect=errors.SyncError("svn is gone")))
    runner = FakeTestRunner(952)
    with pytest.raises(errors.SyncError):
        Bisector(syncer, runner).bisect(RecordingHandler(), 920, 967)
    assert runner.tested == []


class TestBisection(unittest.TestCase):
    def setUp(self):
        self.handler = Mock(spec=BisectorHandler)
        self.rev_range = RevisionRange(10, 20)
        self.bisection = Bisection(self.handler, self.rev_range, Mock(), Mock())

    def test_init(self):
        self.assertEqual(self.bisection.state, Bisection.BOOTSTRAP_LOW)
        self.handler.set_range.assert_called_once_with(self.rev_range)

    def test_bootstrap(self):
        self.assertEqual(self.bisection.handle_output(10, b"low"), Bisection.BOOTSTRAP_HIGH)
        self.assertEqual(self.bisection.handle_output(20, b"high"), Bisection.BISECTING)
        self.assertEqual(self.bisection.low_output, b"low")
        self.assertEqual(self.bisection.high_output, b"high")
        self.assertEqual(
            self.handler.anchor_recorded.mock_calls, [call(10, True), call(20, False)]
        )
        # bootstrap does not narrow the range
        self.assertEqual(self.rev_range, RevisionRange(10, 20))

    def test_classify(self):
        self.bisection.handle_output(10, b"low")
        self.bisection.handle_output(20, b"high")
        self.bisection.handle_output(15, b"low")
        self.assertEqual(self.rev_range, RevisionRange(15, 20))
        self.handler.revision_low.assert_called_once_with(15, RevisionRange(10, 20))
        self.bisection.handle_output(17, b"high")
        self.assertEqual(self.rev_range, RevisionRange(15, 17))
        self.handler.revision_high.assert_called_once_with(17, RevisionRange(15, 20))

    def test_evaluate(self):
        self.bisection.test_runner.run.return_value = b"out"
        self.assertEqual(self.bisection.evaluate(12), b"out")
        self.bisection.syncer.sync.assert_called_once_with(12)
        self.bisection.test_runner.run.assert_called_once_with(12)

    def test_finish_and_fail(self):
        self.assertEqual(self.bisection.finish(), Bisection.FINISHED)
        self.handler.finished.assert_called_once_with()
        exc = errors.SyncError("oops")
        self.bisection.fail(exc)
        self.assertEqual(self.bisection.state, Bisection.FAILED)
        self.handler.failed.assert_called_once_with(exc)


class TestRangeHandler(unittest.TestCase):
    def setUp(self):
        self.handler = RangeHandler()
        self.handler.set_range(RevisionRange(943, 967))

    @patch("revbisect.bisector.LOG")
    def test_revision_low(self, logger):
        log = []
        logger.info = log.append
        self.handler.revision_low(943, RevisionRange(920, 967))
        self.assertEqual(log[0], "r943 behaves like r920")
        self.assertIn("from [r920, r967] (47 revisions)", log[1])
        self.assertIn("to [r943, r967] (24 revisions)", log[1])
        self.assertIn("4 steps left", log[1])

    @patch("revbisect.bisector.LOG")
    def test_revision_high(self, logger):
        log = []
        logger.info = log.append
        self.handler.revision_high(967, RevisionRange(943, 990))
        self.assertEqual(log[0], "r967 behaves like r990")

    @patch("revbisect.bisector.LOG")
    def test_failed(self, logger):
        self.handler.failed(errors.SyncError("oops"))
        logger.info.assert_called_once_with("Last known range: [r943, r967]")

    def test_print_result(self):
        self.handler.set_range(RevisionRange(951, 952))
        with patch("builtins.print") as mocked_print:
            self.handler.print_result()
        mocked_print.assert_called_once_with("test case changed between r951 and r952")

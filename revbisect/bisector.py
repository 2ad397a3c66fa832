# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

import math

from mozlog import get_proxy_logger

from revbisect.errors import IdenticalAnchorsError, InconsistentOutputError
from revbisect.revision_range import RevisionRange
from revbisect.sampler import RevisionSampler

LOG = get_proxy_logger("Bisector")


def compute_steps_left(steps):
    if steps <= 1:
        return 0
    return math.trunc(math.log(steps, 2))


class BisectorHandler(object):
    """
    React to events of a :class:`Bisector`. This is intended to be subclassed.

    The handler keeps a reference to the range of the current bisection.
    """

    def __init__(self):
        self.rev_range = None

    def set_range(self, rev_range):
        """
        Save a reference of the :class:`revbisect.revision_range.RevisionRange`
        instance. This is called by the bisector before the first step.
        """
        self.rev_range = rev_range

    def anchor_recorded(self, revision, is_low):
        """
        Called when the reference output of the low or high revision is
        recorded.
        """

    def revision_low(self, revision, old_range):
        """
        Called when a revision behaves like the low revision. *old_range* is
        a copy of the range before narrowing.
        """

    def revision_high(self, revision, old_range):
        """
        Called when a revision behaves like the high revision.
        """

    def finished(self):
        pass

    def failed(self, exc):
        pass


class RangeHandler(BisectorHandler):
    """
    Log the progress of the bisection and report its result.
    """

    def anchor_recorded(self, revision, is_low):
        LOG.info("Recorded %s reference output (r%d)" % ("low" if is_low else "high", revision))

    def _print_progress(self, old_range):
        LOG.info(
            "Narrowed regression window from %s (%d revisions) to %s"
            " (%d revisions) (~%d steps left)"
            % (
                old_range,
                old_range.gap,
                self.rev_range,
                self.rev_range.gap,
                compute_steps_left(self.rev_range.gap),
            )
        )

    def revision_low(self, revision, old_range):
        LOG.info("r%d behaves like r%d" % (revision, old_range.low))
        self._print_progress(old_range)

    def revision_high(self, revision, old_range):
        LOG.info("r%d behaves like r%d" % (revision, old_range.high))
        self._print_progress(old_range)

    def failed(self, exc):
        if self.rev_range is not None:
            LOG.info("Last known range: %s" % self.rev_range)

    def print_result(self):
        print("test case changed between r%d and r%d" % (self.rev_range.low, self.rev_range.high))


class Bisection(object):
    """
    State of one bisection: the range, the two reference outputs and the
    current phase.
    """

    BOOTSTRAP_LOW = 0
    BOOTSTRAP_HIGH = 1
    BISECTING = 2
    FINISHED = 3
    FAILED = 4

    def __init__(self, handler, rev_range, syncer, test_runner, sampler=None):
        self.handler = handler
        self.rev_range = rev_range
        self.syncer = syncer
        self.test_runner = test_runner
        self.sampler = sampler or RevisionSampler()
        self.state = self.BOOTSTRAP_LOW
        self.low_output = None
        self.high_output = None
        self.handler.set_range(rev_range)

    def revisions(self):
        return self.sampler.iterate(self.rev_range)

    def evaluate(self, revision):
        """
        Sync the working copy to *revision* and return the test output.
        """
        LOG.info("Testing r%d" % revision)
        self.syncer.sync(revision)
        return self.test_runner.run(revision)

    def handle_output(self, revision, output):
        if self.state == self.BOOTSTRAP_LOW:
            self.low_output = output
            self.state = self.BOOTSTRAP_HIGH
            self.handler.anchor_recorded(revision, True)
        elif self.state == self.BOOTSTRAP_HIGH:
            self.high_output = output
            self.handler.anchor_recorded(revision, False)
            if self.high_output == self.low_output:
                raise IdenticalAnchorsError(self.rev_range.low, self.rev_range.high)
            self.state = self.BISECTING
        else:
            old_range = RevisionRange(self.rev_range.low, self.rev_range.high)
            if output == self.low_output:
                self.rev_range.narrow_low(revision)
                self.handler.revision_low(revision, old_range)
            elif output == self.high_output:
                self.rev_range.narrow_high(revision)
                self.handler.revision_high(revision, old_range)
            else:
                raise InconsistentOutputError(revision)
        return self.state

    def finish(self):
        self.state = self.FINISHED
        self.handler.finished()
        return self.state

    def fail(self, exc):
        self.state = self.FAILED
        self.handler.failed(exc)


class Bisector(object):
    """
    Handle the logic of the bisection process, and report events to a given
    :class:`BisectorHandler`.

    The working copy is synced with *syncer* (a
    :class:`revbisect.sync.RevisionSync`) and tested with *test_runner* (a
    :class:`revbisect.test_runner.TestRunner`).
    """

    def __init__(self, syncer, test_runner):
        self.syncer = syncer
        self.test_runner = test_runner

    def bisect(self, handler, low, high):
        return self._bisect(handler, RevisionRange(low, high))

    def _bisect(self, handler, rev_range):
        """
        Starts a bisection for a
        :class:`revbisect.revision_range.RevisionRange`. The range is
        narrowed in place.

        Returns :attr:`Bisection.FINISHED`; every failure is raised.
        """
        bisection = Bisection(handler, rev_range, self.syncer, self.test_runner)
        try:
            for revision in bisection.revisions():
                output = bisection.evaluate(revision)
                bisection.handle_output(revision, output)
        except Exception as exc:
            bisection.fail(exc)
            raise
        return bisection.finish()

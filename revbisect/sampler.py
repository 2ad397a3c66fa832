# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""
The :class:`RevisionSampler` decides which revision to test next.
"""


class _Exhausted(object):
    """
    Type of the :data:`EXHAUSTED` marker.
    """

    def __repr__(self):
        return "EXHAUSTED"


#: Returned by :meth:`RevisionSampler.pull` when there is nothing left to
#: test.
EXHAUSTED = _Exhausted()


class RevisionSampler(object):
    """
    Produce, on demand, the next revision to test for a
    :class:`revbisect.revision_range.RevisionRange`.

    The schedule is fixed: the first pull gives the low bound, the second
    the high bound, and every later pull the mid point of the range as it
    is at pull time. Once the range is collapsed, :data:`EXHAUSTED` is
    returned instead of a revision.

    A sampler is not restartable; use a new one for a new bisection.
    """

    def __init__(self):
        self.calls = 0

    def pull(self, rev_range):
        if rev_range.is_collapsed():
            return EXHAUSTED
        self.calls += 1
        if self.calls == 1:
            return rev_range.low
        elif self.calls == 2:
            return rev_range.high
        return rev_range.mid_point()

    def iterate(self, rev_range):
        """
        Yield revisions until the sampler is exhausted.

        *rev_range* is read again before each yield, so it may be narrowed
        between two iterations.
        """
        while True:
            revision = self.pull(rev_range)
            if revision is EXHAUSTED:
                return
            yield revision

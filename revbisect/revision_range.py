# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""
This module provides the :class:`RevisionRange` class, the bracket of
revisions known to surround a behavior change, and :func:`parse_range` to
build one from a ``low:high`` string.
"""

import re

from revbisect.errors import ConfigurationError

# the smallest gap that leaves at least one revision to test
MIN_GAP = 2

RANGE_RE = re.compile(r"^\s*r?(\d+)\s*:\s*r?(\d+)\s*$")


class RevisionRange(object):
    """
    Range of revisions used in bisection.

    *low* is the highest revision known to behave like the start of the
    range and *high* the lowest revision known to behave like its end.
    Narrowing only ever moves *low* up and *high* down.
    """

    def __init__(self, low, high):
        if low < 0 or high <= low:
            raise ValueError("invalid revision range r%d:r%d" % (low, high))
        self.low = low
        self.high = high

    @property
    def gap(self):
        return self.high - self.low

    def is_collapsed(self):
        """
        Returns True when no revision is left between the two bounds.
        """
        return self.high == self.low + 1

    def mid_point(self):
        """
        Return the mid point of the range, rounded down.
        """
        return (self.low + self.high) // 2

    def narrow_low(self, revision):
        self.low = max(self.low, revision)

    def narrow_high(self, revision):
        self.high = min(self.high, revision)

    def __contains__(self, revision):
        return self.low <= revision <= self.high

    def __eq__(self, other):
        if not isinstance(other, RevisionRange):
            return NotImplemented
        return (self.low, self.high) == (other.low, other.high)

    __hash__ = None

    def __repr__(self):
        return "RevisionRange(%d, %d)" % (self.low, self.high)

    def __str__(self):
        return "[r%d, r%d]" % (self.low, self.high)


def parse_range(value):
    """
    Returns a :class:`RevisionRange` from a ``low:high`` string.

    Each bound may carry an optional ``r`` prefix (``r920:r967``). Raises
    :class:`revbisect.errors.ConfigurationError` when the string is
    malformed or when the range does not contain at least one revision to
    test.
    """
    match = RANGE_RE.match(value)
    if match is None:
        raise ConfigurationError(
            "Incorrect revision range format: `%s` (expected low:high)" % value
        )
    low, high = int(match.group(1)), int(match.group(2))
    if high <= low:
        raise ConfigurationError(
            "Invalid revision range %s: high must be greater than low" % value
        )
    if high - low < MIN_GAP:
        raise ConfigurationError(
            "Revision range %s is too small: high - low must be at least %d"
            % (value, MIN_GAP)
        )
    return RevisionRange(low, high)

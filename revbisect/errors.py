# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""
Definition of revbisect related exceptions.
"""


class RevBisectError(Exception):
    """Base class for revbisect errors."""


class ConfigurationError(RevBisectError):
    """
    Raised when an option or the configuration file has an invalid value.
    """


class SyncError(RevBisectError):
    """
    Raised when the working copy can not be synced to a revision.
    """


class TestCommandError(RevBisectError):
    """
    Raised on a user test command error.
    """


class InconsistentOutputError(RevBisectError):
    """
    Raised when the output of a tested revision matches neither the low
    nor the high reference output.
    """

    def __init__(self, revision):
        RevBisectError.__init__(
            self,
            "Output of r%d matches neither the low nor the high reference"
            " output. The test command may not be deterministic, or the"
            " behavior changed more than once in the range." % revision,
        )
        self.revision = revision


class IdenticalAnchorsError(RevBisectError):
    """
    Raised when the low and high revisions produce the same output, so
    there is no change to look for.
    """

    def __init__(self, low, high):
        RevBisectError.__init__(
            self,
            "r%d and r%d produce the same output. The initial range seems"
            " incorrect." % (low, high),
        )

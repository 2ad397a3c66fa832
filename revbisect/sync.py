# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""
This module implements a :class:`RevisionSync` interface to bring the
working copy to a given revision, and a default implementation
:class:`CommandSync` running a version control command.
"""

import shlex
import subprocess
from abc import ABCMeta, abstractmethod

from mozlog import get_proxy_logger

from revbisect.errors import SyncError

LOG = get_proxy_logger("Sync")


class RevisionSync(metaclass=ABCMeta):
    """
    Abstract class that allows to sync the working copy.

    :meth:`sync` must be implemented by subclasses.
    """

    @abstractmethod
    def sync(self, revision):
        """
        Bring the working copy to *revision*. Must raise
        :class:`revbisect.errors.SyncError` on failure.
        """
        raise NotImplementedError


class CommandSync(RevisionSync):
    """
    A RevisionSync subclass that runs a command line, e.g.
    ``svn update -r {revision}``.

    The ``{revision}`` placeholder is replaced by the revision number.
    Unless *quiet* is True, the command is logged before it runs.
    """

    def __init__(self, command, cwd=None, quiet=False):
        self.command = command
        self.cwd = cwd
        self.quiet = quiet

    def format_command(self, revision):
        try:
            return self.command.format(revision=revision)
        except (KeyError, IndexError, ValueError) as exc:
            raise SyncError("Unable to format the sync command `%s`: %s" % (self.command, exc))

    def sync(self, revision):
        command = self.format_command(revision)
        echo = LOG.debug if self.quiet else LOG.info
        echo("Running sync command: `%s`" % command)
        cmdlist = shlex.split(command)
        if not cmdlist:
            raise SyncError("Empty sync command")
        try:
            result = subprocess.run(
                cmdlist, stdout=subprocess.PIPE, stderr=subprocess.PIPE, cwd=self.cwd
            )
        except OSError as exc:
            raise SyncError(
                "Unable to run the sync command (%s not found or not executable): `%s`"
                % (cmdlist[0], exc)
            )
        if result.stdout:
            LOG.debug(result.stdout.decode("utf-8", "replace").rstrip())
        if result.returncode != 0:
            raise SyncError(
                "Sync to r%d failed (exit code %d): %s"
                % (revision, result.returncode, result.stderr.decode("utf-8", "replace").strip())
            )

# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""
Entry point for the revbisect command line.
"""

import os
import sys

import colorama
from mozlog import get_proxy_logger

from revbisect.bisector import Bisector, RangeHandler
from revbisect.cli import cli
from revbisect.errors import RevBisectError
from revbisect.sync import CommandSync
from revbisect.test_runner import CommandTestRunner

LOG = get_proxy_logger("main")


class Application(object):
    def __init__(self, options):
        self.options = options
        self._test_runner = None
        self._syncer = None
        self._bisector = None

    @property
    def test_runner(self):
        if self._test_runner is None:
            self._test_runner = CommandTestRunner(
                self.options.command,
                outdir=self.options.outdir,
                test_name=self.options.test_name,
                cwd=self.options.working_copy,
            )
        return self._test_runner

    @property
    def syncer(self):
        if self._syncer is None:
            self._syncer = CommandSync(
                self.options.sync_command,
                cwd=self.options.working_copy,
                quiet=self.options.quiet,
            )
        return self._syncer

    @property
    def bisector(self):
        if self._bisector is None:
            self._bisector = Bisector(self.syncer, self.test_runner)
        return self._bisector

    def bisect(self):
        rev_range = self.options.rev_range
        LOG.info(
            "Bisecting r%d to r%d, writing outputs to %s"
            % (rev_range.low, rev_range.high, self.options.outdir)
        )
        handler = RangeHandler()
        self.bisector.bisect(handler, rev_range.low, rev_range.high)
        handler.print_result()
        return 0


def main(argv=None, namespace=None):
    """
    main entry point of revbisect command line.
    """
    # terminal color support on windows
    if os.name == "nt":
        colorama.init()

    config = None
    try:
        config = cli(argv=argv, namespace=namespace)
        config.validate()
        app = Application(config.options)
        sys.exit(app.bisect())

    except KeyboardInterrupt:
        sys.exit("\nInterrupted.")
    except RevBisectError as exc:
        LOG.error(str(exc)) if config else sys.exit(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()

# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""
This module parses and checks the command line with :func:`cli` and return a
:class:`Configuration` object that hold information for running the
application.

:func:`cli` is intended to be the only public interface of this module.
"""

import os
import shlex
import sys
import tempfile
from argparse import SUPPRESS, Action, ArgumentParser, ArgumentTypeError

from revbisect import __version__
from revbisect.config import DEFAULT_CONF_FNAME, get_config, write_config
from revbisect.errors import ConfigurationError
from revbisect.log import colorize, init_logger
from revbisect.revision_range import parse_range


class WriteConfigAction(Action):
    def __init__(self, option_strings, dest=SUPPRESS, default=SUPPRESS, help=None):
        super(WriteConfigAction, self).__init__(
            option_strings=option_strings,
            dest=dest,
            default=default,
            nargs=0,
            help=help,
        )

    def __call__(self, parser, namespace, values, option_string=None):
        write_config(DEFAULT_CONF_FNAME)
        parser.exit()


def range_type(value):
    """
    argparse type for the --range option.
    """
    try:
        return parse_range(value)
    except ConfigurationError as exc:
        raise ArgumentTypeError(str(exc))


def parse_args(argv=None, defaults=None):
    """
    Parse command line options.
    """
    parser = create_parser(defaults=defaults)
    return parser.parse_args(argv)


def create_parser(defaults):
    """
    Create the revbisect command line parser (ArgumentParser instance).
    """
    usage = (
        "\n"
        " %(prog)s [OPTIONS] -r LOW:HIGH -c COMMAND"
        "\n"
        " %(prog)s --write-config"
    )

    parser = ArgumentParser(
        usage=usage,
        description=(
            "Find the revision at which the output of a test command changed,"
            " by bisecting a linear revision history."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=__version__,
        help="print the revbisect version number and exits.",
    )

    parser.add_argument(
        "-r",
        "--range",
        dest="rev_range",
        required=True,
        type=range_type,
        metavar="LOW:HIGH",
        help=(
            "revisions to bisect. LOW and HIGH must be at least 2 apart,"
            " e.g. 920:967 or r920:r967."
        ),
    )

    parser.add_argument(
        "-c",
        "--command",
        required=True,
        help=(
            "Test command to run for each revision. Its standard output is"
            " compared with the output of the LOW and HIGH revisions; it"
            " must not change for a given revision."
        ),
    )

    parser.add_argument(
        "-n",
        "--test-name",
        default=defaults["test-name"],
        help=(
            "prefix of the generated .out and .log files."
            " Defaults to %(default)r."
        ),
    )

    parser.add_argument(
        "-d",
        "--outdir",
        default=defaults["outdir"],
        help=(
            "directory in which the .out and .log files are written."
            " Defaults to the temporary directory of the system."
        ),
    )

    parser.add_argument(
        "-s",
        "--sync-command",
        default=defaults["sync-command"],
        help=(
            "command that brings the working copy to a revision. It must"
            " contain the {revision} placeholder. Defaults to %(default)r."
        ),
    )

    parser.add_argument(
        "-w",
        "--working-copy",
        default=defaults["working-copy"],
        metavar="PATH",
        help=(
            "directory in which the sync and test commands are run."
            " Defaults to the current directory."
        ),
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=(defaults["quiet"].lower() in ("1", "yes", "true")),
        help="Do not echo the sync commands.",
    )

    parser.add_argument(
        "--no-quiet",
        dest="quiet",
        action="store_false",
        default=SUPPRESS,
        help="Echo the sync commands, even if quiet is set in the config file.",
    )

    parser.add_argument(
        "--write-config",
        action=WriteConfigAction,
        help="Helps to write the configuration file.",
    )

    parser.add_argument("--debug", action="store_true", help="Show the debug output.")

    return parser


class Configuration(object):
    """
    Holds the configuration extracted from the command line + configuration file.

    This is usually instantiated by calling :func:`cli`.

    The constructor only initializes the `logger`.

    The configuration should not be used (except for the logger attribute)
    until :meth:`validate` is called.

    :attr logger: the mozlog logger, created using the command line options
    :attr options: the raw command line options
    """

    def __init__(self, options):
        self.options = options
        self.logger = init_logger(debug=options.debug)

    def validate(self):
        """
        Validate the options. Raises
        :class:`revbisect.errors.ConfigurationError` for invalid values.
        """
        options = self.options

        if not shlex.split(options.command):
            raise ConfigurationError("The test command is empty")

        if "{revision}" not in options.sync_command:
            raise ConfigurationError(
                "The sync command `%s` must contain the {revision} placeholder"
                % options.sync_command
            )

        if not options.test_name or os.sep in options.test_name:
            raise ConfigurationError("Invalid test name: %r" % options.test_name)

        if options.working_copy:
            options.working_copy = os.path.abspath(options.working_copy)
            if not os.path.isdir(options.working_copy):
                raise ConfigurationError(
                    "Working copy not found: %s" % options.working_copy
                )

        if not options.outdir:
            options.outdir = tempfile.gettempdir()
        options.outdir = os.path.abspath(options.outdir)
        if not os.path.isdir(options.outdir):
            self.logger.info("Creating output directory %s" % options.outdir)
            try:
                os.makedirs(options.outdir)
            except OSError as exc:
                raise ConfigurationError(
                    "Unable to create the output directory %s: %s" % (options.outdir, exc)
                )


def cli(argv=None, conf_file=DEFAULT_CONF_FNAME, namespace=None):
    """
    parse cli args basically and returns a :class:`Configuration`.

    if namespace is given, it will be used as a arg parsing result, so no
    arg parsing will be done.
    """
    config = get_config(conf_file)
    if namespace:
        options = namespace
    else:
        options = parse_args(argv=argv, defaults=config)
    if conf_file and not os.path.isfile(conf_file):
        print("*" * 10, file=sys.stderr)
        print(
            colorize(
                "You can use a config file to store your defaults. Use the "
                + "{sBRIGHT}--write-config{sRESET_ALL}"
                + " command line flag to help you create one."
            ),
            file=sys.stderr,
        )
        print("*" * 10, file=sys.stderr)
    return Configuration(options)

# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""
Logging for revbisect.

Log lines go to the standard error so that the standard output only
carries the bisection result, and can be piped.
"""

import sys
import time

import mozinfo
from colorama import Back, Fore, Style
from mozlog.handlers import LogLevelFilter, StreamHandler
from mozlog.structuredlog import StructuredLogger, set_default_logger

LOGGER_NAME = "revbisect"

ALLOW_COLOR = sys.stderr.isatty()

LEVEL_COLORS = {
    "CRITICAL": Fore.RED + Style.BRIGHT,
    "ERROR": Fore.RED + Style.BRIGHT,
    "WARNING": Fore.MAGENTA + Style.BRIGHT,
    "INFO": Style.BRIGHT,
    "DEBUG": Fore.CYAN + Style.BRIGHT,
}


def _format_seconds(total):
    """Format number of seconds to MM:SS.DD form."""
    minutes, seconds = divmod(total, 60)
    return "%2d:%05.2f" % (minutes, seconds)


def _paint(text, color, allow_color):
    if not allow_color or not color:
        return text
    return color + text + Style.RESET_ALL


class LineFormatter(object):
    """
    Formats mozlog data as ``<elapsed> <LEVEL>: <message>``.

    With *show_component*, the name of the proxy logger that emitted the
    line (``Sync``, ``Test Runner``, ...) is inserted before the message.
    """

    def __init__(self, allow_color=ALLOW_COLOR, show_component=False, start=None):
        self.allow_color = allow_color
        self.show_component = show_component
        self.start = time.time() * 1000 if start is None else start
        self.time_color = Fore.BLUE
        if mozinfo.os == "win":
            # unreadable on windows terminals otherwise
            self.time_color += Style.BRIGHT

    def __call__(self, data):
        elapsed = _format_seconds((data["time"] - self.start) / 1000)
        level = data["level"]
        line = "%s %s: " % (
            _paint(elapsed, self.time_color, self.allow_color),
            _paint(level, LEVEL_COLORS.get(level), self.allow_color),
        )
        if self.show_component and data.get("component"):
            line += "[%s] " % data["component"]
        return line + "%s\n" % data["message"]


def init_logger(debug=True, allow_color=ALLOW_COLOR, output=None):
    """
    Initialize the mozlog logger. Must be called before using logs, and
    may be called again: the previous handlers are replaced.

    In *debug* mode, debug lines are shown and every line is tagged with
    its component.
    """
    # late binding of sys.stderr is required for windows color to work
    output = output or sys.stderr
    formatter = LineFormatter(allow_color=allow_color, show_component=debug)

    logger = StructuredLogger(LOGGER_NAME)
    # handlers are shared by every logger of the same name
    for handler in list(logger.handlers):
        logger.remove_handler(handler)
    logger.add_handler(
        LogLevelFilter(StreamHandler(output, formatter), "debug" if debug else "info")
    )

    set_default_logger(logger)
    return logger


COLORS = {}
NO_COLORS = {}

for prefix, st in (("b", Back), ("s", Style), ("f", Fore)):
    for name, value in st.__dict__.items():
        COLORS[prefix + name] = value
        NO_COLORS[prefix + name] = ""


def colorize(text, allow_color=ALLOW_COLOR):
    """
    Format *text* with colorama codes, e.g. ``"{fRED}error{sRESET_ALL}"``.

    Keys are the colorama names prefixed with ``b`` (Back), ``s`` (Style)
    or ``f`` (Fore). Without *allow_color* the keys are replaced by empty
    strings.
    """
    return text.format(**(COLORS if allow_color else NO_COLORS))

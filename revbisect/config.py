# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""
Reading and writing of the configuration file.
"""

import os

from configobj import ConfigObj, ParseError

from revbisect.errors import ConfigurationError
from revbisect.log import colorize

DEFAULT_CONF_FNAME = os.path.expanduser(os.path.join("~", ".revbisect", "revbisect.cfg"))
DEFAULT_SYNC_COMMAND = "svn update -r {revision}"

# default values when not defined in config file.
# Note that this is also the list of options that can be used in config file
DEFAULTS = {
    "test-name": "revision",
    "outdir": None,
    "sync-command": DEFAULT_SYNC_COMMAND,
    "working-copy": None,
    "quiet": "",
}


def get_config(conf_path):
    """
    Get custom defaults from configuration file in argument.
    """
    defaults = dict(DEFAULTS)
    try:
        config = ConfigObj(conf_path)
    except ParseError as exc:
        raise ConfigurationError(
            "Error while reading the config file %s:\n  %s" % (conf_path, exc)
        )
    for key, value in config.items():
        if not isinstance(value, str):
            raise ConfigurationError(
                "Invalid value for %s in the config file %s: %r"
                " (quote values that contain a comma)" % (key, conf_path, value)
            )
    defaults.update(config)

    return defaults


def _get_outdir(default):
    print(
        "You can configure a directory where the output and log files of"
        " every tested revision will be written."
    )
    print(
        "I recommend using %s. Leave blank to use that default. If you"
        " prefer to use the temporary directory of your system type NONE,"
        " else you can just define a path that you would like to use." % default
    )
    value = input("outdir: ")
    if value == "NONE":
        return ""
    elif value:
        outdir = os.path.realpath(value)
    else:
        outdir = default

    if outdir:
        if not os.path.isdir(outdir):
            os.makedirs(outdir)
    return outdir


def _get_sync_command(default):
    print(
        "The sync command brings the working copy to the revision to test."
        " It must contain the {revision} placeholder. Leave blank to use"
        " %r." % default
    )
    while True:
        value = input("sync-command: ")
        if not value or "{revision}" in value:
            break
        print("The command must contain {revision}.")
    return value or default


CONF_HELP = """\
# ------ revbisect configuration file ------

# Most of the command line options can be used in here.
# Just remove the -- from the long option names, e.g.

# test-name = mytest
# quiet = yes


"""


def write_config(conf_path):
    conf_dir = os.path.dirname(conf_path)
    if not os.path.isdir(conf_dir):
        os.makedirs(conf_dir)

    config = ConfigObj(conf_path)
    if not config.initial_comment:
        config.initial_comment = CONF_HELP.splitlines()

    def _set_option(optname, getfunc, default):
        print()
        if optname not in config:
            value = getfunc(default)
            if value is not None:
                config[optname] = value
            else:
                value = default
        else:
            print("%s already defined." % optname)
            value = config[optname]
        name = colorize("{fGREEN}%s{sRESET_ALL}" % optname)
        print("%s: %s" % (name, value))

    _set_option("outdir", _get_outdir, os.path.join(conf_dir, "outputs"))
    _set_option("sync-command", _get_sync_command, DEFAULT_SYNC_COMMAND)

    config.write()

    print()
    print(colorize("Config file {sBRIGHT}%s{sRESET_ALL} written." % conf_path))
    print("Note you can edit it manually, and there are other options you can configure.")

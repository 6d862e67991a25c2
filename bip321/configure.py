
import io
import os

from configparser import ConfigParser, NoOptionError, NoSectionError

from bip321.support import (get_log, set_logging_level, set_logging_color,
                            bip321print)
from bip321.types import validate_network

log = get_log()


class AttributeDict(object):
    """
    A class to convert a nested Dictionary into an object with key-values
    accessibly using attribute notation (AttributeDict.attribute) instead of
    key notation (Dict["key"]). This class recursively sets Dicts to objects,
    allowing you to recurse down nested dicts (like: AttributeDict.attr.attr)
    """

    def __init__(self, **entries):
        self.add_entries(**entries)

    def add_entries(self, **entries):
        for key, value in entries.items():
            if isinstance(value, dict):
                self.__dict__[key] = AttributeDict(**value)
            else:
                self.__dict__[key] = value

    def __getitem__(self, key):
        """
        Provides dict-style access to attributes
        """
        return getattr(self, key)


global_singleton = AttributeDict()
global_singleton.config = ConfigParser(strict=False)
global_singleton.config_location = None


def bip321_single():
    return global_singleton

defaultconfig = \
    """
[BIP321]
# Network that payment requests are expected to be for: one of
# mainnet, testnet, signet, regtest. Leave empty to accept payment
# methods for any network (no cross-network check is made).
network =

[LOGGING]
# Set the log level for the output to the terminal/console
# Possible choices: DEBUG / INFO / WARNING / ERROR
console_log_level = WARNING

# Use color-coded log messages to help distinguish log levels?:
color = true
"""

required_options = {'BIP321': ['network'],
                    'LOGGING': ['console_log_level', 'color']}


def set_config(cfg):
    global_singleton.config = cfg


def get_network():
    """Returns the configured expected network name, or None
    if payment requests for any network are accepted"""
    try:
        network = global_singleton.config.get("BIP321", "network").strip()
    except (NoSectionError, NoOptionError):
        return None
    if not network:
        return None
    return validate_network(network)


def load_program_config(config_path=""):
    """ Loads the default configuration, overlaid with the
    file at config_path if one is given. A missing file is
    not an error: the defaults are used.
    """
    global_singleton.config = ConfigParser(strict=False)
    global_singleton.config.read_file(io.StringIO(defaultconfig))
    if config_path:
        if os.path.isdir(config_path):
            config_path = os.path.join(config_path, "bip321.cfg")
        loaded_files = global_singleton.config.read([config_path])
        if len(loaded_files) != 1:
            log.debug("No config file found at " + config_path +
                      ", using defaults")
        else:
            global_singleton.config_location = config_path

    for s in required_options:
        if not global_singleton.config.has_section(s):
            raise Exception(
                "Config file does not contain the required section: " + s)
        for o in required_options[s]:
            if not global_singleton.config.has_option(s, o):
                raise Exception("Config file does not contain the required "
                                "option '{}' in section '{}'.".format(o, s))

    # fail early on a typo in the network name
    get_network()

    loglevel = global_singleton.config.get("LOGGING", "console_log_level")
    try:
        set_logging_level(loglevel.upper())
    except ValueError:
        bip321print("Failed to set logging level, must be DEBUG, INFO, "
                    "WARNING, ERROR", "error")

    # Logs to the console are color-coded if user chooses
    if global_singleton.config.get("LOGGING", "color") == "true":
        set_logging_color(True)
    else:
        set_logging_color(False)


def load_test_config(**kwargs):
    load_program_config(**kwargs)
    global_singleton.config.set("LOGGING", "color", "false")
    set_logging_color(False)

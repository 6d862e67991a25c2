import logging

# bip321 library version
BIP321_VERSION = '0.1.0'

from chromalog.log import (
    ColorizingStreamHandler,
    ColorizingFormatter,
)
from chromalog.colorizer import GenericColorizer, MonochromaticColorizer
from colorama import Fore, Back, Style

# magic; importing e.g. 'info' actually instantiates
# that as a function that uses the color map
# defined below. ( noqa because flake doesn't understand)
from chromalog.mark.helpers.simple import (  # noqa: F401
    debug,
    info,
    important,
    success,
    warning,
    error,
    critical,
)

# our chosen colorings for log messages:
bip321_color_map = {
    'debug': (Style.DIM + Fore.LIGHTBLUE_EX, Style.RESET_ALL),
    'info': (Style.BRIGHT + Fore.BLUE, Style.RESET_ALL),
    'important': (Style.BRIGHT, Style.RESET_ALL),
    'success': (Fore.GREEN, Style.RESET_ALL),
    'warning': (Fore.YELLOW, Style.RESET_ALL),
    'error': (Fore.RED, Style.RESET_ALL),
    'critical': (Back.RED, Style.RESET_ALL),
}

_print_helpers = {
    'debug': debug,
    'info': info,
    'important': important,
    'success': success,
    'warning': warning,
    'error': error,
    'critical': critical,
}

class BIP321Colorizer(GenericColorizer):
    default_color_map = bip321_color_map

bip321_colorizer = BIP321Colorizer()

logFormatter = ColorizingFormatter(
    "%(asctime)s [%(levelname)s]  %(message)s")
log = logging.getLogger('bip321')
log.setLevel(logging.DEBUG)


class BIP321StreamHandler(ColorizingStreamHandler):

    def __init__(self):
        super().__init__(colorizer=bip321_colorizer)


handler = BIP321StreamHandler()
handler.setFormatter(logFormatter)
# quiet by default; applications raise this via set_logging_level
# or load_program_config.
handler.setLevel(logging.WARNING)
log.addHandler(handler)


def bip321print(msg, level="info"):
    """ Provides the ability to print messages
    with consistent formatting, outside the logging system
    (in case you don't want the standard log format).
    Example applications are: REPL style inspection of a
    parsed payment request, or a wallet presenting the
    summary produced by format_payment_methods_summary.
    """
    if level not in bip321_color_map:
        raise ValueError("Unsupported formatting: " + str(level))

    # .colorize_message function does a .format() on the string,
    # which does not work with literal braces; this should
    # result in output as intended:
    msg = msg.replace('{', '{{')
    msg = msg.replace('}', '}}')

    fmtfn = _print_helpers[level]
    print(bip321_colorizer.colorize_message(fmtfn(msg)))

def get_log():
    """
    provides the bip321 logging instance
    :return: log instance
    """
    return log

def set_logging_level(level):
    handler.setLevel(level)

def set_logging_color(colored=False):
    if colored:
        handler.colorizer = bip321_colorizer
    else:
        handler.colorizer = MonochromaticColorizer()

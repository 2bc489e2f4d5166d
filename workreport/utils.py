""" Logging, coloring, constants & text utilities """

import logging
import os
import re
import sys
# pylint:disable=unused-import
from pprint import pformat as pretty  # noqa: F401 (used by other modules)

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Constants
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

# Default maximum width
MAX_WIDTH = 79

# Framing characters of the console report
DEFAULT_SEPARATOR = "="
SUB_SEPARATOR = "-"

# Coloring
COLOR_ON = 1
COLOR_OFF = 0
COLOR_AUTO = 2

# Logging
LOG_ERROR = logging.ERROR
LOG_WARN = logging.WARN
LOG_INFO = logging.INFO
LOG_DEBUG = logging.DEBUG
LOG_DETAILS = 7


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Utils
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def header(text, separator=DEFAULT_SEPARATOR, width=MAX_WIDTH):
    """ Return text framed as a header """
    hr = width * separator
    return f"{hr}\n{text.center(width).rstrip()}\n{hr}"


def shorted(text, width=MAX_WIDTH):
    """
    Shorten text, make sure it's not cut in the middle of a word

    When multiple lines are provided in the text, each of them is
    shortened separately.
    """
    lines = []
    for line in text.split("\n"):
        if len(line) <= width:
            lines.append(line)
        else:
            # Remove any word after first overlapping non-word character
            lines.append("{0}...".format(
                re.sub(r"\W+\w*$", "", line[:width - 2])))
    return "\n".join(lines)


def strtobool(value):
    """
    Convert various boolean formats to True (1) or False (0).
    """
    value = str(value).strip().lower()
    mapping = {
        "y": 1, "yes": 1, "t": 1, "true": 1, "on": 1, "1": 1,
        "n": 0, "no": 0, "f": 0, "false": 0, "off": 0, "0": 0,
        }
    try:
        return mapping[value]
    except KeyError as exception:
        raise ValueError(f"Invalid boolean value '{value}'.") from exception


def pluralize(singular=None):
    """ Naively pluralize words """
    if singular.endswith("y") and not singular.endswith("ay"):
        plural = f"{singular[:-1]}ies"
    elif singular.endswith(("s", "x", "ch", "sh")):
        plural = f"{singular}es"
    else:
        plural = f"{singular}s"
    return plural


def listed(count, singular, plural=None):
    """
    Describe the number of items with correct inflection::

        listed(1, "commit") ................. 1 commit
        listed(3, "commit") ................. 3 commits
        listed(2, "branch") ................. 2 branches
        listed(7, "leaf", "leaves") ......... 7 leaves

    Any sized iterable can be used instead of the count.
    """
    if not isinstance(count, int):
        count = len(count)
    if plural is None:
        plural = pluralize(singular)
    return f"{count} {singular if count == 1 else plural}"


def info(message, newline=True):
    """ Log provided info message to the standard error output """
    sys.stderr.write(message + ("\n" if newline else ""))


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Logging
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Logging():
    """ Logging Configuration """

    # Color mapping
    COLORS = {
        LOG_ERROR: "red",
        LOG_WARN: "yellow",
        LOG_INFO: "blue",
        LOG_DEBUG: "green",
        LOG_DETAILS: "cyan",
        }
    # Environment variable mapping
    MAPPING = {
        0: LOG_WARN,
        1: LOG_INFO,
        2: LOG_DEBUG,
        3: LOG_DETAILS,
        }

    # Default log level is WARN
    _level = LOG_WARN

    # Already initialized loggers by their name
    _loggers: dict = {}

    def __init__(self, name='workreport'):
        # Use existing logger if already initialized
        try:
            self.logger = Logging._loggers[name]
        # Otherwise create a new one, save it and set it
        except KeyError:
            self.logger = self._create_logger(name=name)
            Logging._loggers[name] = self.logger
            self.set()

    class ColoredFormatter(logging.Formatter):
        """ Custom color formatter for logging """

        def format(self, record):
            # Handle the custom log level name
            if record.levelno == LOG_DETAILS:
                levelname = "DETAILS"
            else:
                levelname = record.levelname
            # Map log level to appropriate color
            try:
                text_color = Logging.COLORS[record.levelno]
            except KeyError:
                text_color = "black"
            # Color the log level, use brackets when coloring off
            if Coloring().enabled():
                level = color(f" {levelname} ", "lightwhite", text_color)
            else:
                level = f"[{levelname}]"
            return f"{level} {record.getMessage()}"

    @staticmethod
    def _create_logger(name='workreport'):
        """ Create the report logger """
        logger = logging.getLogger(name)
        handler = logging.StreamHandler()
        handler.setFormatter(Logging.ColoredFormatter())
        logger.addHandler(handler)
        # Additional level for detailed command output
        logging.addLevelName(LOG_DETAILS, "DETAILS")
        logger.details = lambda message: logger.log(
            LOG_DETAILS, message)  # NOQA
        return logger

    def set(self, level=None):
        """
        Set the default log level

        If the level is not specified environment variable DEBUG is used
        with the following meaning::

            DEBUG=0 ... LOG_WARN (default)
            DEBUG=1 ... LOG_INFO
            DEBUG=2 ... LOG_DEBUG
            DEBUG=3 ... LOG_DETAILS
        """
        if level is not None:
            Logging._level = level
        else:
            try:
                Logging._level = Logging.MAPPING[int(os.environ["DEBUG"])]
            except (KeyError, ValueError):
                Logging._level = LOG_WARN
        self.logger.setLevel(Logging._level)

    def get(self):
        """ Get the current log level """
        return self.logger.level


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Coloring
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def color(text, text_color=None, background=None, light=False, enabled=True):
    """
    Return text in desired color if coloring enabled

    Available colors: black red green yellow blue magenta cyan white.
    Alternatively color can be prefixed with "light", e.g. lightgreen.
    """
    colors = {"black": 30, "red": 31, "green": 32, "yellow": 33,
              "blue": 34, "magenta": 35, "cyan": 36, "white": 37}
    if not enabled:
        return text
    # Prepare colors (strip 'light' if present in color)
    if text_color and text_color.startswith("light"):
        light = True
        text_color = text_color[5:]
    text_color = text_color and f";{colors[text_color]}" or ""
    background = background and f";{colors[background] + 10}" or ""
    light = (1 if light else 0)
    start = f"\033[{light}{text_color}{background}m"
    finish = "\033[1;m"
    return "".join([start, text, finish])


class Coloring():
    """ Coloring configuration """

    # Default color mode is auto-detected from the terminal presence
    _mode = None
    # We need only a single config instance
    _instance = None

    def __new__(cls, *args, **kwargs):
        """ Make sure we create a single instance only """
        if not cls._instance:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, mode=None):
        """ Initialize the coloring mode """
        if self._mode is not None:
            return
        self.set(mode)

    def set(self, mode=None):
        """
        Set the coloring mode

        By default the feature is enabled when attached to a terminal.
        Possible values are::

            COLOR=0 ... COLOR_OFF .... coloring disabled
            COLOR=1 ... COLOR_ON ..... coloring enabled
            COLOR=2 ... COLOR_AUTO ... if terminal attached (default)

        Environment variable COLOR can be used to set up the coloring to
        the desired mode without modifying code.
        """
        if mode is None:
            if self._mode is not None:
                return
            try:
                mode = int(os.environ["COLOR"])
            except (KeyError, ValueError):
                mode = COLOR_AUTO
        if mode < 0 or mode > 2:
            raise RuntimeError(f"Invalid color mode '{mode}'")
        self._mode = mode

    def get(self):
        """ Get the current color mode """
        return self._mode

    def enabled(self):
        """ True if coloring is currently enabled """
        # In auto-detection mode color enabled when terminal attached
        if self._mode == COLOR_AUTO:
            return sys.stderr.isatty()
        return self._mode == COLOR_ON


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Default Logger
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

# Create the default output logger
log = Logging('workreport').logger

# coding: utf-8

""" Config, DateRange and Exceptions """

import codecs
import configparser
import datetime
import io
import os
import re
import sys
from configparser import NoOptionError, NoSectionError

from dateutil.relativedelta import SA as SATURDAY
from dateutil.relativedelta import SU as SUNDAY
from dateutil.relativedelta import relativedelta as delta

from workreport import utils
from workreport.utils import log

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Constants
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

# Config file location
CONFIG = os.path.expanduser("~/.workreport")

# Default maximum width
MAX_WIDTH = utils.MAX_WIDTH

# Default period, report directory and remote
DEFAULT_PERIOD = "week"
DEFAULT_DIRECTORY = "work-report"
DEFAULT_REMOTE = "origin"

# Day boundaries (end of day truncated to milliseconds)
START_OF_DAY = datetime.time(0, 0, 0, 0)
END_OF_DAY = datetime.time(23, 59, 59, 999000)

# Expected format of explicit dates
DATE_REGEXP = re.compile(r"^([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})$")


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Exceptions
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class GeneralError(Exception):
    """ General report error """


class ConfigError(GeneralError):
    """ Report configuration problem """


class ConfigFileError(ConfigError):
    """ Problem with the config file """


class OptionError(GeneralError):
    """ Invalid command line """


class InvalidDateError(OptionError):
    """ Date string is not a valid calendar date """


class InvertedRangeError(OptionError):
    """ Start of the date range is after its end """


class ReportError(GeneralError):
    """ Report generation error """


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Config
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Config(object):
    """ User config file """

    parser = None

    def __init__(self, config=None, path=None):
        """
        Read the config file

        Parse config from given string (config) or file (path).
        If no config or path given, default to "~/.workreport/config"
        which can be overridden by the ``WORKREPORT_DIR`` environment
        variable. The config file is optional: when the default file
        does not exist an empty config is used. Explicitly requested
        files have to exist.
        """
        # Read the config only once (unless explicitly provided)
        if self.parser is not None and config is None and path is None:
            return
        Config.parser = configparser.ConfigParser(interpolation=None)
        if config is not None:
            log.info("Inspecting config file from string")
            log.debug(utils.pretty(config))
            self.parser.read_file(io.StringIO(config))
            return
        explicit = path is not None
        if path is None:
            path = Config.path()
        if not explicit and not os.path.exists(path):
            log.info("No config file found at '{0}', using defaults.".format(
                path))
            return
        try:
            log.info("Inspecting config file '{0}'.".format(path))
            with codecs.open(path, "r", "utf8") as config_file:
                self.parser.read_file(config_file)
        except IOError as error:
            log.debug(error)
            Config.parser = None
            raise ConfigFileError(
                "Unable to read the config file '{0}'.".format(path))

    def _get(self, option, fallback=None):
        """ Fetch option from the general section """
        try:
            return self.parser.get("general", option)
        except (NoOptionError, NoSectionError):
            return fallback

    @property
    def author(self):
        """ Default author filter """
        return self._get("author")

    @property
    def period(self):
        """ Default period keyword """
        return self._get("period", DEFAULT_PERIOD)

    @property
    def directory(self):
        """ Report directory relative to the repository root """
        return self._get("directory", DEFAULT_DIRECTORY)

    @property
    def remote(self):
        """ Remote name stripped from remote-tracking branches """
        return self._get("remote", DEFAULT_REMOTE)

    @property
    def fetch(self):
        """ Refresh remote branches before the report, True by default """
        value = self._get("fetch", "yes")
        try:
            return bool(utils.strtobool(value))
        except ValueError:
            raise ConfigError(
                f"Invalid fetch value '{value}', should be boolean.")

    @property
    def width(self):
        """ Maximum width of the console report """
        value = self._get("width", MAX_WIDTH)
        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"Invalid width '{value}', should be integer.")

    @staticmethod
    def path():
        """ Detect config file path """
        try:
            directory = os.environ["WORKREPORT_DIR"]
        except KeyError:
            directory = CONFIG
        # Detect config file (even before options are parsed)
        filename = "config"
        matched = re.search(r"--confi?g?[ =](\S+)", " ".join(sys.argv))
        if matched:
            filepath, filename = os.path.split(matched.groups()[0])
            if filepath:
                directory = filepath
        return directory.rstrip("/") + "/" + filename

    @staticmethod
    def example():
        """ Return config example """
        return "[general]\nauthor = Name Surname\nperiod = week\n"


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Date
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def parse_date(date):
    """ Parse a YYYY-MM-DD string into a calendar date """
    matched = DATE_REGEXP.match(str(date).strip())
    try:
        if matched is None:
            raise ValueError("does not match YYYY-MM-DD")
        return datetime.date(*[int(part) for part in matched.groups()])
    except ValueError as error:
        log.debug(error)
        raise InvalidDateError(
            "Invalid date format: '{0}', use YYYY-MM-DD.".format(date))


def start_of_day(date):
    """ The first instant of given day """
    return datetime.datetime.combine(date, START_OF_DAY)


def end_of_day(date):
    """ The last instant of given day """
    return datetime.datetime.combine(date, END_OF_DAY)


class DateRange(object):
    """
    Inclusive time window of the report

    Both ``start`` and ``end`` are naive datetimes in the local time
    zone. Ranges produced by the resolver cover whole days: ``start``
    points to midnight of the first day, ``end`` to the last
    millisecond of the last day.
    """

    def __init__(self, start, end, period=None):
        """ Check and save the boundaries """
        if start > end:
            raise InvertedRangeError(
                "Start date must be before end date ({0} to {1}).".format(
                    start.date(), end.date()))
        self.start = start
        self.end = end
        self.period = period or "given date range"

    def __str__(self):
        """ String format for printing """
        return "{0} to {1}".format(self.start.date(), self.end.date())

    def __repr__(self):
        return "DateRange({0!r}, {1!r})".format(self.start, self.end)

    def __eq__(self, other):
        if not isinstance(other, DateRange):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __contains__(self, instant):
        """ Check whether the instant falls into the range """
        return self.start <= instant <= self.end

    @staticmethod
    def custom(since, until):
        """ Whole days from 'since' to 'until' (YYYY-MM-DD strings) """
        return DateRange(
            start_of_day(parse_date(since)),
            end_of_day(parse_date(until)))

    @staticmethod
    def last_week(now):
        """ The last full week, Sunday to Saturday """
        # Saturday strictly before today, a full week back on Saturdays
        until = now.date() + delta(days=-1, weekday=SATURDAY(-1))
        since = until - delta(days=6)
        return DateRange(
            start_of_day(since), end_of_day(until), "the last week")

    @staticmethod
    def this_week(now):
        """ Sunday of the current week to today """
        since = now.date() + delta(weekday=SUNDAY(-1))
        return DateRange(
            start_of_day(since), end_of_day(now.date()), "this week")

    @staticmethod
    def last_month(now):
        """ The previous calendar month """
        since = now.date() + delta(day=1, months=-1)
        until = since + delta(months=1, days=-1)
        return DateRange(
            start_of_day(since), end_of_day(until),
            since.strftime("%B %Y"))

    @staticmethod
    def this_month(now):
        """ First day of this month to today """
        since = now.date() + delta(day=1)
        return DateRange(
            start_of_day(since), end_of_day(now.date()),
            since.strftime("%B %Y"))

    @staticmethod
    def last_quarter(now):
        """ The previous calendar quarter """
        quarter = (now.month - 1) // 3
        if quarter == 0:
            since = datetime.date(now.year - 1, 10, 1)
        else:
            since = datetime.date(now.year, (quarter - 1) * 3 + 1, 1)
        until = since + delta(months=3, days=-1)
        return DateRange(
            start_of_day(since), end_of_day(until), "the last quarter")

    @staticmethod
    def last_year(now):
        """ The previous calendar year """
        since = datetime.date(now.year - 1, 1, 1)
        until = since + delta(years=1, days=-1)
        return DateRange(
            start_of_day(since), end_of_day(until), "the last year")

    @staticmethod
    def this_year(now):
        """ First of January to today """
        since = datetime.date(now.year, 1, 1)
        return DateRange(
            start_of_day(since), end_of_day(now.date()), "this year")

    @staticmethod
    def for_period(keyword, now):
        """ Detect desired time period for the keyword """
        keyword = (keyword or DEFAULT_PERIOD).strip().lower()
        try:
            method = PERIODS[keyword]
        except KeyError:
            log.warning(
                "Unknown period '{0}', using '{1}' instead.".format(
                    keyword, DEFAULT_PERIOD))
            method = PERIODS[DEFAULT_PERIOD]
        return method(now)


# Period keywords and their ranges
PERIODS = {
    "week": DateRange.last_week,
    "thisweek": DateRange.this_week,
    "month": DateRange.last_month,
    "thismonth": DateRange.this_month,
    "quarter": DateRange.last_quarter,
    "year": DateRange.last_year,
    "thisyear": DateRange.this_year,
    }


def resolve(period=None, since=None, until=None, now=None):
    """
    Resolve the date range of the report

    Explicit 'since' and 'until' dates take precedence when both are
    provided. Otherwise the period keyword is used, falling back to the
    last week. The ``now`` argument defaults to the current local time.
    """
    if now is None:
        now = datetime.datetime.now()
    if since and until:
        log.debug("Using custom date range {0} to {1}".format(since, until))
        return DateRange.custom(since, until)
    if since or until:
        log.warning(
            "Both --from and --to are needed for a custom range, "
            "using the period instead.")
    date_range = DateRange.for_period(period, now)
    log.debug("Resolved period '{0}' to {1}".format(period, date_range))
    return date_range

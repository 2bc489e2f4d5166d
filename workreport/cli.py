# coding: utf-8

"""
Command line interface for work-report

This module takes care of processing command line options and
running the main loop which gathers commits of all branches.
"""

import argparse
import os
import sys

import workreport.base
from workreport import report, utils
from workreport.commits import CommitAggregator
from workreport.git import GitRepo
from workreport.utils import log

USAGE = """
work-report [--period PERIOD | --from DATE --to DATE] [options]

Generate a report of all git commits for the given period across all
branches of the repository, grouped by branch with unique commits only.
By default the last full week (Sunday to Saturday) is reported.
""".strip()

EPILOG = """
period types:
  week       last week (Sunday to Saturday)
  thisweek   current week so far
  month      last month
  thismonth  current month so far
  quarter    last quarter
  year       last year
  thisyear   current year so far
""".strip()


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Options
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Options(object):
    """ Command line options parser """

    def __init__(self, arguments=None):
        """ Prepare the parser. """
        self.parser = argparse.ArgumentParser(
            usage=USAGE, epilog=EPILOG,
            formatter_class=argparse.RawDescriptionHelpFormatter)
        self._prepare_arguments(arguments)
        self.opt = None

        # Enable debugging output (even before options are parsed)
        if "--debug" in self.arguments:
            log.setLevel(utils.LOG_DEBUG)

        # Time & author selection
        group = self.parser.add_argument_group("Select")
        group.add_argument(
            "--period",
            help="Period type (default: week), see the list below")
        group.add_argument(
            "--from", dest="since", metavar="DATE",
            help="Start date in the YYYY-MM-DD format")
        group.add_argument(
            "--to", dest="until", metavar="DATE",
            help="End date in the YYYY-MM-DD format")
        group.add_argument(
            "--author",
            help="Filter commits by author")

        # Output options
        group = self.parser.add_argument_group("Output")
        group.add_argument(
            "--output", metavar="FILE",
            help="Markdown report path (default: work-report directory "
                 "in the repository root)")
        group.add_argument(
            "--width", type=int,
            help="Maximum width of the console report")

        # Other options
        group = self.parser.add_argument_group("Utils")
        group.add_argument(
            "--path", default=None,
            help="Git repository to inspect (default: current directory)")
        group.add_argument(
            "--no-fetch", dest="fetch", action="store_false", default=None,
            help="Do not refresh remote branches before the report")
        group.add_argument(
            "--config", metavar="FILE",
            help="Use alternate configuration file (default: 'config')")
        group.add_argument(
            "--debug", action="store_true",
            help="Turn on debugging output, do not catch exceptions")

    def _prepare_arguments(self, arguments):
        """ Prepare arguments (both direct and from command line) """
        if arguments is not None:
            if isinstance(arguments, str):
                self.arguments = arguments.split()
            else:
                self.arguments = arguments
        else:
            self.arguments = sys.argv[1:]

    def parse(self):
        """ Parse the options, fill defaults from the config """
        opt = self.parser.parse_args(self.arguments)
        self.opt = opt

        # Explicit config file has to exist, the default one is optional
        config = workreport.base.Config(path=opt.config) \
            if opt.config else workreport.base.Config()
        if opt.period is None:
            opt.period = config.period
        if opt.author is None:
            opt.author = config.author
        if opt.width is None:
            opt.width = config.width
        if opt.fetch is None:
            opt.fetch = config.fetch
        opt.remote = config.remote
        opt.directory = config.directory

        log.debug("Gathered options:")
        log.debug('options = {0}'.format(opt))
        return opt


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Main
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def main(arguments=None, now=None):
    """
    Parse options, gather commits and save the report

    Takes optional parameter ``arguments`` which can be either
    command line string or list of options. This is very useful
    for testing purposes. Function returns a tuple of the form::

        (commits_by_branch, date_range, output_path)

    with the gathered commits, the reported window and the path of
    the saved markdown report.
    """
    options = Options(arguments).parse()
    utils.info("Generating work report...")

    date_range = workreport.base.resolve(
        options.period, options.since, options.until, now=now)
    utils.info(f"Date range: {date_range}")
    if options.since and options.until:
        utils.info("Using custom date range")
    else:
        utils.info(f"Period: {date_range.period}")
    if options.author:
        utils.info(f"Filtering by author: {options.author}")

    # Gather unique commits of all branches
    repo = GitRepo(options.path, remote=options.remote)
    if options.fetch:
        repo.fetch()
    branches = repo.branches()
    commits_by_branch = CommitAggregator(repo).aggregate(
        branches, date_range, options.author)

    print(report.console(
        commits_by_branch, date_range, options.author, options.width))

    # Save the markdown report
    if options.output:
        output = os.path.abspath(options.output)
    else:
        output = os.path.join(
            repo.toplevel(), options.directory, report.filename(date_range))
    output = report.write(
        report.markdown(commits_by_branch, date_range, options.author),
        output)
    utils.info(f"\nMarkdown report saved to: {output}")

    return commits_by_branch, date_range, output

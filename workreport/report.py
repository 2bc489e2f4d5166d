# coding: utf-8

"""
Report rendering

Two flavours of the same content are produced: the console report
printed to the terminal and the markdown report saved to a file.
Branches are always listed in alphabetical order, commits keep the
order given by git (most recent first).
"""

import datetime
import os

import workreport.base
from workreport import utils
from workreport.utils import log

EMPTY = "No commits found for this period."


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Formatting
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def long_date(date):
    """ Human readable date, e.g. Sunday, February 1, 2026 """
    return f"{date:%A}, {date:%B} {date.day}, {date.year}"


def short_time(date):
    """ Time of the day, e.g. 3:04:05 PM """
    return date.strftime("%I:%M:%S %p").lstrip("0")


def filename(date_range):
    """ Default report file name for given date range """
    return "work-report-{0:%b-%d-%Y}-to-{1:%b-%d-%Y}.md".format(
        date_range.start, date_range.end)


def total(commits_by_branch):
    """ Number of commits across all branches """
    return sum(len(commits) for commits in commits_by_branch.values())


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Markdown
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def markdown(commits_by_branch, date_range, author=None, now=None):
    """ Generate the report in the markdown format """
    now = now or datetime.datetime.now()
    branches = sorted(commits_by_branch)
    lines = [
        "# Work Report",
        "",
        f"**Period:** {long_date(date_range.start)} - "
        f"{long_date(date_range.end)}",
        "",
        f"**Generated:** {long_date(now)} at {short_time(now)}",
        "",
        ]
    if author:
        lines.extend([f"**Author:** {author}", ""])
    lines.extend([
        f"**Total Commits:** {total(commits_by_branch)}",
        "",
        "---",
        "",
        "## Summary by Branch",
        "",
        "| Branch | Commits |",
        "|--------|--------:|",
        ])
    for branch in branches:
        lines.append(f"| {branch} | {len(commits_by_branch[branch])} |")
    lines.extend(["", "## Commits by Branch", ""])

    if not branches:
        lines.extend([f"*{EMPTY}*", ""])
    for branch in branches:
        lines.extend([f"### {branch}", ""])
        current_author = ""
        for commit in commits_by_branch[branch]:
            # Group by author unless filtered to a single one
            if not author and commit.author != current_author:
                current_author = commit.author
                lines.extend(["", f"**Author: {commit.author}**", ""])
            lines.append(f"- {commit.message}")
        lines.append("")
    return "\n".join(lines) + "\n"


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Console
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def console(commits_by_branch, date_range, author=None, width=utils.MAX_WIDTH):
    """ Generate a simple text report for the console output """
    lines = [
        "",
        utils.header("WORK REPORT", width=width),
        "",
        f"Period: {long_date(date_range.start)}",
        f"     to {long_date(date_range.end)}",
        "",
        ]
    if author:
        lines.append(f"Author: {author}")
    lines.append(f"Total Commits: {total(commits_by_branch)}")
    lines.extend(["", utils.SUB_SEPARATOR * width])

    branches = sorted(commits_by_branch)
    if not branches:
        lines.extend(["", EMPTY])
    for branch in branches:
        commits = commits_by_branch[branch]
        lines.extend([
            "",
            f"[{branch}] ({utils.listed(commits, 'commit')})",
            utils.SUB_SEPARATOR * (width // 2),
            ])
        for commit in commits:
            lines.append(utils.shorted(
                f"  [{commit.short_id}] {commit.message}", width))
            details = f"           {commit.date}"
            if not author:
                details += f" by {commit.author}"
            lines.append(details)
    lines.extend(["", utils.DEFAULT_SEPARATOR * width])
    return "\n".join(lines)


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Output
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def write(text, path):
    """ Save the report, create missing directories """
    path = os.path.abspath(path)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as output:
            output.write(text)
    except OSError as error:
        log.debug(error)
        raise workreport.base.ReportError(
            f"Unable to write the report to '{path}'")
    log.info("Report saved to %s", path)
    return path

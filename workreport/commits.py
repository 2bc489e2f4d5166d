""" Commit & CommitAggregator, the core of the history gathering """

from __future__ import annotations

import dataclasses
from typing import Optional, Protocol, Sequence

import workreport.base
from workreport.utils import listed, log

# Number of characters in the abbreviated commit id
SHORT_ID_LENGTH = 7

# Separator of the fields in the git log output
FIELD_SEPARATOR = "|||"


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Commit
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

@dataclasses.dataclass(frozen=True)
class Commit:
    """
    Single commit of the report

    Commits are identified by the full id only, the short id is used
    for display and does not have to be unique.
    """
    full_id: str
    message: str = dataclasses.field(default="", compare=False)
    author: str = dataclasses.field(default="", compare=False)
    date: str = dataclasses.field(default="", compare=False)

    @property
    def short_id(self) -> str:
        """ Abbreviated commit id """
        return self.full_id[:SHORT_ID_LENGTH]

    @classmethod
    def from_line(cls, line: str) -> Commit:
        """ Parse a single line of the git log output """
        # Subject is the only field which may contain the separator
        try:
            full_id, rest = line.split(FIELD_SEPARATOR, 1)
            message, author, date = rest.rsplit(FIELD_SEPARATOR, 2)
        except ValueError:
            raise workreport.base.ReportError(
                f"Unexpected git log output: '{line}'")
        return cls(
            full_id=full_id.strip(),
            message=message.strip(),
            author=author.strip(),
            date=date.strip())

    def __str__(self) -> str:
        return f"{self.short_id} - {self.message}"


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Commit Aggregator
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class CommitProvider(Protocol):
    """ Source of the commits of a single branch """

    def commits(
            self,
            branch: str,
            since,
            until,
            author: Optional[str] = None) -> list[Commit]:
        """ Commits of the branch in the window, most recent first """


class CommitAggregator():
    """
    Gather unique commits of all branches

    Commits reachable from multiple branches (e.g. a feature branch
    merged into main) are attributed to the first branch visited. The
    order of the branches given to ``aggregate()`` thus decides where
    the shared commits are listed.
    """

    def __init__(self, provider: CommitProvider) -> None:
        self.provider = provider

    def _fetch(
            self,
            branch: str,
            date_range: workreport.base.DateRange,
            author: Optional[str]) -> list[Commit]:
        """ Commits of a single branch, empty list on failure """
        try:
            return list(self.provider.commits(
                branch, date_range.start, date_range.end, author))
        except workreport.base.ReportError as error:
            log.debug("Skipping branch %s due to %s", branch, error)
            return []

    def aggregate(
            self,
            branches: Sequence[str],
            date_range: workreport.base.DateRange,
            author: Optional[str] = None) -> dict[str, list[Commit]]:
        """ Return unique commits for each branch with any """
        seen: set[str] = set()
        result: dict[str, list[Commit]] = {}
        for branch in dict.fromkeys(branches):
            unique = []
            for commit in self._fetch(branch, date_range, author):
                if commit.full_id in seen:
                    continue
                seen.add(commit.full_id)
                unique.append(commit)
            log.debug(
                "Branch %s: %s", branch, listed(unique, "unique commit"))
            if unique:
                result[branch] = unique
        log.info(
            "Found %s in %s",
            listed(len(seen), "commit"), listed(result, "branch"))
        return result

# coding: utf-8
""" Tests for the git repository access """

import logging
import os
import subprocess

import pytest
from _pytest.logging import LogCaptureFixture

import workreport.base
from workreport.commits import CommitAggregator
from workreport.git import GitRepo

DATE_RANGE = workreport.base.resolve(since="2026-01-01", until="2026-01-31")

pytestmark = pytest.mark.git


def messages(commits):
    return [commit.message for commit in commits]


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Branches
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def test_branches(git_repo):
    repo = GitRepo(git_repo["path"])
    assert repo.branches() == ["feature", "main", "remote-only"]
    # Local branch preferred, remote ref used for remote-only branches
    assert repo.refs["main"] == "main"
    assert repo.refs["remote-only"] == "origin/remote-only"


def test_branches_custom_remote(git_repo):
    repo = GitRepo(git_repo["path"], remote="upstream")
    assert repo.branches() == [
        "feature", "main", "origin/main", "origin/remote-only"]


def test_branches_outside_repository(tmp_path, caplog: LogCaptureFixture):
    with caplog.at_level(logging.ERROR):
        assert GitRepo(str(tmp_path)).branches() == []
    assert "Unable to list branches" in caplog.text


def test_branches_non_existent_path(caplog: LogCaptureFixture):
    with caplog.at_level(logging.ERROR):
        assert GitRepo("i-do-not-exist").branches() == []
    assert "Unable to access git repo" in caplog.text


def test_toplevel(git_repo, tmp_path):
    subdirectory = os.path.join(git_repo["path"], "sub")
    os.mkdir(subdirectory)
    assert os.path.realpath(GitRepo(subdirectory).toplevel()) == \
        os.path.realpath(git_repo["path"])
    outside = tmp_path / "outside"
    outside.mkdir()
    assert GitRepo(str(outside)).toplevel() == str(outside)


def test_fetch_without_remotes(git_repo):
    # Nothing to fetch, must not fail
    GitRepo(git_repo["path"]).fetch()


def test_fetch_failure_ignored(tmp_path, caplog: LogCaptureFixture):
    with caplog.at_level(logging.WARNING):
        assert GitRepo(str(tmp_path)).fetch() is False
    assert "Unable to fetch" in caplog.text


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Commits
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def test_commits_in_window(git_repo):
    repo = GitRepo(git_repo["path"])
    commits = repo.commits("main", DATE_RANGE.start, DATE_RANGE.end)
    assert messages(commits) == [
        "Merge feature", "Fix typo", "Add feature", "Add parser"]
    assert commits[1].full_id == git_repo["typo"]
    assert commits[1].short_id == git_repo["typo"][:7]
    assert commits[1].author == "Alice"
    assert commits[1].date == "2026-01-07 12:00"


def test_commits_window_boundaries(git_repo):
    repo = GitRepo(git_repo["path"])
    single = workreport.base.resolve(since="2026-01-07", until="2026-01-07")
    assert messages(repo.commits("main", single.start, single.end)) == [
        "Fix typo"]
    old = workreport.base.resolve(since="2025-12-01", until="2025-12-31")
    assert messages(repo.commits("main", old.start, old.end)) == [
        "Initial commit"]


def test_commits_author(git_repo):
    repo = GitRepo(git_repo["path"])
    commits = repo.commits(
        "main", DATE_RANGE.start, DATE_RANGE.end, author="Bob")
    assert messages(commits) == ["Add feature"]


def test_commits_unknown_branch(git_repo, caplog: LogCaptureFixture):
    repo = GitRepo(git_repo["path"])
    with caplog.at_level(logging.WARNING):
        assert repo.commits(
            "remote-only", DATE_RANGE.start, DATE_RANGE.end) == []
    assert "Unable to check commits" in caplog.text
    # Known after the branches have been listed
    repo.branches()
    assert messages(repo.commits(
        "remote-only", DATE_RANGE.start, DATE_RANGE.end))[0] == "Remote work"


def test_commits_non_existent_path():
    with pytest.raises(workreport.base.ReportError):
        GitRepo("i-do-not-exist").commits(
            "main", DATE_RANGE.start, DATE_RANGE.end)


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Aggregation
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def test_aggregate_all_branches(git_repo):
    repo = GitRepo(git_repo["path"])
    result = CommitAggregator(repo).aggregate(repo.branches(), DATE_RANGE)
    assert {branch: messages(commits)
            for branch, commits in result.items()} == {
        "feature": ["Add feature", "Add parser"],
        "main": ["Merge feature", "Fix typo"],
        "remote-only": ["Remote work"],
        }


def test_aggregate_merged_branch_dropped(git_repo):
    repo = GitRepo(git_repo["path"])
    result = CommitAggregator(repo).aggregate(["main", "feature"], DATE_RANGE)
    assert list(result) == ["main"]
    assert len(result["main"]) == 4


def test_aggregate_author(git_repo):
    repo = GitRepo(git_repo["path"])
    result = CommitAggregator(repo).aggregate(
        repo.branches(), DATE_RANGE, author="Carol")
    assert {branch: messages(commits)
            for branch, commits in result.items()} == {
        "remote-only": ["Remote work"]}


def test_aggregate_invalid_utf8(git_repo):
    """ Undecodable bytes are replaced, other branches still processed """
    path = git_repo["path"]
    tree = subprocess.run(
        ["git", "rev-parse", "main^{tree}"], cwd=path, check=True,
        capture_output=True, text=True).stdout.strip()
    # Root commit with latin-1 author and message, 2026-01-10 12:00 UTC
    signature = b"A\xedB <ab@example.org> 1768046400 +0000"
    content = (
        b"tree " + tree.encode() + b"\n"
        b"author " + signature + b"\n"
        b"committer " + signature + b"\n"
        b"\n"
        b"raw \xe9 msg\n")
    legacy = subprocess.run(
        ["git", "hash-object", "-t", "commit", "-w", "--stdin"],
        cwd=path, input=content, check=True, capture_output=True,
        ).stdout.decode().strip()
    subprocess.run(
        ["git", "update-ref", "refs/heads/legacy", legacy],
        cwd=path, check=True)

    repo = GitRepo(path)
    result = CommitAggregator(repo).aggregate(["legacy", "main"], DATE_RANGE)
    assert list(result) == ["legacy", "main"]
    assert result["legacy"][0].full_id == legacy
    assert result["legacy"][0].message == "raw \ufffd msg"
    assert result["legacy"][0].author == "A\ufffdB"
    assert len(result["main"]) == 4


def test_aggregate_missing_repository():
    repo = GitRepo("i-do-not-exist")
    assert CommitAggregator(repo).aggregate(["main"], DATE_RANGE) == {}

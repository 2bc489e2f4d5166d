# coding: utf-8
""" Shared fixtures: sample git repository """

import os
import subprocess
from pathlib import Path

import pytest

import workreport.base


def git(path: Path, *args: str, author: str = "Alice", date: str = "") -> str:
    """ Run git command in the sample repository as given author """
    env = dict(
        os.environ,
        GIT_AUTHOR_NAME=author,
        GIT_AUTHOR_EMAIL=f"{author.lower()}@example.org",
        GIT_COMMITTER_NAME=author,
        GIT_COMMITTER_EMAIL=f"{author.lower()}@example.org",
        GIT_CONFIG_NOSYSTEM="1",
        )
    if date:
        env["GIT_AUTHOR_DATE"] = env["GIT_COMMITTER_DATE"] = date
    process = subprocess.run(
        ["git", "-c", "commit.gpgsign=false", *args],
        cwd=path, env=env, check=True, capture_output=True, text=True)
    return process.stdout.strip()


def commit(path: Path, message: str, date: str, author: str = "Alice") -> str:
    """ Create an empty commit, return its full id """
    git(path, "commit", "--allow-empty", "-m", message,
        author=author, date=date)
    return git(path, "rev-parse", "HEAD")


@pytest.fixture
def minimal_config() -> None:
    """ Empty config with remote fetching disabled """
    workreport.base.Config("[general]\nfetch = no\n")


@pytest.fixture
def git_repo(tmp_path: Path) -> dict[str, str]:
    """
    Sample repository with a feature branch merged into main

    History (all commits at noon local time)::

        2025-12-20  initial        Alice  main
        2026-01-05  Add parser     Alice  main
        2026-01-06  Add feature    Bob    feature (merged into main)
        2026-01-07  Fix typo       Alice  main
        2026-01-08  Merge feature  Alice  main
        2026-01-09  Remote work    Carol  origin/remote-only

    In addition origin/main points to the same commit as local main.
    """
    path = tmp_path / "repo"
    path.mkdir()
    git(path, "init", "--quiet")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    ids = {"path": str(path)}
    ids["initial"] = commit(path, "Initial commit", "2025-12-20T12:00:00")
    ids["parser"] = commit(path, "Add parser", "2026-01-05T12:00:00")
    git(path, "checkout", "--quiet", "-b", "feature")
    ids["feature"] = commit(
        path, "Add feature", "2026-01-06T12:00:00", author="Bob")
    git(path, "checkout", "--quiet", "main")
    ids["typo"] = commit(path, "Fix typo", "2026-01-07T12:00:00")
    git(path, "merge", "--quiet", "--no-ff", "-m", "Merge feature",
        "feature", date="2026-01-08T12:00:00")
    ids["merge"] = git(path, "rev-parse", "HEAD")
    # Commit available on the remote only
    git(path, "checkout", "--quiet", "-b", "scratch")
    ids["remote"] = commit(
        path, "Remote work", "2026-01-09T12:00:00", author="Carol")
    git(path, "checkout", "--quiet", "main")
    git(path, "update-ref", "refs/remotes/origin/remote-only", ids["remote"])
    git(path, "update-ref", "refs/remotes/origin/main", ids["merge"])
    git(path, "branch", "--quiet", "-D", "scratch")
    return ids

"""
Git repository access

Branches are enumerated from both local and remote-tracking refs. The
remote prefix is stripped so that a local branch and its upstream
collapse into a single name, the local ref is used for the log when
both exist. Commits are read with ``git log`` restricted to the report
window and optionally to a single author.
"""

import os
import subprocess

import workreport.base
from workreport.commits import FIELD_SEPARATOR, Commit
from workreport.utils import log, pretty

# Log format of a single commit: full id, subject, author, author date
LOG_FORMAT = FIELD_SEPARATOR.join(["%H", "%s", "%an", "%ad"])
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M"

# Timestamp format used for the --since and --until options
WINDOW_FORMAT = "%Y-%m-%d %H:%M:%S"


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Git Repository
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~


class GitRepo():
    """ Git repository investigator """

    def __init__(self, path=None, remote=workreport.base.DEFAULT_REMOTE):
        """ Initialize the path and remote name. """
        self.path = path or os.getcwd()
        self.remote = remote
        # Short branch name -> ref used for the log
        self.refs = {}

    def _run(self, command):
        """ Run git command, return exit code, output and errors """
        log.details(pretty(command))
        try:
            with subprocess.Popen(
                    command,
                    cwd=self.path,
                    encoding='utf-8',
                    errors='replace',
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE
                    ) as process:
                output, errors = process.communicate()
        except OSError as error:
            log.debug(error)
            raise workreport.base.ReportError(
                f"Unable to access git repo '{self.path}'")
        return process.returncode, output.strip(), errors.strip()

    def toplevel(self):
        """ Root directory of the working tree (path itself if unknown) """
        try:
            code, output, errors = self._run(
                ["git", "rev-parse", "--show-toplevel"])
        except workreport.base.ReportError as error:
            log.debug(error)
            return os.path.abspath(self.path)
        if code != 0 or not output:
            log.debug(errors)
            return os.path.abspath(self.path)
        return output

    def fetch(self):
        """ Refresh remote branches, failures are ignored """
        log.info("Fetching remote branches in %s", self.path)
        try:
            code, _, errors = self._run(["git", "fetch", "--all", "--quiet"])
        except workreport.base.ReportError as error:
            log.warning(error)
            return False
        if code != 0:
            log.debug(errors)
            log.warning("Unable to fetch remote branches in '%s'", self.path)
            return False
        return True

    def _short(self, ref):
        """ Strip the remote prefix from the ref name """
        prefix = f"{self.remote}/"
        if self.remote and ref.startswith(prefix):
            return ref[len(prefix):]
        return ref

    def branches(self):
        """ List unique branch names, remote prefix stripped """
        try:
            code, output, errors = self._run(
                ["git", "branch", "-a", "--format=%(refname:short)"])
        except workreport.base.ReportError as error:
            log.error(error)
            return []
        if code != 0:
            log.debug(errors)
            log.error("Unable to list branches in '%s'", self.path)
            return []

        self.refs = {}
        for ref in output.split("\n"):
            ref = ref.strip()
            # Skip stashes, tags, bare remote names and symbolic heads
            if not ref or "stash" in ref or ref.startswith("tag:"):
                continue
            if ref == self.remote or ref.endswith("/HEAD") or ref == "HEAD":
                continue
            # Detached head listed as '(HEAD detached at ...)'
            if ref.startswith("("):
                continue
            # Local branches are listed first and take precedence
            self.refs.setdefault(self._short(ref), ref)
        log.debug("Detected branches: %s", ", ".join(self.refs))
        return list(self.refs)

    def commits(self, branch, since, until, author=None):
        """ List commits of the branch in given time window. """
        command = [
            "git", "log", self.refs.get(branch, branch),
            f"--since={since.strftime(WINDOW_FORMAT)}",
            f"--until={until.strftime(WINDOW_FORMAT)}",
            f"--format={LOG_FORMAT}",
            f"--date=format:{LOG_DATE_FORMAT}",
            ]
        if author:
            command.append(f"--author={author}")
        command.append("--")
        log.info("Checking commits of %s in %s", branch, self.path)

        code, output, errors = self._run(command)
        log.debug("git log output:")
        log.debug(output)
        if code != 0:
            log.debug(errors)
            log.warning("Unable to check commits of '%s' in '%s'",
                        branch, self.path)
            return []
        if not output:
            return []
        return [Commit.from_line(line)
                for line in output.split("\n") if line.strip()]

"""Git command execution.

Git is always invoked with an argument vector through
``asyncio.create_subprocess_exec``; no argument is ever interpolated into a
shell string. Folder paths, branch names and commit messages all reach git
as separate arguments.
"""

import asyncio
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from ..constants import DEFAULT_REMOTE, GIT_TIMEOUT
from ..models import RepositoryHandle
from .errors import GitNotFoundError
from .paths import normalize_repo_path


@dataclass(frozen=True)
class GitOutput:
    """Captured result of a git invocation."""

    stdout: str
    stderr: str
    returncode: int


class GitCommandError(Exception):
    """Raised when git exits non-zero, cannot start, or times out.

    ``stderr`` is diagnostic text for logs. It may contain local paths or
    credential hints and is never returned to callers verbatim.
    """

    def __init__(self, args: tuple[str, ...], returncode: int, stderr: str, stdout: str = ""):
        self.git_args = args
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        command = args[0] if args else "git"
        super().__init__(f"git {command} failed with exit code {returncode}")

    @property
    def output(self) -> str:
        """Text used for classification.

        stderr wins; stdout is only used when git printed nothing on stderr,
        so file names listed on stdout cannot change the classification.
        """
        return self.stderr.strip() or self.stdout.strip()


def _git_environment() -> dict[str, str]:
    env = dict(os.environ)
    # Fail instead of waiting for credentials on a terminal nobody sees
    env["GIT_TERMINAL_PROMPT"] = "0"
    # Untranslated messages keep error classification stable
    env["LC_ALL"] = "C"
    env["LANGUAGE"] = "C"
    # Paths given after "--" are never treated as globs or magic pathspecs
    env["GIT_LITERAL_PATHSPECS"] = "1"
    return env


async def run_git(
    cwd: str | Path,
    *args: str,
    timeout: float = GIT_TIMEOUT,
    check: bool = True,
) -> GitOutput:
    """Run a git command and capture its output.

    Args:
        cwd: Working directory for git command
        *args: Git command arguments (e.g., "status", "--porcelain")
        timeout: Seconds before the process is killed
        check: Raise GitCommandError on non-zero exit

    Returns:
        GitOutput with decoded stdout/stderr

    Raises:
        GitNotFoundError: If the git binary is not on PATH
        GitCommandError: On non-zero exit (when check=True), start failure or timeout
    """
    if shutil.which("git") is None:
        raise GitNotFoundError()

    try:
        process = await asyncio.create_subprocess_exec(
            "git", *args,
            cwd=str(cwd),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=_git_environment(),
        )
    except (FileNotFoundError, NotADirectoryError, PermissionError) as err:
        raise GitCommandError(args, -1, f"cannot run git in working directory: {err}") from err

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as err:
        process.kill()
        await process.wait()
        command = args[0] if args else "git"
        raise GitCommandError(args, -1, f"git {command} timed out after {timeout}s") from err

    result = GitOutput(
        stdout=stdout_bytes.decode("utf-8", errors="replace"),
        stderr=stderr_bytes.decode("utf-8", errors="replace"),
        returncode=process.returncode if process.returncode is not None else -1,
    )
    if check and result.returncode != 0:
        raise GitCommandError(args, result.returncode, result.stderr, result.stdout)
    return result


async def find_repo_root(path: str | Path) -> str | None:
    """Find the git repository root for a given path.

    Returns None when the path is not inside a repository (or does not exist).
    That is an expected answer, not a failure.
    """
    if not os.path.isdir(path):
        return None
    try:
        result = await run_git(path, "rev-parse", "--show-toplevel")
    except GitCommandError:
        return None
    top_level = result.stdout.strip()
    return os.path.normpath(top_level) if top_level else None


async def current_branch(repo_root: str | Path) -> str:
    """Get the current branch name ("HEAD" when detached)."""
    result = await run_git(repo_root, "branch", "--show-current")
    return result.stdout.strip() or "HEAD"


async def remote_url(repo_root: str | Path, remote: str = DEFAULT_REMOTE) -> str | None:
    """Get the URL of ``remote``, or None if it is not configured."""
    try:
        result = await run_git(repo_root, "remote", "get-url", remote)
    except GitCommandError:
        return None
    return result.stdout.strip() or None


async def get_repository_handle(path: str | Path) -> RepositoryHandle | None:
    """Resolve repository root, branch and remote for an on-disk location."""
    repo_root = await find_repo_root(path)
    if repo_root is None:
        return None

    branch, url = await asyncio.gather(current_branch(repo_root), remote_url(repo_root))
    return RepositoryHandle(repo_root=repo_root, branch=branch, remote_url=url)


async def list_ignored_paths(repo_root: str | Path, timeout: float = GIT_TIMEOUT) -> frozenset[str]:
    """Paths excluded by the repository's ignore rules.

    Wholly ignored directories are reported once (``--directory``), so
    callers test coverage with a prefix match.

    Returns:
        Repository paths such as ``/build`` or ``/notes/draft.md``
    """
    result = await run_git(
        repo_root,
        "ls-files", "-z", "--others", "--ignored", "--exclude-standard", "--directory",
        timeout=timeout,
    )
    return frozenset(
        normalize_repo_path(entry)
        for entry in result.stdout.split("\0")
        if entry
    )

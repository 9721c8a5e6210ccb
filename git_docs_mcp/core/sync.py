"""Git synchronization: status, log, commit, push and pull.

Each ``SyncController`` method returns its result model on success and a
``GitErrorInfo`` when git fails. Validation problems (bad commit message,
paths outside the repository) raise ``StorageError`` before git runs.
"""

import re
from collections.abc import Iterable

from ..constants import (
    COMMIT_MESSAGE_MAX_LENGTH,
    COMMIT_MESSAGE_MIN_LENGTH,
    DEFAULT_LOG_LIMIT,
    DEFAULT_REMOTE,
    GIT_TIMEOUT,
    MAX_LOG_LIMIT,
    ChangeStatus,
    ErrorCode,
    GitErrorCode,
)
from ..models import (
    ChangedFile,
    CommitInfo,
    CommitResult,
    GitErrorInfo,
    GitStatus,
    PullResult,
    PushResult,
)
from .errors import CommitMessageError, PathOutsideRootsError, PathTraversalError, log_error
from .git import GitCommandError, GitOutput, current_branch, run_git
from .paths import is_within, relative_to, resolve_and_contain

# ============================================================================
# Git error classification
# ============================================================================

# Ordered: the first rule with a matching substring wins.
_GIT_ERROR_RULES: tuple[tuple[GitErrorCode, tuple[str, ...], str], ...] = (
    (
        GitErrorCode.AUTH_FAILED,
        ("authentication", "permission denied", "could not read", "invalid credentials"),
        "Authentication failed. Check your git credentials.",
    ),
    (
        GitErrorCode.NETWORK_ERROR,
        ("could not resolve host", "network", "connection refused", "unable to access"),
        "Network error. Check your internet connection.",
    ),
    (
        GitErrorCode.PUSH_REJECTED,
        ("rejected", "non-fast-forward", "fetch first"),
        "Push rejected. Pull changes first and resolve any conflicts.",
    ),
    (
        GitErrorCode.MERGE_CONFLICT,
        ("conflict", "merge"),
        "Merge conflict detected. Resolve conflicts before continuing.",
    ),
    (
        GitErrorCode.NOTHING_TO_COMMIT,
        ("nothing to commit", "nothing added to commit", "no changes"),
        "No changes to commit.",
    ),
    (
        GitErrorCode.TIMEOUT,
        ("timeout", "timed out"),
        "Git operation timed out. Try again.",
    ),
)

_GENERIC_GIT_ERROR = "Git operation failed. Check the logs for details."


def parse_git_error(error: BaseException | str) -> GitErrorInfo:
    """Parse git error output into a user-friendly message and stable code.

    Matching is a case-insensitive substring heuristic over git's free text;
    anything unrecognised becomes ``GIT_ERROR``.
    """
    if isinstance(error, GitCommandError):
        text = error.output
    else:
        text = str(error)
    lower_text = text.lower()

    for code, needles, message in _GIT_ERROR_RULES:
        if any(needle in lower_text for needle in needles):
            return GitErrorInfo(message=message, code=code)

    return GitErrorInfo(message=_GENERIC_GIT_ERROR, code=GitErrorCode.GIT_ERROR)


def validate_commit_message(message: str | None) -> str:
    """Trim and validate a commit message.

    Raises:
        CommitMessageError: Missing, too short or too long message
    """
    if not message or not isinstance(message, str) or not message.strip():
        raise CommitMessageError(ErrorCode.MESSAGE_REQUIRED, "Commit message is required")

    trimmed = message.strip()
    if len(trimmed) < COMMIT_MESSAGE_MIN_LENGTH:
        raise CommitMessageError(
            ErrorCode.MESSAGE_TOO_SHORT,
            f"Commit message must be at least {COMMIT_MESSAGE_MIN_LENGTH} characters",
        )
    if len(trimmed) > COMMIT_MESSAGE_MAX_LENGTH:
        raise CommitMessageError(
            ErrorCode.MESSAGE_TOO_LONG,
            f"Commit message must be {COMMIT_MESSAGE_MAX_LENGTH} characters or less",
        )
    return trimmed


# ============================================================================
# Output parsing
# ============================================================================

_BRANCH_HEADER = re.compile(
    r'^(?:No commits yet on |Initial commit on )?'
    r'(?P<branch>.+?)'
    r'(?:\.\.\.(?P<upstream>\S+))?'
    r'(?: \[(?P<tracking>[^\]]*)\])?$'
)

_STATUS_CODES = {
    'M': ChangeStatus.MODIFIED,
    'T': ChangeStatus.MODIFIED,
    'A': ChangeStatus.ADDED,
    'D': ChangeStatus.DELETED,
    'R': ChangeStatus.RENAMED,
    'C': ChangeStatus.COPIED,
}

_CONFLICT_PAIRS = {('D', 'D'), ('A', 'A')}

_LOG_FORMAT = "%H%x1f%h%x1f%an%x1f%ae%x1f%aI%x1f%s%x1e"


def _parse_branch_header(header: str) -> tuple[str, str | None, int, int]:
    match = _BRANCH_HEADER.match(header)
    if not match or header.startswith("HEAD (no branch)"):
        return "HEAD", None, 0, 0

    tracking = match.group("tracking") or ""
    ahead = re.search(r'ahead (\d+)', tracking)
    behind = re.search(r'behind (\d+)', tracking)
    return (
        match.group("branch"),
        match.group("upstream"),
        int(ahead.group(1)) if ahead else 0,
        int(behind.group(1)) if behind else 0,
    )


def _changed_files(x: str, y: str, path: str, original: str | None) -> list[ChangedFile]:
    if x == '?' and y == '?':
        return [ChangedFile(path=path, status=ChangeStatus.UNTRACKED, staged=False)]
    if x == '!':
        return []
    if 'U' in (x, y) or (x, y) in _CONFLICT_PAIRS:
        return [ChangedFile(path=path, status=ChangeStatus.CONFLICTED, staged=False)]

    files = []
    if x in _STATUS_CODES:
        files.append(ChangedFile(
            path=path,
            status=_STATUS_CODES[x],
            staged=True,
            original_path=original if x in 'RC' else None,
        ))
    if y in _STATUS_CODES:
        files.append(ChangedFile(path=path, status=_STATUS_CODES[y], staged=False))
    return files


def parse_status_output(output: str) -> GitStatus:
    """Parse ``git status --porcelain=v1 --branch -z`` output.

    Paths are returned as repository paths (``/docs/a.md``).
    """
    branch, upstream, ahead, behind = "HEAD", None, 0, 0
    files: list[ChangedFile] = []

    records = output.split('\0')
    index = 0
    while index < len(records):
        record = records[index]
        index += 1
        if not record:
            continue
        if record.startswith('## '):
            branch, upstream, ahead, behind = _parse_branch_header(record[3:])
            continue
        if len(record) < 4:
            continue

        x, y, path = record[0], record[1], record[3:]
        original = None
        if x in 'RC' and index < len(records):
            # With -z the source path follows the destination as its own record
            original = '/' + records[index]
            index += 1
        files.extend(_changed_files(x, y, '/' + path, original))

    return GitStatus(branch=branch, upstream=upstream, ahead=ahead, behind=behind, files=files)


def parse_log_output(output: str) -> list[CommitInfo]:
    commits = []
    for record in output.split('\x1e'):
        fields = record.strip().split('\x1f')
        if len(fields) != 6:
            continue
        sha, short_sha, author, email, date, message = fields
        commits.append(CommitInfo(
            sha=sha, short_sha=short_sha, author=author, email=email, date=date, message=message
        ))
    return commits


# ============================================================================
# Controller
# ============================================================================

class SyncController:
    """Git operations for one repository checkout.

    Concurrent commits against the same working tree are not serialized
    here; callers keep a single writer per repository.
    """

    def __init__(
        self,
        repo_root: str,
        root_paths: Iterable[str] | None = None,
        timeout: float = GIT_TIMEOUT,
        remote: str = DEFAULT_REMOTE,
    ):
        self.repo_root = repo_root
        self.root_paths = list(root_paths) if root_paths is not None else None
        self.timeout = timeout
        self.remote = remote

    async def _git(self, *args: str, check: bool = True) -> GitOutput:
        return await run_git(self.repo_root, *args, timeout=self.timeout, check=check)

    def _failure(self, error: GitCommandError, operation: str) -> GitErrorInfo:
        # Raw output stays in the log; callers only see the classified message
        log_error(f"git {operation} failed (exit {error.returncode}): {error.output}")
        return parse_git_error(error)

    async def _has_unmerged_paths(self) -> bool:
        # git pull reports conflicts on stdout, next to the fetch summary on stderr
        try:
            unmerged = await self._git("diff", "--name-only", "--diff-filter=U", check=False)
        except GitCommandError:
            return False
        return unmerged.returncode == 0 and bool(unmerged.stdout.strip())

    def _pathspec(self, path: str) -> str:
        """Validate a caller-supplied path and return it as a git pathspec."""
        repo_path = relative_to(self.repo_root, resolve_and_contain(self.repo_root, path))
        if self.root_paths is not None and not is_within(repo_path, self.root_paths):
            raise PathOutsideRootsError()
        if '.git' in repo_path.split('/'):
            raise PathTraversalError("Access to the .git directory is not allowed")
        return repo_path.lstrip('/') or '.'

    async def _head(self) -> str | None:
        result = await self._git("rev-parse", "--verify", "--quiet", "HEAD", check=False)
        sha = result.stdout.strip()
        return sha if result.returncode == 0 and sha else None

    async def status(self) -> GitStatus | GitErrorInfo:
        try:
            result = await self._git(
                "status", "--porcelain=v1", "--branch", "-z", "--untracked-files=all"
            )
        except GitCommandError as e:
            return self._failure(e, "status")
        return parse_status_output(result.stdout)

    async def log(self, limit: int = DEFAULT_LOG_LIMIT, path: str | None = None) -> list[CommitInfo] | GitErrorInfo:
        """Recent commits, newest first; optionally only those touching ``path``."""
        limit = max(1, min(int(limit), MAX_LOG_LIMIT))
        args = ["log", f"--max-count={limit}", f"--format={_LOG_FORMAT}"]
        if path:
            args.extend(["--", self._pathspec(path)])

        try:
            result = await self._git(*args)
        except GitCommandError as e:
            if "does not have any commits" in e.output.lower():
                return []
            return self._failure(e, "log")
        return parse_log_output(result.stdout)

    async def commit(self, message: str, paths: Iterable[str] | None = None) -> CommitResult | GitErrorInfo:
        """Stage ``paths`` (if given) and commit what is staged."""
        trimmed = validate_commit_message(message)
        pathspecs = [self._pathspec(path) for path in paths or []]

        try:
            if pathspecs:
                await self._git("add", "--", *pathspecs)
            staged = await self._git("diff", "--cached", "--quiet", check=False)
            if staged.returncode == 0:
                return GitErrorInfo(message="No changes to commit.", code=GitErrorCode.NOTHING_TO_COMMIT)
            await self._git("commit", "-m", trimmed)
            head = await self._git("rev-parse", "HEAD")
        except GitCommandError as e:
            return self._failure(e, "commit")
        return CommitResult(sha=head.stdout.strip(), message=trimmed)

    async def push(self) -> PushResult | GitErrorInfo:
        try:
            branch = await current_branch(self.repo_root)
            if branch == "HEAD":
                return GitErrorInfo(
                    message="Cannot push from a detached HEAD. Check out a branch first.",
                    code=GitErrorCode.GIT_ERROR,
                )
            await self._git("push", "--set-upstream", self.remote, branch)
        except GitCommandError as e:
            return self._failure(e, "push")
        return PushResult(pushed=True, branch=branch)

    async def pull(self) -> PullResult | GitErrorInfo:
        """Fetch and merge the current branch from the remote."""
        try:
            previous = await self._head()
            branch = await current_branch(self.repo_root)
            if branch == "HEAD":
                return GitErrorInfo(
                    message="Cannot pull into a detached HEAD. Check out a branch first.",
                    code=GitErrorCode.GIT_ERROR,
                )
            await self._git("pull", "--no-rebase", "--no-edit", self.remote, branch)
            head = await self._head()

            changed_files: list[str] = []
            if previous and head and previous != head:
                diff = await self._git("diff", "--name-only", "-z", previous, head)
                changed_files = ['/' + name for name in diff.stdout.split('\0') if name]
        except GitCommandError as e:
            info = self._failure(e, "pull")
            if await self._has_unmerged_paths():
                return GitErrorInfo(
                    message="Merge conflict detected. Resolve conflicts before continuing.",
                    code=GitErrorCode.MERGE_CONFLICT,
                )
            return info

        return PullResult(
            updated=previous != head,
            previous_head=previous,
            head=head,
            changed_files=changed_files,
        )

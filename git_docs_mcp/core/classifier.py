"""Documentation folder classification for the folder picker.

Categories are evaluated in order: ``ignore`` (configured patterns or the
repository's own ignore rules) always wins, then ``preselect`` and
``suggest`` (both require at least one document below the folder), then
``normal``.
"""

import os
from collections.abc import Iterable

from ..constants import (
    DEFAULT_DOC_EXTENSIONS,
    GIT_TIMEOUT,
    MAX_DOCUMENT_SCAN_ENTRIES,
    FolderCategory,
)
from ..models import FolderSuggestion
from ..schemas.config import FolderPatterns
from .errors import PathTraversalError
from .git import list_ignored_paths
from .paths import normalize_repo_path, relative_to, resolve_and_contain
from .patterns import is_covered_by, matches_folder_pattern


class FolderClassifier:
    """Classify repository folders against one batch of ignore rules.

    Build one with ``await FolderClassifier.load(...)`` per request; the
    repository ignore rules are read once there and reused for every path.
    """

    def __init__(
        self,
        repo_root: str,
        patterns: FolderPatterns | None = None,
        ignored_paths: Iterable[str] = (),
        extensions: Iterable[str] | None = None,
        max_scan_entries: int = MAX_DOCUMENT_SCAN_ENTRIES,
    ):
        self.repo_root = repo_root
        self.patterns = patterns or FolderPatterns()
        self.ignored_paths = frozenset(ignored_paths)
        self.extensions = frozenset(
            ext.lower().lstrip('.') for ext in (extensions or DEFAULT_DOC_EXTENSIONS)
        )
        self.max_scan_entries = max_scan_entries

    @classmethod
    async def load(
        cls,
        repo_root: str,
        patterns: FolderPatterns | None = None,
        extensions: Iterable[str] | None = None,
        use_gitignore: bool = True,
        timeout: float = GIT_TIMEOUT,
    ) -> "FolderClassifier":
        ignored = await list_ignored_paths(repo_root, timeout=timeout) if use_gitignore else frozenset()
        return cls(repo_root, patterns=patterns, ignored_paths=ignored, extensions=extensions)

    def is_ignored(self, path: str) -> bool:
        return (
            matches_folder_pattern(path, self.patterns.ignore)
            or is_covered_by(path, self.ignored_paths)
        )

    def _is_document(self, filename: str) -> bool:
        if filename.startswith('.') or '.' not in filename:
            return False
        return filename.rsplit('.', 1)[-1].lower() in self.extensions

    def contains_documents(self, path: str) -> bool:
        """Check whether any document file exists below the folder.

        Hidden and ignored sub-folders are not searched. The walk stops at
        the first document, or after ``max_scan_entries`` entries.
        """
        try:
            top = resolve_and_contain(self.repo_root, path)
        except PathTraversalError:
            return False
        if not os.path.isdir(top):
            return False

        visited = 0
        for current, dirnames, filenames in os.walk(top):
            visited += len(dirnames) + len(filenames)
            if any(self._is_document(name) for name in filenames):
                return True
            if visited > self.max_scan_entries:
                return False

            current_path = relative_to(self.repo_root, current)
            dirnames[:] = [
                name for name in dirnames
                if not name.startswith('.')
                and not self.is_ignored(f"{current_path.rstrip('/')}/{name}")
            ]
        return False

    def _categorize(self, path: str, has_documents: bool | None = None) -> FolderCategory:
        if self.is_ignored(path):
            return FolderCategory.IGNORE

        for category, patterns in (
            (FolderCategory.PRESELECT, self.patterns.preselect),
            (FolderCategory.SUGGEST, self.patterns.suggest),
        ):
            if matches_folder_pattern(path, patterns):
                if has_documents is None:
                    has_documents = self.contains_documents(path)
                if has_documents:
                    return category

        return FolderCategory.NORMAL

    def classify(self, path: str) -> FolderCategory:
        """Categorize a folder path for the documentation folder picker."""
        return self._categorize(normalize_repo_path(path))

    def list_folder_suggestions(self, parent: str = "/") -> list[FolderSuggestion]:
        """List sub-folders of ``parent`` with their categories.

        Ignored folders are omitted entirely. Missing parents yield an empty
        list.
        """
        parent_path = normalize_repo_path(parent)
        directory = resolve_and_contain(self.repo_root, parent_path)
        if not os.path.isdir(directory):
            return []

        suggestions: list[FolderSuggestion] = []
        with os.scandir(directory) as scanner:
            names = sorted(
                (entry.name for entry in scanner
                 if entry.is_dir(follow_symlinks=False) and not entry.name.startswith('.')),
                key=str.lower,
            )

        for name in names:
            child = f"{parent_path.rstrip('/')}/{name}"
            if self.is_ignored(child):
                continue
            has_documents = self.contains_documents(child)
            suggestions.append(FolderSuggestion(
                path=child,
                name=name,
                category=self._categorize(child, has_documents),
                has_documents=has_documents,
            ))
        return suggestions


async def classify_folders(
    repo_root: str,
    paths: Iterable[str],
    patterns: FolderPatterns | None = None,
    extensions: Iterable[str] | None = None,
    use_gitignore: bool = True,
) -> dict[str, FolderCategory]:
    """Classify several folders with a single read of the ignore rules."""
    classifier = await FolderClassifier.load(
        repo_root, patterns=patterns, extensions=extensions, use_gitignore=use_gitignore
    )
    return {normalize_repo_path(path): classifier.classify(path) for path in paths}

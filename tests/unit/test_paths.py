"""Unit tests for repository path arithmetic and containment."""

import os

import pytest

from git_docs_mcp.core.errors import PathTraversalError
from git_docs_mcp.core.paths import (
    ensure_no_symlink_escape,
    is_well_formed,
    is_within,
    normalize_repo_path,
    path_depth,
    relative_to,
    resolve_and_contain,
)


class TestNormalizeRepoPath:
    """Tests for normalize_repo_path."""

    @pytest.mark.parametrize("raw,expected", [
        ("docs", "/docs"),
        ("/docs/", "/docs"),
        ("//docs/./guides", "/docs/guides"),
        ("docs\\guides", "/docs/guides"),
        ("/docs/a/../b", "/docs/b"),
        ("/../../etc", "/etc"),
        ("", "/"),
        ("/", "/"),
    ])
    def test_normalizes(self, raw, expected):
        assert normalize_repo_path(raw) == expected

    def test_depth(self):
        assert path_depth("/") == 0
        assert path_depth("/docs") == 1
        assert path_depth("/docs/guides/setup") == 3

    def test_well_formed(self):
        assert is_well_formed("/")
        assert is_well_formed("/docs/guides")
        assert not is_well_formed("docs")
        assert not is_well_formed("/docs/../etc")
        assert not is_well_formed("/docs//guides")
        assert not is_well_formed("/docs\0")


class TestIsWithin:
    """Tests for root containment."""

    def test_equal_path_is_within(self):
        assert is_within("/docs", ["/docs"])

    def test_nested_path_is_within(self):
        assert is_within("/docs/guides/setup.md", ["/docs"])

    def test_sibling_with_shared_prefix_is_not_within(self):
        assert not is_within("/docs-extra", ["/docs"])
        assert not is_within("/docs-extra/a.md", ["/docs"])

    def test_root_contains_everything(self):
        assert is_within("/anything/at/all", ["/"])
        assert is_within("/", ["/"])

    def test_no_roots_contains_nothing(self):
        assert not is_within("/docs", [])

    def test_any_of_several_roots(self):
        assert is_within("/wiki/page.md", ["/docs", "/wiki"])
        assert not is_within("/src/main.py", ["/docs", "/wiki"])

    def test_unnormalized_input(self):
        assert is_within("docs/guides/", ["/docs/"])


class TestResolveAndContain:
    """Tests for resolve_and_contain."""

    def test_traversal_is_rejected_without_filesystem_access(self):
        # /repo does not need to exist
        with pytest.raises(PathTraversalError):
            resolve_and_contain("/repo", "../../etc/passwd")

    def test_traversal_through_subfolder_is_rejected(self):
        with pytest.raises(PathTraversalError):
            resolve_and_contain("/repo", "/docs/../../etc/passwd")

    def test_sibling_directory_with_shared_prefix_is_rejected(self):
        with pytest.raises(PathTraversalError):
            resolve_and_contain("/repo", "../repo2/secret.md")

    def test_null_byte_is_rejected(self):
        with pytest.raises(PathTraversalError):
            resolve_and_contain("/repo", "docs/a.md\0.png")

    def test_leading_slash_is_optional(self):
        expected = os.path.normpath("/repo/docs/a.md")
        assert resolve_and_contain("/repo", "/docs/a.md") == expected
        assert resolve_and_contain("/repo", "docs/a.md") == expected

    def test_root_resolves_to_checkout(self):
        assert resolve_and_contain("/repo", "/") == os.path.normpath("/repo")

    def test_inner_dot_dot_that_stays_inside_is_allowed(self):
        assert resolve_and_contain("/repo", "docs/../wiki/a.md") == os.path.normpath("/repo/wiki/a.md")


class TestRelativeTo:
    """Tests for relative_to."""

    def test_nested(self):
        assert relative_to("/repo", "/repo/docs/a.md") == "/docs/a.md"

    def test_same_path_is_root(self):
        assert relative_to("/repo", "/repo") == "/"

    def test_outside_raises(self):
        with pytest.raises(PathTraversalError):
            relative_to("/repo", "/other/a.md")


class TestSymlinkEscape:
    """Tests for ensure_no_symlink_escape."""

    def test_symlink_inside_repository_is_allowed(self, tmp_path):
        repo = tmp_path / "repo"
        (repo / "docs").mkdir(parents=True)
        (repo / "docs" / "a.md").write_text("a")
        (repo / "link.md").symlink_to(repo / "docs" / "a.md")

        resolved = ensure_no_symlink_escape(str(repo), str(repo / "link.md"))
        assert resolved == (repo / "docs" / "a.md").resolve()

    def test_symlink_outside_repository_is_rejected(self, tmp_path):
        repo = tmp_path / "repo"
        repo.mkdir()
        outside = tmp_path / "secret.md"
        outside.write_text("secret")
        (repo / "escape.md").symlink_to(outside)

        with pytest.raises(PathTraversalError):
            ensure_no_symlink_escape(str(repo), str(repo / "escape.md"))

"""Integration tests for status, history, commit, push and pull."""

import shutil

import pytest

from git_docs_mcp.constants import ChangeStatus, GitErrorCode
from git_docs_mcp.core.errors import CommitMessageError, PathOutsideRootsError, PathTraversalError
from git_docs_mcp.core.sync import SyncController
from git_docs_mcp.models import (
    CommitResult,
    GitErrorInfo,
    GitStatus,
    PullResult,
    PushResult,
)

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


@pytest.mark.asyncio
class TestStatusAndLog:

    async def test_status_of_clean_repository(self, docs_repo):
        status = await SyncController(str(docs_repo)).status()

        assert isinstance(status, GitStatus)
        assert status.branch == "main"
        assert status.files == []

    async def test_status_reports_changes(self, docs_repo, git):
        (docs_repo / "docs" / "intro.md").write_text("# Intro, revised\n")
        (docs_repo / "docs" / "new page.md").write_text("# New\n")
        (docs_repo / "docs" / "guides" / "setup.md").unlink()
        git(docs_repo, "add", "docs/guides/setup.md")

        status = await SyncController(str(docs_repo)).status()

        assert {(f.path, f.status, f.staged) for f in status.files} == {
            ("/docs/intro.md", ChangeStatus.MODIFIED, False),
            ("/docs/new page.md", ChangeStatus.UNTRACKED, False),
            ("/docs/guides/setup.md", ChangeStatus.DELETED, True),
        }

    async def test_status_of_empty_repository(self, git_repo):
        status = await SyncController(str(git_repo)).status()

        assert status.branch == "main"

    async def test_log_of_empty_repository(self, git_repo):
        assert await SyncController(str(git_repo)).log() == []

    async def test_log(self, docs_repo):
        commits = await SyncController(str(docs_repo)).log()

        assert len(commits) == 1
        assert commits[0].message == "Initial docs"
        assert commits[0].author == "Doc Writer"
        assert len(commits[0].sha) == 40

    async def test_log_for_path_and_limit(self, docs_repo, git):
        for i in range(3):
            (docs_repo / "docs" / "intro.md").write_text(f"revision {i}\n")
            git(docs_repo, "commit", "-am", f"Revise intro {i}")
        (docs_repo / "README.md").write_text("changed\n")
        git(docs_repo, "commit", "-am", "Touch readme")

        controller = SyncController(str(docs_repo))
        intro_history = await controller.log(limit=2, path="/docs/intro.md")
        readme_history = await controller.log(path="README.md")

        assert [c.message for c in intro_history] == ["Revise intro 2", "Revise intro 1"]
        assert [c.message for c in readme_history] == ["Touch readme", "Initial docs"]

    async def test_log_path_traversal(self, docs_repo):
        with pytest.raises(PathTraversalError):
            await SyncController(str(docs_repo)).log(path="../../etc/passwd")


@pytest.mark.asyncio
class TestCommit:

    async def test_commit_paths(self, docs_repo):
        (docs_repo / "docs" / "intro.md").write_text("# Intro v2\n")
        (docs_repo / "docs" / "faq.md").write_text("# FAQ\n")
        controller = SyncController(str(docs_repo), root_paths=["/docs"])

        result = await controller.commit("  Update intro and add FAQ  ", ["/docs/intro.md", "/docs/faq.md"])

        assert isinstance(result, CommitResult)
        assert result.message == "Update intro and add FAQ"
        assert len(result.sha) == 40
        assert (await controller.status()).files == []
        assert (await controller.log(limit=1))[0].sha == result.sha

    async def test_commit_folder_stages_deletions(self, docs_repo):
        (docs_repo / "docs" / "guides" / "setup.md").unlink()
        controller = SyncController(str(docs_repo))

        result = await controller.commit("Remove setup guide", ["/docs/guides"])

        assert isinstance(result, CommitResult)
        assert (await controller.status()).files == []

    async def test_glob_characters_are_literal(self, docs_repo):
        (docs_repo / "docs" / "intro.md").write_text("changed\n")
        (docs_repo / "docs" / "*.md").write_text("star\n")
        controller = SyncController(str(docs_repo))

        await controller.commit("Add star page", ["/docs/*.md"])
        status = await controller.status()

        assert [(f.path, f.status) for f in status.files] == [("/docs/intro.md", ChangeStatus.MODIFIED)]

    async def test_nothing_to_commit(self, docs_repo, capsys):
        result = await SyncController(str(docs_repo)).commit("Empty commit")

        assert isinstance(result, GitErrorInfo)
        assert result.code == GitErrorCode.NOTHING_TO_COMMIT
        assert "git commit failed" not in capsys.readouterr().err

    async def test_unstaged_changes_without_paths(self, docs_repo):
        (docs_repo / "docs" / "intro.md").write_text("changed\n")

        result = await SyncController(str(docs_repo)).commit("Commit nothing staged")

        assert result.code == GitErrorCode.NOTHING_TO_COMMIT

    async def test_untracked_file_names_do_not_change_the_error(self, docs_repo):
        (docs_repo / "docs" / "merge-strategy.md").write_text("# Merging\n")
        (docs_repo / "docs" / "networking.md").write_text("# Network\n")

        result = await SyncController(str(docs_repo)).commit("Update docs")

        assert isinstance(result, GitErrorInfo)
        assert result.code == GitErrorCode.NOTHING_TO_COMMIT

    async def test_staging_unchanged_path(self, docs_repo, git):
        head = git(docs_repo, "rev-parse", "HEAD").strip()

        result = await SyncController(str(docs_repo)).commit("Touch intro", ["/docs/intro.md"])

        assert result.code == GitErrorCode.NOTHING_TO_COMMIT
        assert git(docs_repo, "rev-parse", "HEAD").strip() == head

    async def test_message_is_validated_before_git(self, docs_repo):
        (docs_repo / "docs" / "intro.md").write_text("changed\n")
        controller = SyncController(str(docs_repo))

        with pytest.raises(CommitMessageError):
            await controller.commit("no", ["/docs/intro.md"])

        assert len(await controller.log()) == 1

    async def test_path_outside_roots(self, docs_repo):
        (docs_repo / "README.md").write_text("changed\n")
        controller = SyncController(str(docs_repo), root_paths=["/docs"])

        with pytest.raises(PathOutsideRootsError):
            await controller.commit("Sneak in readme", ["/README.md"])

    async def test_git_directory_is_refused(self, docs_repo):
        with pytest.raises(PathTraversalError):
            await SyncController(str(docs_repo)).commit("Touch git dir", ["/.git/config"])


@pytest.mark.asyncio
class TestPushPull:

    async def test_push(self, remote_pair):
        local, _ = remote_pair
        (local / "docs" / "intro.md").write_text("pushed\n")
        controller = SyncController(str(local))
        await controller.commit("Push me", ["/docs/intro.md"])

        result = await controller.push()

        assert result == PushResult(pushed=True, branch="main")
        status = await controller.status()
        assert status.upstream == "origin/main"
        assert status.ahead == 0

    async def test_pull_reports_changed_files(self, remote_pair, git):
        local, other = remote_pair
        (other / "docs" / "faq.md").write_text("# FAQ\n")
        git(other, "add", "docs/faq.md")
        git(other, "commit", "-m", "Add FAQ")
        git(other, "push", "origin", "main")

        result = await SyncController(str(local)).pull()

        assert isinstance(result, PullResult)
        assert result.updated
        assert result.previous_head != result.head
        assert result.changed_files == ["/docs/faq.md"]
        assert (local / "docs" / "faq.md").exists()

    async def test_pull_when_up_to_date(self, remote_pair):
        local, _ = remote_pair

        result = await SyncController(str(local)).pull()

        assert not result.updated
        assert result.changed_files == []

    async def test_push_rejected(self, remote_pair, git):
        local, other = remote_pair
        (other / "docs" / "faq.md").write_text("# FAQ\n")
        git(other, "add", "docs/faq.md")
        git(other, "commit", "-m", "Add FAQ")
        git(other, "push", "origin", "main")

        (local / "docs" / "intro.md").write_text("diverged\n")
        controller = SyncController(str(local))
        await controller.commit("Diverge", ["/docs/intro.md"])

        result = await controller.push()

        assert isinstance(result, GitErrorInfo)
        assert result.code == GitErrorCode.PUSH_REJECTED

    async def test_pull_merge_conflict(self, remote_pair, git):
        local, other = remote_pair
        (other / "docs" / "intro.md").write_text("theirs\n")
        git(other, "commit", "-am", "Their intro")
        git(other, "push", "origin", "main")

        (local / "docs" / "intro.md").write_text("ours\n")
        controller = SyncController(str(local))
        await controller.commit("Our intro", ["/docs/intro.md"])

        result = await controller.pull()

        assert isinstance(result, GitErrorInfo)
        assert result.code == GitErrorCode.MERGE_CONFLICT
        status = await controller.status()
        assert [(f.path, f.status) for f in status.files] == [("/docs/intro.md", ChangeStatus.CONFLICTED)]

    async def test_push_without_remote(self, docs_repo):
        result = await SyncController(str(docs_repo)).push()

        assert isinstance(result, GitErrorInfo)
        assert result.message
        assert str(docs_repo) not in result.message

"""Tests for the commit walk and per-commit diffs."""

from __future__ import annotations

import os
import unittest

from git_repo_inspector.exceptions import MalformedError, NotFoundError, UnresolvableError, ValidationError
from git_repo_inspector.history import commit_changes, commit_file_diff, list_commits
from git_repo_inspector.models import ChangeKind, CommitChange, FileDiffPair
from git_repo_inspector.repository import open_repository

from tests.support import GitRepoTestCase


class HelloWorldScenarioTests(GitRepoTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.first = self.commit_file("a.txt", "hello", "add a")
        self.second = self.commit_file("a.txt", "world", "change a")
        self.handle = open_repository(self.repo)

    def test_lists_both_commits_newest_first(self) -> None:
        commits = list_commits(self.handle)

        self.assertEqual([c.hash for c in commits], [self.second, self.first])
        self.assertEqual(commits[0].parents, (self.first,))
        self.assertEqual(commits[1].parents, ())
        self.assertEqual(commits[0].message, "change a")
        self.assertEqual(commits[0].author, "Test Author")
        self.assertTrue(commits[0].date.isdigit())

    def test_changes_of_second_commit(self) -> None:
        self.assertEqual(
            commit_changes(self.handle, self.second),
            [CommitChange(path="a.txt", status=ChangeKind.MODIFIED)],
        )

    def test_file_diff_of_second_commit(self) -> None:
        self.assertEqual(
            commit_file_diff(self.handle, self.second, "a.txt"),
            FileDiffPair(original="hello", modified="world"),
        )

    def test_root_commit_diff_has_empty_original(self) -> None:
        self.assertEqual(
            commit_file_diff(self.handle, self.first, "a.txt"),
            FileDiffPair(original="", modified="hello"),
        )

    def test_untouched_path_yields_empty_pair(self) -> None:
        self.assertEqual(
            commit_file_diff(self.handle, self.second, "other.txt"),
            FileDiffPair(original="", modified=""),
        )


class ListCommitsTests(GitRepoTestCase):
    def test_unborn_head_is_unresolvable(self) -> None:
        with self.assertRaises(UnresolvableError):
            list_commits(open_repository(self.repo))

    def test_limit_caps_the_walk(self) -> None:
        for index in range(5):
            self.commit_file("n.txt", str(index))

        commits = list_commits(open_repository(self.repo), limit=3)

        self.assertEqual(len(commits), 3)
        for newer, older in zip(commits, commits[1:]):
            self.assertEqual(newer.parents[0], older.hash)

    def test_non_positive_limit_is_rejected(self) -> None:
        self.commit_file("a.txt", "x")
        with self.assertRaises(ValidationError):
            list_commits(open_repository(self.repo), limit=0)

    def test_merge_keeps_recorded_parent_order(self) -> None:
        base = self.commit_file("a.txt", "base")
        self.git("checkout", "--quiet", "-b", "side")
        side = self.commit_file("b.txt", "side")
        self.git("checkout", "--quiet", "main")
        mainline = self.commit_file("c.txt", "main")
        self.git("merge", "--quiet", "--no-ff", "-m", "merge side", "side")

        commits = list_commits(open_repository(self.repo))

        self.assertEqual(commits[0].parents, (mainline, side))
        self.assertEqual(commits[-1].hash, base)
        self.assertEqual(len(commits), 4)

    def test_message_is_trimmed(self) -> None:
        self.write("a.txt", "x")
        self.git("add", "a.txt")
        self.git("commit", "--quiet", "--cleanup=verbatim", "-m", "  subject\n\nbody line\n\n")

        self.assertEqual(list_commits(open_repository(self.repo))[0].message, "subject\n\nbody line")

    def test_message_with_control_characters_is_kept_whole(self) -> None:
        self.commit_file("a.txt", "x", "first\x1esecond\x1fthird")
        self.commit_file("a.txt", "y", "plain")

        commits = list_commits(open_repository(self.repo))

        self.assertEqual([c.message for c in commits], ["plain", "first\x1esecond\x1fthird"])
        self.assertEqual(commits[0].parents, (commits[1].hash,))


class CommitChangesTests(GitRepoTestCase):
    def test_root_commit_reports_every_path_added(self) -> None:
        self.write("a.txt", "a")
        self.write("dir/b.txt", "b")
        self.git("add", ".")
        self.git("commit", "--quiet", "-m", "root")

        changes = commit_changes(open_repository(self.repo), self.head())

        self.assertEqual(
            changes,
            [
                CommitChange(path="a.txt", status=ChangeKind.ADDED),
                CommitChange(path="dir/b.txt", status=ChangeKind.ADDED),
            ],
        )

    def test_deleted_path_is_reported(self) -> None:
        self.commit_file("gone.txt", "bye")
        self.git("rm", "--quiet", "gone.txt")
        self.git("commit", "--quiet", "-m", "remove")

        self.assertEqual(
            commit_changes(open_repository(self.repo), self.head()),
            [CommitChange(path="gone.txt", status=ChangeKind.DELETED)],
        )

    def test_merge_is_compared_with_first_parent(self) -> None:
        self.commit_file("a.txt", "base")
        self.git("checkout", "--quiet", "-b", "side")
        self.commit_file("side.txt", "side")
        self.git("checkout", "--quiet", "main")
        self.commit_file("main.txt", "main")
        self.git("merge", "--quiet", "--no-ff", "-m", "merge side", "side")

        self.assertEqual(
            commit_changes(open_repository(self.repo), self.head()),
            [CommitChange(path="side.txt", status=ChangeKind.ADDED)],
        )

    def test_rename_detection_is_opt_in(self) -> None:
        content = "line\n" * 50
        self.commit_file("old.txt", content)
        self.git("mv", "old.txt", "new.txt")
        self.git("commit", "--quiet", "-m", "rename")
        handle = open_repository(self.repo)

        self.assertEqual(
            commit_changes(handle, self.head()),
            [
                CommitChange(path="new.txt", status=ChangeKind.ADDED),
                CommitChange(path="old.txt", status=ChangeKind.DELETED),
            ],
        )
        self.assertEqual(
            commit_changes(handle, self.head(), detect_renames=True),
            [CommitChange(path="new.txt", status=ChangeKind.RENAMED)],
        )

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unsupported")
    def test_file_replaced_by_symlink_is_typechange(self) -> None:
        self.commit_file("target.txt", "t")
        self.commit_file("entry", "plain file")
        (self.repo / "entry").unlink()
        os.symlink("target.txt", self.repo / "entry")
        self.git("add", "entry")
        self.git("commit", "--quiet", "-m", "symlink")

        self.assertEqual(
            commit_changes(open_repository(self.repo), self.head()),
            [CommitChange(path="entry", status=ChangeKind.TYPECHANGE)],
        )

    def test_malformed_hash(self) -> None:
        self.commit_file("a.txt", "x")
        with self.assertRaises(MalformedError):
            commit_changes(open_repository(self.repo), "not-a-hash")

    def test_unknown_hash(self) -> None:
        self.commit_file("a.txt", "x")
        with self.assertRaises(NotFoundError):
            commit_changes(open_repository(self.repo), "f" * 40)

    def test_abbreviated_hash_resolves_to_its_commit(self) -> None:
        root = self.commit_file("a.txt", "x")
        self.commit_file("b.txt", "y")

        self.assertEqual(
            commit_changes(open_repository(self.repo), root[:7].upper()),
            [CommitChange(path="a.txt", status=ChangeKind.ADDED)],
        )

    def test_hex_named_branch_does_not_shadow_abbreviated_hash(self) -> None:
        root = self.commit_file("a.txt", "x")
        second = self.commit_file("b.txt", "y")
        self.git("branch", root[:7], second)

        self.assertEqual(
            commit_changes(open_repository(self.repo), root[:7]),
            [CommitChange(path="a.txt", status=ChangeKind.ADDED)],
        )

    def test_hex_named_branch_alone_is_not_a_commit(self) -> None:
        self.commit_file("a.txt", "x")
        self.git("branch", "beef")
        if self.git("rev-parse", "--disambiguate=beef"):
            self.skipTest("an object id happens to start with beef")

        with self.assertRaises(NotFoundError):
            commit_changes(open_repository(self.repo), "beef")

    def test_tree_hash_is_not_a_commit(self) -> None:
        self.commit_file("a.txt", "x")
        tree = self.git("rev-parse", "HEAD^{tree}")
        with self.assertRaises(NotFoundError):
            commit_changes(open_repository(self.repo), tree)


class CommitFileDiffTests(GitRepoTestCase):
    def test_deleted_path_has_empty_modified_side(self) -> None:
        self.commit_file("gone.txt", "bye")
        self.git("rm", "--quiet", "gone.txt")
        self.git("commit", "--quiet", "-m", "remove")

        self.assertEqual(
            commit_file_diff(open_repository(self.repo), self.head(), "gone.txt"),
            FileDiffPair(original="bye", modified=""),
        )

    def test_content_is_exact_and_invalid_utf8_replaced(self) -> None:
        self.commit_file("crlf.txt", b"one\r\ntwo\r\n")
        self.commit_file("crlf.txt", b"one\r\n\xfftwo\r\n")

        pair = commit_file_diff(open_repository(self.repo), self.head(), "crlf.txt")

        self.assertEqual(pair.original, "one\r\ntwo\r\n")
        self.assertEqual(pair.modified, "one\r\n�two\r\n")

    def test_unknown_commit_still_raises(self) -> None:
        self.commit_file("a.txt", "x")
        with self.assertRaises(NotFoundError):
            commit_file_diff(open_repository(self.repo), "0" * 40, "a.txt")


if __name__ == "__main__":
    unittest.main()

"""Navigation-session tests for the host-facing entry points.

Exercises virtual-directory entry, shortcut-aware entry paths, the virtual
pane lifecycle, going up from top-level directories, and breadcrumb clicks.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazynav.breadcrumb import BREADCRUMB_RESERVED_MARGIN, BreadcrumbState
from lazynav.bridge import DriveRecord, EnumerationResult, SpecialFolderRecord
from lazynav.entries import entry_name
from lazynav.errors import BridgeError
from lazynav.resolver import VIRTUAL_DIRECTORY_MARKER, ResolutionPolicy, Resolver
from lazynav.session import VIRTUAL_PANE_LABEL, NavigatorSession, parent_directory


class FakeHelper:
    """Enumerator and shortcut resolver in one, like ``HelperBridge``."""

    def __init__(
        self,
        drives: tuple[str, ...] = ("C",),
        folders: tuple[str, ...] = (),
        targets: dict[str, str] | None = None,
    ) -> None:
        self.drives = drives
        self.folders = folders
        self.targets = dict(targets or {})
        self.enumerate_calls = 0
        self.fail = False

    def enumerate(self) -> EnumerationResult:
        self.enumerate_calls += 1
        if self.fail:
            raise BridgeError("helper exited with status 1")
        return EnumerationResult(
            drives=tuple(DriveRecord(letter) for letter in self.drives),
            folders=tuple(SpecialFolderRecord(path) for path in self.folders),
        )

    def resolve_shortcut(self, path: str) -> str:
        return self.targets.get(path, path)


def _session(
    start: Path | str,
    helper: FakeHelper | None = None,
    follow: bool = True,
    **kwargs: object,
) -> NavigatorSession:
    helper = helper or FakeHelper()
    start_text = start.as_posix() if isinstance(start, Path) else start
    return NavigatorSession(
        helper,
        Resolver(helper, ResolutionPolicy(follow_shortcuts=follow)),
        BreadcrumbState(start_text),
        **kwargs,
    )


def _line_named(session: NavigatorSession, name: str):
    return next(line for line in session.lines if entry_name(line.text) == name)


class VisitTests(unittest.TestCase):
    def test_visit_lists_directory_and_updates_breadcrumb(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "docs").mkdir()
            (root / "a.txt").write_text("a\n", encoding="utf-8")
            session = _session(root)

            current = session.visit(root)

            self.assertEqual(current, root.as_posix() + "/")
            self.assertEqual(session.current_directory, current)
            self.assertEqual([entry_name(line.text) for line in session.lines], ["docs", "a.txt"])
            self.assertIsNone(session.virtual)

    def test_entering_virtual_directory_visits_its_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            virtual = root / "virtual"
            target = root / "X"
            virtual.mkdir()
            target.mkdir()
            (target / "inside.txt").write_text("x\n", encoding="utf-8")
            marker = virtual / VIRTUAL_DIRECTORY_MARKER
            marker.write_bytes(b"L")
            helper = FakeHelper(targets={marker.as_posix(): target.as_posix()})
            session = _session(root, helper)

            session.visit(virtual)

            self.assertEqual(session.current_directory, target.as_posix() + "/")
            self.assertEqual([entry_name(line.text) for line in session.lines], ["inside.txt"])

    def test_virtual_directory_targeting_a_file_is_entered_as_is(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            virtual = root / "virtual"
            virtual.mkdir()
            document = root / "file.txt"
            document.write_text("f\n", encoding="utf-8")
            marker = virtual / VIRTUAL_DIRECTORY_MARKER
            marker.write_bytes(b"L")
            session = _session(root, FakeHelper(targets={marker.as_posix(): document.as_posix()}))

            current = session.visit(virtual)

            self.assertEqual(current, virtual.as_posix() + "/")
            self.assertEqual(session.current_directory, current)
            self.assertEqual([entry_name(line.text) for line in session.lines], [VIRTUAL_DIRECTORY_MARKER])

    def test_virtual_directory_is_entered_as_is_when_not_following(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "X"
            target.mkdir()
            marker = root / VIRTUAL_DIRECTORY_MARKER
            marker.write_bytes(b"L")
            session = _session(root, FakeHelper(targets={marker.as_posix(): target.as_posix()}), follow=False)

            session.visit(root)

            self.assertEqual(session.current_directory, root.as_posix() + "/")

    def test_failed_visit_leaves_session_unchanged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            session = _session(root)
            session.visit(root)

            with self.assertRaises(OSError):
                session.visit(root / "missing")
            self.assertEqual(session.current_directory, root.as_posix() + "/")


class EntryPathTests(unittest.TestCase):
    def test_shortcut_entry_resolves_to_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "data.csv"
            target.write_text("1,2\n", encoding="utf-8")
            shortcut = root / "data.lnk"
            shortcut.write_bytes(b"L")
            helper = FakeHelper(targets={shortcut.as_posix(): target.as_posix()})
            session = _session(root, helper)
            session.visit(root)

            line = _line_named(session, "data.lnk")
            self.assertEqual(session.entry_path(line), target.as_posix())

            session.set_follow_shortcuts(False)
            self.assertEqual(session.entry_path(line), shortcut.as_posix())

    def test_broken_shortcut_stays_operable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            shortcut = root / "gone.lnk"
            shortcut.write_bytes(b"L")
            helper = FakeHelper(targets={shortcut.as_posix(): (root / "deleted").as_posix()})
            session = _session(root, helper)
            session.visit(root)

            self.assertEqual(session.entry_path(_line_named(session, "gone.lnk")), shortcut.as_posix())

    def test_open_entry_visits_shortcut_directory_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "projects"
            target.mkdir()
            shortcut = root / "projects.lnk"
            shortcut.write_bytes(b"L")
            session = _session(root, FakeHelper(targets={shortcut.as_posix(): target.as_posix()}))
            session.visit(root)

            opened = session.open_entry(_line_named(session, "projects.lnk"))

            self.assertEqual(opened, target.as_posix() + "/")
            self.assertEqual(session.current_directory, opened)

    def test_open_entry_returns_files_without_visiting(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a.txt").write_text("a\n", encoding="utf-8")
            session = _session(root)
            session.visit(root)

            self.assertEqual(session.open_entry(_line_named(session, "a.txt")), (root / "a.txt").as_posix())
            self.assertEqual(session.current_directory, root.as_posix() + "/")

    def test_non_entry_lines_have_no_path(self) -> None:
        session = _session("/")
        self.assertIsNone(session.entry_path("  total 0"))
        self.assertIsNone(session.open_entry("garbage"))


class VirtualPaneTests(unittest.TestCase):
    def test_open_virtual_pane_lists_drives_and_folders(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp).resolve().as_posix()
            helper = FakeHelper(drives=("C", "D"), folders=(folder, ""))
            session = _session("/", helper)

            listing = session.open_virtual_pane()

            self.assertIs(session.virtual, listing)
            self.assertEqual(listing.names(), ["C:/", "D:/", "--", folder])
            self.assertEqual(session.status_line(80), VIRTUAL_PANE_LABEL)

    def test_separator_line_is_not_an_entry(self) -> None:
        session = _session("/", FakeHelper(drives=("C",), folders=("/",)))
        session.open_virtual_pane()
        self.assertIsNone(session.entry_path(session.lines[1]))
        self.assertEqual(session.entry_path(session.lines[0]), "C:/")

    def test_opening_folder_entry_defers_to_normal_visit(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp).resolve()
            (folder / "note.txt").write_text("n\n", encoding="utf-8")
            session = _session("/", FakeHelper(drives=(), folders=(folder.as_posix(),)))
            session.open_virtual_pane()

            session.open_entry(session.lines[0])

            self.assertIsNone(session.virtual)
            self.assertEqual(session.current_directory, folder.as_posix() + "/")

    def test_refresh_and_up_rebuild_virtual_pane(self) -> None:
        helper = FakeHelper()
        session = _session("/", helper)
        session.open_virtual_pane()

        session.refresh()
        session.navigate_up()

        self.assertEqual(helper.enumerate_calls, 3)
        self.assertIsNotNone(session.virtual)

    def test_failed_pane_open_propagates_bridge_error(self) -> None:
        helper = FakeHelper()
        helper.fail = True
        session = _session("/", helper, list_directory=lambda directory, show_hidden: [])

        with self.assertRaises(BridgeError):
            session.open_virtual_pane()
        self.assertIsNone(session.virtual)

    def test_click_in_virtual_pane_does_nothing(self) -> None:
        session = _session("/a/b/", list_directory=lambda directory, show_hidden: [])
        session.open_virtual_pane()
        self.assertIsNone(session.click_status(1))


class NavigateUpTests(unittest.TestCase):
    def test_up_from_top_level_opens_virtual_pane(self) -> None:
        for start in ("/", "C:/"):
            with self.subTest(start=start):
                helper = FakeHelper()
                session = _session(start, helper, list_directory=lambda directory, show_hidden: [])

                session.navigate_up()

                self.assertIsNotNone(session.virtual)
                self.assertEqual(helper.enumerate_calls, 1)

    def test_up_visits_parent(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            child = root / "child"
            child.mkdir()
            session = _session(child)
            session.visit(child)

            session.navigate_up()

            self.assertEqual(session.current_directory, root.as_posix() + "/")

    def test_refresh_re_lists_real_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            session = _session(root)
            session.visit(root)
            (root / "new.txt").write_text("n\n", encoding="utf-8")

            session.refresh()

            self.assertEqual([entry_name(line.text) for line in session.lines], ["new.txt"])

    def test_parent_directory(self) -> None:
        self.assertEqual(parent_directory("/a/b/"), "/a/")
        self.assertEqual(parent_directory("/a/"), "/")
        self.assertEqual(parent_directory("C:/Users/"), "C:/")
        self.assertIsNone(parent_directory("/"))
        self.assertIsNone(parent_directory("C:/"))


class BreadcrumbClickTests(unittest.TestCase):
    def test_click_status_visits_ancestor(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            deep = root / "one" / "two"
            deep.mkdir(parents=True)
            session = _session(deep)
            session.visit(deep)

            display = session.status_line(len(session.current_directory) + BREADCRUMB_RESERVED_MARGIN)
            click = display.rindex("one")

            self.assertEqual(session.click_status(click), (root / "one").as_posix() + "/")
            self.assertEqual(session.current_directory, (root / "one").as_posix() + "/")

    def test_click_on_current_segment_stays_put(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            session = _session(root)
            session.visit(root)
            display = session.status_line(20)

            self.assertIsNone(session.click_status(len(display) - 2))


class ToggleTests(unittest.TestCase):
    def test_handle_key_dispatches_bound_actions(self) -> None:
        session = _session("/", list_directory=lambda directory, show_hidden: [])

        self.assertTrue(session.handle_key("B"))
        self.assertFalse(session.breadcrumb.enabled)
        self.assertTrue(session.handle_key("L"))
        self.assertFalse(session.resolver.policy.follow_shortcuts)
        self.assertFalse(session.handle_key("?"))

    def test_toggles_persist_only_when_enabled(self) -> None:
        session = _session("/")
        with mock.patch("lazynav.session.config.save_follow_shortcuts") as save_follow, mock.patch(
            "lazynav.session.config.save_breadcrumb_enabled"
        ) as save_breadcrumb:
            session.toggle_follow_shortcuts()
            session.toggle_breadcrumb()
            save_follow.assert_not_called()
            save_breadcrumb.assert_not_called()

            session.persist = True
            self.assertTrue(session.toggle_follow_shortcuts())
            save_follow.assert_called_once_with(True)
            self.assertTrue(session.toggle_breadcrumb())
            save_breadcrumb.assert_called_once_with(True)


if __name__ == "__main__":
    unittest.main()

"""Controller state-machine behaviour.

Drives ``Controller.apply`` directly with synthetic events and checks the
resulting model snapshots and the jobs handed to the dispatcher.
"""

import random
import unittest
from pathlib import Path

from termfm.controller import CHROME_ROWS, Controller, Model
from termfm.entries import Entry, Listing
from termfm.errors import Failure, FailureKind
from termfm.events import (
    CommandFailed,
    KeyInput,
    ListingReady,
    Preview,
    PreviewReady,
    Resize,
    ScrollInput,
)
from termfm.jobs import DeleteEntry, ListDirectory, MoveEntry, PreviewDirectory, ReadFile, RenameEntry
from termfm.modes import Mode
from termfm.viewport import Viewport

ROOT = Path("/srv/files")


def make_listing(*names: str, path: Path = ROOT) -> Listing:
    return Listing(path, tuple(Entry(name.rstrip("/"), name.endswith("/")) for name in names))


def key(name: str) -> KeyInput:
    return KeyInput(name, name if len(name) == 1 else None)


class ControllerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.controller = Controller()

    def press(self, model: Model, *names: str) -> Model:
        for name in names:
            model, _jobs = self.controller.apply(key(name), model)
        return model

    def type_text(self, model: Model, text: str) -> Model:
        for ch in text:
            model, _jobs = self.controller.apply(KeyInput(ch, ch), model)
        return model


class NavigationTests(ControllerTestCase):
    def test_down_twice_then_wrap(self) -> None:
        model = Model(listing=make_listing("b/", "a.txt", "c.txt"), viewport=Viewport(height=10))
        model = self.press(model, "down", "down")
        self.assertEqual(model.cursor, 2)
        self.assertEqual(model.selected.name, "c.txt")
        model = self.press(model, "down")
        self.assertEqual(model.cursor, 0)

    def test_up_from_first_wraps_to_last(self) -> None:
        model = Model(listing=make_listing("a.txt", "b/", "c.txt"), viewport=Viewport(height=10))
        model = self.press(model, "up")
        self.assertEqual(model.cursor, 2)

    def test_vim_keys_navigate(self) -> None:
        model = Model(listing=make_listing("a", "b", "c"), viewport=Viewport(height=10))
        self.assertEqual(self.press(model, "j", "j", "k").cursor, 1)

    def test_random_navigation_keeps_invariants(self) -> None:
        rng = random.Random(7)
        listing = make_listing(*[f"f{i:02}" for i in range(40)])
        model = Model(listing=listing, viewport=Viewport(height=6))
        for _ in range(500):
            if rng.random() < 0.1:
                model, _ = self.controller.apply(Resize(80, CHROME_ROWS + rng.randint(1, 12)), model)
            else:
                model = self.press(model, rng.choice(["up", "down"]))
            self.assertTrue(0 <= model.cursor < len(listing))
            self.assertGreaterEqual(model.viewport.offset, 0)
            self.assertTrue(model.viewport.contains(model.cursor))

    def test_navigation_on_empty_listing_is_guarded(self) -> None:
        model = Model(listing=make_listing())
        model = self.press(model, "down", "up")
        self.assertEqual(model.cursor, 0)
        self.assertIsNone(model.selected)
        model, jobs = self.controller.apply(key("enter"), model)
        self.assertEqual(jobs, [])

    def test_scroll_moves_cursor_in_browse(self) -> None:
        model = Model(listing=make_listing("a", "b", "c"), viewport=Viewport(height=10))
        model, _ = self.controller.apply(ScrollInput(1), model)
        self.assertEqual(model.cursor, 1)
        model, _ = self.controller.apply(ScrollInput(-3), model)
        self.assertEqual(model.cursor, 0)

    def test_scroll_ignored_when_mouse_wheel_disabled(self) -> None:
        controller = Controller(mouse_wheel=False)
        model = Model(listing=make_listing("a", "b"))
        model, _ = controller.apply(ScrollInput(1), model)
        self.assertEqual(model.cursor, 0)

    def test_resize_keeps_cursor_and_mode(self) -> None:
        model = Model(listing=make_listing(*"abcdefghij"), viewport=Viewport(height=10))
        model = self.press(model, "down", "down", "down", "down", "down", "down", "r")
        resized, jobs = self.controller.apply(Resize(120, CHROME_ROWS + 3), model)
        self.assertEqual(jobs, [])
        self.assertEqual(resized.cursor, model.cursor)
        self.assertIs(resized.mode, Mode.RENAME_PROMPT)
        self.assertEqual(resized.viewport.height, 3)
        self.assertEqual(resized.viewport.width, 120)
        self.assertTrue(resized.viewport.contains(resized.cursor))


class DirectoryChangeTests(ControllerTestCase):
    def test_select_directory_lists_it_and_resets_on_completion(self) -> None:
        model = Model(listing=make_listing("a.txt", "b/", "c.txt"), viewport=Viewport(height=10))
        model = self.press(model, "down")
        model, jobs = self.controller.apply(key("enter"), model)
        self.assertEqual(jobs, [ListDirectory(ROOT / "b")])
        self.assertEqual(model.pending, ListDirectory(ROOT / "b"))

        inner = make_listing("x", "y", path=ROOT / "b")
        model, jobs = self.controller.apply(ListingReady(ListDirectory(ROOT / "b"), inner), model)
        self.assertEqual(jobs, [])
        self.assertEqual(model.listing, inner)
        self.assertEqual(model.cursor, 0)
        self.assertEqual(model.viewport.offset, 0)
        self.assertIsNone(model.pending)

    def test_select_file_requests_preview(self) -> None:
        model = Model(listing=make_listing("a.txt"))
        model, jobs = self.controller.apply(key("enter"), model)
        self.assertEqual(jobs, [ReadFile(ROOT / "a.txt")])
        self.assertEqual(model.listing, make_listing("a.txt"))

        preview = Preview(ROOT / "a.txt", "hello")
        model, _ = self.controller.apply(PreviewReady(ReadFile(ROOT / "a.txt"), preview), model)
        self.assertEqual(model.preview, preview)
        self.assertIsNone(model.pending)

    def test_parent_key_lists_parent(self) -> None:
        model = Model(listing=make_listing("a"))
        _, jobs = self.controller.apply(key("backspace"), model)
        self.assertEqual(jobs, [ListDirectory(Path("/srv"))])

    def test_parent_key_at_filesystem_root_does_nothing(self) -> None:
        model = Model(listing=make_listing("etc/", path=Path("/")))
        _, jobs = self.controller.apply(key("h"), model)
        self.assertEqual(jobs, [])

    def test_listing_ready_always_resets_cursor_and_offset(self) -> None:
        listing = make_listing(*[f"f{i}" for i in range(30)])
        model = Model(listing=listing, cursor=17, viewport=Viewport(offset=12, height=6))
        model, _ = self.controller.apply(ListingReady(ListDirectory(ROOT), listing), model)
        self.assertEqual((model.cursor, model.viewport.offset), (0, 0))

    def test_failed_listing_keeps_previous_listing(self) -> None:
        listing = make_listing("a", "b/")
        model = Model(listing=listing, viewport=Viewport(height=10))
        model = self.press(model, "down")
        model, _ = self.controller.apply(key("enter"), model)
        failure = Failure(FailureKind.PERMISSION_DENIED, ROOT / "b")
        model, _ = self.controller.apply(CommandFailed(ListDirectory(ROOT / "b"), failure), model)
        self.assertEqual(model.listing, listing)
        self.assertEqual(model.failure, failure)
        self.assertTrue(0 <= model.cursor < len(listing))

    def test_select_directory_keeps_position_until_listing_arrives(self) -> None:
        listing = make_listing("a.txt", "b/", "c.txt")
        model = self.press(Model(listing=listing, viewport=Viewport(height=10)), "down")
        model, _ = self.controller.apply(key("enter"), model)
        self.assertEqual(model.cursor, 1)

        failure = Failure(FailureKind.PERMISSION_DENIED, ROOT / "b")
        model, _ = self.controller.apply(CommandFailed(ListDirectory(ROOT / "b"), failure), model)
        self.assertEqual(model.cursor, 1)
        self.assertEqual(model.selected.name, "b")

    def test_queued_directory_change_does_not_move_cursor(self) -> None:
        model = Model(listing=make_listing("a.txt", "b/"), viewport=Viewport(height=10))
        model, _ = self.controller.apply(key("f5"), model)
        model = self.press(model, "down", "enter")
        self.assertEqual(model.queued, (ListDirectory(ROOT / "b"),))
        self.assertEqual(model.cursor, 1)


class PreviewPaneStateTests(ControllerTestCase):
    def test_preview_is_dropped_when_cursor_moves(self) -> None:
        model = Model(listing=make_listing("a.py", "b.txt"))
        model, jobs = self.controller.apply(key("enter"), model)
        model, _ = self.controller.apply(PreviewReady(jobs[0], Preview(ROOT / "a.py", "SECRET_A")), model)
        self.assertEqual(model.preview.text, "SECRET_A")

        model = self.press(model, "down")
        self.assertEqual(model.selected.name, "b.txt")
        self.assertIsNone(model.preview)

    def test_preview_for_an_entry_no_longer_selected_is_discarded(self) -> None:
        model = Model(listing=make_listing("a.py", "b.txt"))
        model, jobs = self.controller.apply(key("enter"), model)
        model = self.press(model, "down")
        model, _ = self.controller.apply(PreviewReady(jobs[0], Preview(ROOT / "a.py", "SECRET_A")), model)
        self.assertIsNone(model.preview)
        self.assertFalse(model.busy)

    def test_preview_key_on_directory_lists_it_without_entering(self) -> None:
        listing = make_listing("b/", "a.txt")
        model, jobs = self.controller.apply(key("p"), Model(listing=listing))
        self.assertEqual(jobs, [PreviewDirectory(ROOT / "b")])
        self.assertEqual(model.listing, listing)

        inner = make_listing("x", path=ROOT / "b")
        preview = Preview(ROOT / "b", listing=inner)
        model, _ = self.controller.apply(PreviewReady(jobs[0], preview), model)
        self.assertEqual(model.preview.listing, inner)
        self.assertEqual(model.listing, listing)

    def test_preview_key_on_file_reads_it(self) -> None:
        model = self.press(Model(listing=make_listing("b/", "a.txt")), "down")
        _, jobs = self.controller.apply(key("p"), model)
        self.assertEqual(jobs, [ReadFile(ROOT / "a.txt")])

    def test_preview_requests_share_the_single_slot(self) -> None:
        model, _ = self.controller.apply(key("f5"), Model(listing=make_listing("b/")))
        model, jobs = self.controller.apply(key("p"), model)
        self.assertEqual(jobs, [])
        self.assertEqual(model.queued, (PreviewDirectory(ROOT / "b"),))


class PromptTests(ControllerTestCase):
    def test_rename_flow(self) -> None:
        model = Model(listing=make_listing("a.txt", "b/", "c.txt"))
        model = self.press(model, "r")
        self.assertIs(model.mode, Mode.RENAME_PROMPT)
        self.assertEqual(model.input_buffer, "")

        model = self.type_text(model, "x.txt")
        self.assertEqual(model.input_buffer, "x.txt")
        model, jobs = self.controller.apply(key("enter"), model)
        self.assertEqual(jobs, [RenameEntry(ROOT / "a.txt", "x.txt")])
        self.assertIs(model.mode, Mode.BROWSE)
        self.assertEqual(model.input_buffer, "")

        refreshed = make_listing("b/", "c.txt", "x.txt")
        model, _ = self.controller.apply(ListingReady(jobs[0], refreshed), model)
        self.assertEqual(model.listing, refreshed)
        self.assertIs(model.mode, Mode.BROWSE)
        self.assertIn("x.txt", model.notice)

    def test_navigation_keys_go_to_the_buffer_while_prompting(self) -> None:
        model = Model(listing=make_listing("a", "b", "c"))
        model = self.press(model, "m", "j", "k", "down")
        self.assertEqual(model.cursor, 0)
        self.assertEqual(model.input_buffer, "jk")
        self.assertIs(model.mode, Mode.MOVE_PROMPT)

    def test_browse_quit_key_is_text_while_prompting(self) -> None:
        model = self.press(Model(listing=make_listing("a")), "r", "q")
        self.assertFalse(model.quitting)
        self.assertEqual(model.input_buffer, "q")

    def test_cancel_returns_to_browse_without_jobs(self) -> None:
        model = self.type_text(self.press(Model(listing=make_listing("a")), "m"), "/tmp")
        model, jobs = self.controller.apply(key("escape"), model)
        self.assertEqual(jobs, [])
        self.assertIs(model.mode, Mode.BROWSE)
        self.assertEqual(model.input_buffer, "")

    def test_reentering_a_prompt_starts_with_empty_buffer(self) -> None:
        model = self.type_text(self.press(Model(listing=make_listing("a")), "r"), "zzz")
        model = self.press(model, "escape", "d")
        self.assertIs(model.mode, Mode.DELETE_CONFIRM)
        self.assertEqual(model.input_buffer, "")

    def test_move_commit_issues_move(self) -> None:
        model = self.type_text(self.press(Model(listing=make_listing("a", "b")), "down", "m"), " /tmp/dest ")
        _, jobs = self.controller.apply(key("enter"), model)
        self.assertEqual(jobs, [MoveEntry(ROOT / "b", "/tmp/dest")])

    def test_delete_confirmed_with_y(self) -> None:
        model = self.type_text(self.press(Model(listing=make_listing("a")), "d"), "y")
        _, jobs = self.controller.apply(key("enter"), model)
        self.assertEqual(jobs, [DeleteEntry(ROOT / "a")])

    def test_delete_with_anything_but_y_relists_only(self) -> None:
        for answer in ("", "n", "Y", "yes", " y"):
            with self.subTest(answer=answer):
                model = self.type_text(self.press(Model(listing=make_listing("a")), "d"), answer)
                model, jobs = self.controller.apply(key("enter"), model)
                self.assertEqual(jobs, [ListDirectory(ROOT)])
                self.assertIs(model.mode, Mode.BROWSE)

    def test_prompts_need_a_selected_entry(self) -> None:
        model = self.press(Model(listing=make_listing()), "r", "m", "d")
        self.assertIs(model.mode, Mode.BROWSE)

    def test_delete_failure_is_surfaced(self) -> None:
        listing = make_listing("a.txt", "b/")
        model = self.type_text(self.press(Model(listing=listing), "d"), "y")
        model, jobs = self.controller.apply(key("enter"), model)
        failure = Failure(FailureKind.PERMISSION_DENIED, ROOT / "a.txt")
        model, _ = self.controller.apply(CommandFailed(jobs[0], failure), model)
        self.assertEqual(model.failure, failure)
        self.assertEqual(model.listing, listing)
        self.assertIs(model.mode, Mode.BROWSE)
        self.assertIsNone(model.pending)

    def test_failure_clears_on_next_key(self) -> None:
        model = Model(listing=make_listing("a"), failure=Failure(FailureKind.IO_FAILURE, ROOT))
        self.assertIsNone(self.press(model, "down").failure)

    def test_completion_exits_prompt_mode(self) -> None:
        model = self.press(Model(listing=make_listing("a")), "enter", "r")
        self.assertIs(model.mode, Mode.RENAME_PROMPT)
        model, _ = self.controller.apply(CommandFailed(ReadFile(ROOT / "a"), Failure(FailureKind.IO_FAILURE)), model)
        self.assertIs(model.mode, Mode.BROWSE)
        self.assertEqual(model.input_buffer, "")


class HelpAndQuitTests(ControllerTestCase):
    def test_help_toggles_back_on_any_key(self) -> None:
        model = Model(listing=make_listing("a", "b"), cursor=1, viewport=Viewport(height=5))
        model = self.press(model, "question_mark")
        self.assertIs(model.mode, Mode.HELP)
        model, jobs = self.controller.apply(key("x"), model)
        self.assertIs(model.mode, Mode.BROWSE)
        self.assertEqual(model.cursor, 1)
        self.assertEqual(jobs, [])

    def test_global_quit_in_any_mode(self) -> None:
        model = self.press(Model(listing=make_listing("a")), "r")
        self.assertTrue(self.press(model, "ctrl+c").quitting)

    def test_q_quits_in_browse(self) -> None:
        self.assertTrue(self.press(Model(listing=make_listing("a")), "q").quitting)


class SingleFlightTests(ControllerTestCase):
    def test_second_command_is_queued_not_interleaved(self) -> None:
        model = Model(listing=make_listing("a", "b"))
        model = self.type_text(self.press(model, "r"), "x")
        model, first = self.controller.apply(key("enter"), model)
        self.assertEqual(first, [RenameEntry(ROOT / "a", "x")])

        model = self.type_text(self.press(model, "d"), "y")
        model, second = self.controller.apply(key("enter"), model)
        self.assertEqual(second, [])
        self.assertEqual(model.pending, first[0])
        self.assertEqual(model.queued, (DeleteEntry(ROOT / "a"),))
        self.assertIn("queued", model.notice.lower())

        relisted = make_listing("b", "x")
        model, started = self.controller.apply(ListingReady(first[0], relisted), model)
        self.assertEqual(started, [DeleteEntry(ROOT / "a")])
        self.assertEqual(model.pending, DeleteEntry(ROOT / "a"))
        self.assertEqual(model.queued, ())

    def test_queue_drains_in_issue_order(self) -> None:
        model = Model(listing=make_listing("a"))
        model, _ = self.controller.apply(key("f5"), model)
        model, _ = self.controller.apply(key("backspace"), model)
        model, _ = self.controller.apply(key("enter"), model)
        self.assertEqual(model.queued, (ListDirectory(Path("/srv")), ReadFile(ROOT / "a")))

        model, started = self.controller.apply(ListingReady(ListDirectory(ROOT), make_listing("a")), model)
        self.assertEqual(started, [ListDirectory(Path("/srv"))])
        model, started = self.controller.apply(
            CommandFailed(ListDirectory(Path("/srv")), Failure(FailureKind.NOT_FOUND, Path("/srv"))), model
        )
        self.assertEqual(started, [ReadFile(ROOT / "a")])
        model, started = self.controller.apply(
            PreviewReady(ReadFile(ROOT / "a"), Preview(ROOT / "a", "")), model
        )
        self.assertEqual(started, [])
        self.assertFalse(model.busy)

    def test_quit_while_busy_does_not_wait(self) -> None:
        model, _ = self.controller.apply(key("f5"), Model(listing=make_listing("a")))
        self.assertTrue(model.busy)
        self.assertTrue(self.press(model, "q").quitting)


if __name__ == "__main__":
    unittest.main()

"""Tests for the watch scheduler."""

import io
import os
import threading
from pathlib import Path
from unittest import mock

import pytest
from watchdog.events import FileModifiedEvent

from assetdump.core import (
    DumpEngine,
    PassTrigger,
    SnapshotStore,
    WatchScheduler,
    Writer,
)
from assetdump.errors import ConfigurationError, DumpWriteError
from assetdump.models import main_key
from assetdump.output import OutputContext
from assetdump.registry import AssetManager


@pytest.fixture
def registry(manifest: Path) -> AssetManager:
    return AssetManager(manifest, debug=True)


@pytest.fixture
def store(tmp_path: Path) -> SnapshotStore:
    store = SnapshotStore(tmp_path / "cache" / "snapshot.json")
    store.prepare()
    return store


@pytest.fixture
def engine(registry: AssetManager, write_to: Path, ctx: OutputContext) -> DumpEngine:
    return DumpEngine(registry, Writer(write_to, ctx))


@pytest.fixture
def scheduler(
    registry: AssetManager, engine: DumpEngine, store: SnapshotStore, ctx: OutputContext
) -> WatchScheduler:
    return WatchScheduler(registry, engine, store, ctx=ctx)


def count_writes(scheduler: WatchScheduler) -> int:
    """Run one pass and return how many files it wrote."""
    writer = scheduler.engine.writer
    with mock.patch.object(writer, "write", wraps=writer.write) as write:
        scheduler.run_pass()
    return write.call_count


def add_broken_asset(registry: AssetManager, manifest: Path) -> None:
    """Append an asset whose input does not exist, after the valid ones."""
    manifest.write_text(manifest.read_text() + '\n[assets.broken]\ninputs = ["js/missing.js"]\n')
    registry.force_reload()


class TestPreconditions:
    """Tests for watch mode setup."""

    def test_requires_debug_mode(
        self, manifest: Path, engine: DumpEngine, store: SnapshotStore
    ) -> None:
        """Watch mode outside debug mode is a configuration error."""
        with pytest.raises(ConfigurationError, match="only available in debug mode"):
            WatchScheduler(AssetManager(manifest, debug=False), engine, store)

    def test_unpreparable_cache_is_fatal(
        self, registry: AssetManager, engine: DumpEngine, tmp_path: Path
    ) -> None:
        """run() stops before looping when the cache path cannot be created."""
        (tmp_path / "blocker").write_text("")
        store = SnapshotStore(tmp_path / "blocker" / "snapshot.json")
        scheduler = WatchScheduler(registry, engine, store)

        with (
            mock.patch.object(scheduler, "run_pass") as run_pass,
            pytest.raises(ConfigurationError),
        ):
            scheduler.run()
        run_pass.assert_not_called()


class TestRunPass:
    """Tests for a single pass."""

    def test_first_pass_writes_everything(self, scheduler: WatchScheduler) -> None:
        """Empty snapshot: every leaf and main is written."""
        assert count_writes(scheduler) == 5

    def test_second_pass_writes_nothing(self, scheduler: WatchScheduler) -> None:
        """Unchanged assets are not dumped again."""
        scheduler.run_pass()
        assert count_writes(scheduler) == 0

    def test_changed_leaf(self, scheduler: WatchScheduler, source_dir: Path) -> None:
        """A touched source rewrites its leaf and its main asset only."""
        scheduler.run_pass()
        os.utime(source_dir / "js" / "a.js", (3000, 3000))

        assert count_writes(scheduler) == 2

    def test_no_dump_main(self, scheduler: WatchScheduler) -> None:
        """With dump_main off only leaves are written."""
        scheduler.dump_main = False
        assert count_writes(scheduler) == 3

    def test_snapshot_persisted(self, scheduler: WatchScheduler, store: SnapshotStore) -> None:
        """Each pass saves the snapshot with every visited key."""
        scheduler.run_pass()
        saved = store.load()

        assert main_key("app_js") in saved
        assert main_key("site_css") in saved
        assert saved == scheduler.snapshot

    def test_registry_reloaded(self, scheduler: WatchScheduler, registry: AssetManager) -> None:
        """Resolved artifacts are dropped after every pass."""
        scheduler.run_pass()
        assert registry.cached_names() == []

    def test_recipe_edit_detected(
        self, scheduler: WatchScheduler, manifest: Path, write_to: Path
    ) -> None:
        """A formula change without any timestamp change rewrites the main asset."""
        scheduler.run_pass()
        manifest.write_text(manifest.read_text().replace('filters = ["strip"]', "filters = []"))

        # The edit is loaded by the reload that ends the next pass
        assert count_writes(scheduler) == 0
        assert count_writes(scheduler) == 1
        assert (write_to / "css" / "site_css.css").read_text() == "body { margin: 0; }   \n"

    def test_restart_resumes_from_persisted_snapshot(
        self,
        scheduler: WatchScheduler,
        registry: AssetManager,
        engine: DumpEngine,
        store: SnapshotStore,
    ) -> None:
        """A new scheduler loading the saved snapshot skips unchanged assets."""
        scheduler.run_pass()
        restarted = WatchScheduler(registry, engine, store, snapshot=store.load())

        assert count_writes(restarted) == 0

    def test_force_treats_everything_as_new(
        self,
        scheduler: WatchScheduler,
        registry: AssetManager,
        engine: DumpEngine,
        store: SnapshotStore,
    ) -> None:
        """Forcing discards the persisted snapshot."""
        scheduler.run_pass()
        restarted = WatchScheduler(registry, engine, store, snapshot=store.load(force=True))

        assert count_writes(restarted) == 5


class TestErrorHandling:
    """Tests for the pass error boundary."""

    def test_error_debouncing_scenario(
        self, scheduler: WatchScheduler, output: io.StringIO
    ) -> None:
        """Repeated errors are printed once until a pass succeeds."""
        failing = DumpWriteError("disk full")
        with mock.patch.object(scheduler.engine, "check_asset") as check:
            check.side_effect = failing
            assert scheduler.run_pass() is False
            assert output.getvalue().count("disk full") == 1

            assert scheduler.run_pass() is False
            assert scheduler.run_pass() is False
            assert output.getvalue().count("disk full") == 1

            check.side_effect = None
            check.return_value = False
            assert scheduler.run_pass() is True
            assert scheduler.debouncer.last_message is None

            check.side_effect = failing
            assert scheduler.run_pass() is False
            assert output.getvalue().count("disk full") == 2

    def test_error_printed_with_marker(
        self, scheduler: WatchScheduler, output: io.StringIO
    ) -> None:
        """Reported errors carry the [error] marker."""
        with mock.patch.object(scheduler.engine, "check_asset", side_effect=RuntimeError("boom")):
            scheduler.run_pass()
        assert "[error] boom" in output.getvalue()

    def test_partial_progress_preserved(
        self,
        scheduler: WatchScheduler,
        registry: AssetManager,
        manifest: Path,
        write_to: Path,
    ) -> None:
        """Assets dumped before a failure stay written and recorded."""
        add_broken_asset(registry, manifest)

        assert scheduler.run_pass() is False
        assert (write_to / "js" / "app.js").exists()
        assert (write_to / "css" / "site_css.css").exists()
        assert main_key("app_js") in scheduler.snapshot

    def test_failed_pass_still_reloads_and_persists(
        self,
        scheduler: WatchScheduler,
        registry: AssetManager,
        store: SnapshotStore,
        manifest: Path,
    ) -> None:
        """Reload and persistence happen even when the pass fails."""
        add_broken_asset(registry, manifest)
        scheduler.run_pass()

        assert registry.cached_names() == []
        assert main_key("app_js") in store.load()

    def test_broken_manifest_does_not_escape(
        self, scheduler: WatchScheduler, manifest: Path, output: io.StringIO
    ) -> None:
        """A manifest that fails to reload is reported, not raised."""
        scheduler.run_pass()
        manifest.write_text("[assets\n")

        assert scheduler.run_pass() is False
        assert "Malformed asset manifest" in output.getvalue()

    def test_snapshot_save_failure_is_reported(
        self, scheduler: WatchScheduler, store: SnapshotStore, output: io.StringIO
    ) -> None:
        """Persistence failures go through the same boundary."""
        store.path = store.path.parent / "missing" / "snapshot.json"

        assert scheduler.run_pass() is False
        assert "Unable to write snapshot" in output.getvalue()


class TestSerialization:
    """Tests for pass serialization."""

    def test_passes_do_not_overlap(self, scheduler: WatchScheduler) -> None:
        """A pass waits while another one holds the pass lock."""
        done = threading.Event()

        def trigger() -> None:
            scheduler.run_pass(trigger="event")
            done.set()

        with scheduler._pass_lock:
            thread = threading.Thread(target=trigger)
            thread.start()
            assert not done.wait(0.2)
            assert scheduler.passes == 0

        thread.join(timeout=5)
        assert done.is_set()
        assert scheduler.passes == 1


class TestRunLoop:
    """Tests for the poll loop."""

    def test_runs_until_stopped(self, scheduler: WatchScheduler) -> None:
        """The loop keeps running passes until stop() is called."""
        scheduler.period = 0.01
        calls = []

        def fake_pass(trigger: str = "poll") -> bool:
            calls.append(trigger)
            if len(calls) == 3:
                scheduler.stop()
            return True

        with mock.patch.object(scheduler, "run_pass", side_effect=fake_pass):
            scheduler.run()

        assert calls == ["poll", "poll", "poll"]
        assert scheduler.stopped

    def test_loop_survives_failing_passes(self, scheduler: WatchScheduler) -> None:
        """Errors inside passes never end the loop."""
        scheduler.period = 0.01

        def stop_later() -> bool:
            if scheduler.passes >= 3:
                scheduler.stop()
            raise DumpWriteError("disk full")

        with mock.patch.object(scheduler.engine, "check_asset") as check:
            check.side_effect = lambda *args: stop_later()
            scheduler.run()

        assert scheduler.passes == 3


class TestEventTrigger:
    """Tests for filesystem event handling."""

    def test_event_runs_pass(self, scheduler: WatchScheduler) -> None:
        """Modification events trigger a pass."""
        with mock.patch.object(scheduler, "run_pass") as run_pass:
            PassTrigger(scheduler).on_any_event(FileModifiedEvent("/src/a.js"))
        run_pass.assert_called_once_with(trigger="event")

    def test_read_events_ignored(self, scheduler: WatchScheduler) -> None:
        """Opening a file for reading does not trigger a pass."""
        event = mock.Mock(event_type="opened", src_path="/src/a.js")
        with mock.patch.object(scheduler, "run_pass") as run_pass:
            PassTrigger(scheduler).on_any_event(event)
        run_pass.assert_not_called()

    def test_observer_schedules_existing_dirs(
        self, scheduler: WatchScheduler, source_dir: Path, tmp_path: Path, output: io.StringIO
    ) -> None:
        """Existing directories are watched recursively, missing ones skipped."""
        scheduler.watch_dirs = [source_dir, tmp_path / "missing"]
        with mock.patch("assetdump.core.scheduler.Observer") as observer_cls:
            scheduler.start_observer()
            observer = observer_cls.return_value

            observer.schedule.assert_called_once_with(mock.ANY, str(source_dir), recursive=True)
            observer.start.assert_called_once()
            assert f"Watching {source_dir}" in output.getvalue()

            scheduler.stop_observer()
            observer.stop.assert_called_once()
            observer.join.assert_called_once()

    def test_no_watch_dirs_means_polling_only(self, scheduler: WatchScheduler) -> None:
        """Without watch directories no observer is created."""
        with mock.patch("assetdump.core.scheduler.Observer") as observer_cls:
            scheduler.start_observer()
        observer_cls.assert_not_called()

    def test_observer_start_failure_falls_back_to_polling(
        self, scheduler: WatchScheduler, source_dir: Path
    ) -> None:
        """An observer that cannot start leaves the poll loop in charge."""
        scheduler.watch_dirs = [source_dir]
        with mock.patch("assetdump.core.scheduler.Observer") as observer_cls:
            observer_cls.return_value.start.side_effect = OSError("inotify watch limit reached")
            scheduler.start_observer()
            scheduler.stop_observer()
            observer_cls.return_value.stop.assert_not_called()

    def test_real_event_triggers_dump(
        self, scheduler: WatchScheduler, source_dir: Path, write_to: Path
    ) -> None:
        """An actual file change under a watched directory dumps the asset."""
        scheduler.run_pass()
        scheduler.watch_dirs = [source_dir]
        scheduler.start_observer()
        if scheduler._observer is None:
            pytest.skip("filesystem events unavailable")
        try:
            target = source_dir / "js" / "a.js"
            target.write_text("var a = 42;\n")
            os.utime(target, (5000, 5000))

            leaf = write_to / "js" / "app_part_1_a.js"
            for _ in range(200):
                if leaf.read_text() == "var a = 42;\n":
                    break
                threading.Event().wait(0.05)
            assert leaf.read_text() == "var a = 42;\n"
        finally:
            scheduler.stop_observer()

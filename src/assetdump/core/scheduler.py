"""Watch mode: repeated incremental passes over all assets.

Two trigger sources feed the same pass routine:
- a poll loop that runs a pass, then waits ``period`` seconds
- an optional watchdog observer that runs a pass on filesystem events

Passes are serialized by a lock, so the two sources never race on the
snapshot or on the registry reload. A failing pass is reported once per
distinct message and never stops the scheduler.
"""

import logging
import threading
from collections.abc import Sequence
from pathlib import Path

from rich.markup import escape
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from ..constants import DEFAULT_PERIOD
from ..errors import ConfigurationError
from ..models import Snapshot
from ..output import OutputContext, get_output_context
from ..registry import AssetManager
from .debouncer import ErrorDebouncer
from .dump_engine import DumpEngine
from .snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

# Read-only access events; passes read sources, so these would retrigger forever
IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})


class PassTrigger(FileSystemEventHandler):
    """Runs a scheduler pass on every filesystem event."""

    def __init__(self, scheduler: "WatchScheduler") -> None:
        self.scheduler = scheduler

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in IGNORED_EVENT_TYPES:
            return
        self.scheduler.ctx.detail(f"event: {event.event_type} {escape(str(event.src_path))}")
        self.scheduler.run_pass(trigger="event")


class WatchScheduler:
    """Drives incremental passes until stopped.

    Attributes:
        snapshot: Snapshot shared by every pass, persisted after each one
        debouncer: Last reported error, cleared by a successful pass
        passes: Number of passes run so far
    """

    def __init__(
        self,
        registry: AssetManager,
        engine: DumpEngine,
        store: SnapshotStore,
        snapshot: Snapshot | None = None,
        dump_main: bool = True,
        period: float = DEFAULT_PERIOD,
        watch_dirs: Sequence[Path] = (),
        ctx: OutputContext | None = None,
    ) -> None:
        """Initialize the scheduler.

        Raises:
            ConfigurationError: If the registry is not in debug mode
        """
        if not registry.is_debug():
            raise ConfigurationError("The --watch option is only available in debug mode")
        self.registry = registry
        self.engine = engine
        self.store = store
        self.snapshot = snapshot if snapshot is not None else Snapshot()
        self.dump_main = dump_main
        self.period = period
        self.watch_dirs = list(watch_dirs)
        self.ctx = ctx or get_output_context()
        self.debouncer = ErrorDebouncer()
        self.passes = 0
        self._pass_lock = threading.Lock()
        self._stop = threading.Event()
        self._observer: Observer | None = None

    def run_pass(self, trigger: str = "poll") -> bool:
        """Run one pass: dump changed assets, reload the registry, persist.

        Args:
            trigger: What started the pass, for logging

        Returns:
            True if the pass completed without error
        """
        with self._pass_lock:
            self.passes += 1
            logger.debug("Pass %d (%s)", self.passes, trigger)
            try:
                for name in self.registry.get_names():
                    if self.engine.check_asset(name, self.snapshot):
                        self.engine.process_asset(name, self.snapshot, self.dump_main)
                self.registry.force_reload()
                self.store.save(self.snapshot)
            except Exception as e:
                self._report(e)
                self._recover()
                return False
            self.debouncer.clear()
            return True

    def _report(self, error: Exception) -> None:
        message = str(error) or type(error).__name__
        if self.debouncer.should_report(message):
            logger.debug("Pass failed", exc_info=error)
            self.ctx.error(message)

    def _recover(self) -> None:
        """Reset the registry and persist the snapshot after a failed pass."""
        try:
            self.registry.force_reload()
        except Exception:
            logger.debug("Registry reload failed after pass error", exc_info=True)
        try:
            self.store.save(self.snapshot)
        except Exception:
            logger.debug("Snapshot save failed after pass error", exc_info=True)

    def start_observer(self) -> None:
        """Start push notifications for the watch directories, if any."""
        if not self.watch_dirs:
            return
        if Observer is PollingObserver:
            self.ctx.print(
                "[red]Native filesystem events unavailable; --watch may be CPU hungry[/red]"
            )

        observer = Observer()
        handler = PassTrigger(self)
        watched = 0
        for directory in self.watch_dirs:
            if not directory.is_dir():
                logger.warning("Watch directory not found: %s", directory)
                continue
            self.ctx.print(f"Watching [yellow]{escape(str(directory))}[/yellow]")
            observer.schedule(handler, str(directory), recursive=True)
            watched += 1
        if not watched:
            return

        try:
            observer.start()
        except OSError as e:
            logger.warning("Filesystem events unavailable, polling only: %s", e)
            return
        self._observer = observer

    def stop_observer(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def run(self) -> None:
        """Watch until ``stop()`` is called.

        Raises:
            ConfigurationError: If the snapshot location cannot be prepared
        """
        self.store.prepare()
        self.start_observer()
        try:
            while not self._stop.is_set():
                self.run_pass()
                self._stop.wait(self.period)
        finally:
            self.stop_observer()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

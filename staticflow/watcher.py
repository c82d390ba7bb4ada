"""
File watching for the dev server.

Watchdog delivers events on its observer thread. RebuildHandler only
filters them and passes the filename to a trigger. SiteWatcher's trigger
hands the call to the asyncio loop, so every rebuild runs on the loop
thread, one after another, and never alongside an HTTP handler.

There is no debouncing: each event that passes the filter runs one full
rebuild.
"""
import asyncio
import os
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from fs.errors import FSError
from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from staticflow.builder import BuildReport, SiteBuilder
from staticflow.config import SiteConfig
from staticflow.errors import StaticflowError
from staticflow.logging import get_logger

log = get_logger('watcher')

# Open/close access events are left out: the build itself reads every source
REBUILD_EVENT_TYPES = frozenset({
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
})


def should_rebuild(filename: Optional[str]) -> bool:
    """Filter for editor noise: dotfiles, backups and temp files."""
    if not filename:
        return False
    if filename.startswith('.'):
        return False
    if '~' in filename:
        return False
    if filename.endswith('.tmp'):
        return False
    return True


def _is_within(path: Path, directory: Path) -> bool:
    return path == directory or directory in path.parents


class RebuildHandler(FileSystemEventHandler):
    """Watchdog handler for one watched directory.

    Args:
        watch_dir: Directory the handler is scheduled on; filenames are
            reported relative to it
        ignore_dir: Directory whose events never count (the build output)
        trigger: Called with the relative filename of each qualifying event
    """

    def __init__(self, watch_dir: Path, ignore_dir: Path, trigger: Callable[[str], None]):
        super().__init__()
        self.watch_dir = watch_dir
        self.ignore_dir = ignore_dir
        self.trigger = trigger

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in REBUILD_EVENT_TYPES:
            return
        # Directory mtime changes echo the file event that caused them
        if event.is_directory and event.event_type == EVENT_TYPE_MODIFIED:
            return

        # Atomic saves rename a temp file over the real one: either name counts
        paths = [event.src_path]
        if event.event_type == EVENT_TYPE_MOVED:
            paths.append(getattr(event, 'dest_path', None))

        for raw_path in paths:
            filename = self._qualifying_filename(raw_path)
            if filename is not None:
                self.trigger(filename)
                return

    def _qualifying_filename(self, raw_path) -> Optional[str]:
        if not raw_path:
            return None
        path = Path(os.fsdecode(raw_path))
        if _is_within(path, self.ignore_dir):
            return None
        filename = self.filename_for(path)
        return filename if should_rebuild(filename) else None

    def filename_for(self, src_path: Path) -> str:
        """Event path relative to the watched directory, '/'-separated."""
        return Path(os.path.relpath(src_path, self.watch_dir)).as_posix()


class SiteWatcher:
    """
    Rebuilds the site whenever a source file changes.

    Usage:
        watcher = SiteWatcher(config, builder)
        watcher.start(asyncio.get_running_loop())
        ...
        watcher.stop()

    Without a loop, rebuilds run directly on the observer thread.
    """

    def __init__(self, config: SiteConfig, builder: SiteBuilder):
        self.config = config
        self.builder = builder
        self.rebuild_count = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._observer: Optional[Observer] = None

    def watch_targets(self) -> List[Tuple[Path, bool]]:
        """(directory, recursive) pairs to watch.

        Source directories are watched recursively when present; the root
        is watched on its own level only, for config file changes.
        """
        targets = []
        for path in (
            self.config.components_path,
            self.config.pages_path,
            self.config.assets_path,
        ):
            if path.is_dir():
                targets.append((path, True))
        targets.append((self.config.root, False))
        return targets

    def handler_for(self, watch_dir: Path) -> RebuildHandler:
        return RebuildHandler(watch_dir, self.config.output_path, self.notify)

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._observer = Observer()
        for path, recursive in self.watch_targets():
            self._observer.schedule(self.handler_for(path), str(path), recursive=recursive)
            log.debug("Watching %s%s", path, ' (recursive)' if recursive else '')
        self._observer.start()

    def stop(self) -> None:
        """Stop all observers and wait for their threads."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None

    def notify(self, filename: str) -> None:
        """Queue a rebuild for a changed file. Safe to call from any thread."""
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self.rebuild, filename)
        else:
            self.rebuild(filename)

    def rebuild(self, filename: str) -> Optional[BuildReport]:
        """Run one full build.

        A failed rebuild is logged and the watcher keeps going; the server
        keeps serving whatever the failed cycle left in the output tree.
        """
        log.info("Change detected: %s", filename)
        self.rebuild_count += 1
        try:
            return self.builder.build()
        except (StaticflowError, FSError, OSError) as e:
            log.error("Rebuild failed: %s", e)
            log.log_traceback(e)
            return None

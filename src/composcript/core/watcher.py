#!/usr/bin/env python3
"""
COMPOSCRIPT WATCHER - Rebuild Trigger
-------------------------------------
Polls the components directory for changes and fires a debounced
callback, so a burst of saves collapses into a single rebuild.

Author: Composcript Team
Date: 2026-10-19
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Optional, Set, Tuple

logger = logging.getLogger("composcript.watcher")

Snapshot = Dict[str, Tuple[int, int]]


class Debouncer:
    """Calls `callback` once, `delay` seconds after the last trigger()."""

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def trigger(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def _fire(self):
        with self._lock:
            self._timer = None
        self.callback()


class ComponentWatcher:
    """
    Snapshot-based poller. A file counts as changed when it appears,
    disappears, or its mtime/size differ from the previous snapshot.
    """

    def __init__(self, directory: Path, extension: str,
                 on_change: Callable[[Set[str]], None], interval: float = 0.25):
        self.directory = Path(directory)
        self.extension = extension
        self.on_change = on_change
        self.interval = interval
        self._snapshot: Snapshot = self._take_snapshot()
        self._stop = threading.Event()

    def _take_snapshot(self) -> Snapshot:
        snapshot: Snapshot = {}
        if not self.directory.is_dir():
            return snapshot
        for path in self.directory.iterdir():
            if path.suffix != self.extension or not path.is_file():
                continue
            try:
                stat = path.stat()
            except OSError:
                continue
            snapshot[path.name] = (stat.st_mtime_ns, stat.st_size)
        return snapshot

    def poll(self) -> Set[str]:
        """Returns the names that changed since the last poll."""
        current = self._take_snapshot()
        previous = self._snapshot
        changed = {name for name in current.keys() | previous.keys()
                   if current.get(name) != previous.get(name)}
        self._snapshot = current
        return changed

    def run(self):
        """Blocks until stop() is called."""
        logger.debug(f"Watching {self.directory} for *{self.extension}")
        while not self._stop.is_set():
            changed = self.poll()
            if changed:
                self.on_change(changed)
            self._stop.wait(self.interval)

    def stop(self):
        self._stop.set()

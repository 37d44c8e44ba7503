"""Watch mode for folgezettel - alias links in notes as they are saved."""

import hashlib
import json
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Any, Callable

try:
    from watchdog.events import FileSystemEvent, FileSystemEventHandler
    from watchdog.observers import Observer

    WATCHDOG_AVAILABLE = True
except ImportError:
    WATCHDOG_AVAILABLE = False
    FileSystemEventHandler = object
    FileSystemEvent = Any

from .config import ZettelSettings
from .format.formatter import alias_file, write_atomic

logger = logging.getLogger(__name__)


def content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class SelfWriteGuard:
    """
    Remembers the content the watcher itself wrote, so that the file events
    caused by that write are consumed instead of being processed again.
    """

    def __init__(self) -> None:
        self._pending: dict[Path, str] = {}

    def record(self, path: Path, text: str) -> None:
        self._pending[path] = content_hash(text)

    def consume(self, path: Path) -> bool:
        """True if the current content of ``path`` is our own last write."""
        token = self._pending.pop(path, None)
        if token is None:
            return False
        try:
            current = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return False
        return content_hash(current) == token

    def __len__(self) -> int:
        return len(self._pending)


class DebounceHandler(FileSystemEventHandler):  # type: ignore[misc]
    """File system event handler with debouncing."""

    def __init__(self, vault_path: Path, on_batch: Callable[[set[Path]], None], debounce_ms: int = 150):
        super().__init__()
        self.vault_path = vault_path.resolve()
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        self.changed: set[Path] = set()
        self.last_event_time = 0.0

    def _should_skip(self, path: Path) -> bool:
        """Check if file should be skipped."""
        try:
            rel = path.relative_to(self.vault_path)
        except ValueError:
            rel = Path(path.name)

        # Skip hidden files and folders (including .zettel/)
        if any(part.startswith(".") for part in rel.parts):
            return True

        name = path.name

        # Skip temp/swap files
        if name.endswith("~") or name.endswith(".swp") or name.endswith(".tmp"):
            return True

        # Only process .md files
        if not name.endswith(".md"):
            return True

        return False

    def _track(self, src: Any) -> None:
        path = Path(str(src)).resolve()
        if self._should_skip(path):
            return
        self.changed.add(path)
        self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation."""
        if not event.is_directory:
            self._track(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification."""
        if not event.is_directory:
            self._track(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle renames; atomic saves arrive as a move onto the note."""
        if not event.is_directory:
            self._track(event.dest_path)

    def check_and_flush(self) -> None:
        """Check if debounce period has elapsed and flush if so."""
        if not self.changed:
            return

        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        """Process accumulated events."""
        if not self.changed:
            return

        changed = set(self.changed)
        self.changed.clear()

        if self.on_batch:
            self.on_batch(changed)


def process_batch(
    changed: set[Path],
    settings: ZettelSettings,
    guard: SelfWriteGuard,
) -> dict[str, int]:
    """
    Alias links in a batch of changed notes.

    Returns:
        Counts: "scanned", "rewritten", "links", "skipped" (own writes)
    """
    counts = {"scanned": 0, "rewritten": 0, "links": 0, "skipped": 0}

    for path in sorted(changed):
        if guard.consume(path):
            counts["skipped"] += 1
            continue
        if not path.is_file():
            continue

        counts["scanned"] += 1
        try:
            result = alias_file(path, settings, dry_run=True)
        except UnicodeDecodeError as e:
            logger.warning("skipping %s: not valid UTF-8 (%s)", path, e.reason)
            continue
        if not result.changed:
            continue

        guard.record(path, result.formatted_text)
        write_atomic(path, result.formatted_text)
        counts["rewritten"] += 1
        counts["links"] += result.count
        logger.debug("aliased %d links in %s", result.count, path)

    return counts


def watch_vault(
    vault_path: Path,
    runtime: Any,
    debounce_ms: int = 150,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch vault directory for changes and alias links in saved notes.

    Args:
        vault_path: Path to vault directory
        runtime: Runtime instance (settings are re-read for every batch)
        debounce_ms: Debounce window in milliseconds
        quiet: Suppress output
        json_output: Output JSON events instead of human-readable

    Returns:
        Exit code
    """
    if not WATCHDOG_AVAILABLE:
        print(
            "Error: watchdog library not installed. Install with: pip install folgezettel[watch]",
            file=sys.stderr,
        )
        return 1

    if not vault_path.exists():
        print(f"Error: Vault not found: {vault_path}", file=sys.stderr)
        return 1

    running = True
    guard = SelfWriteGuard()

    def handle_batch(changed: set[Path]) -> None:
        """Handle a batch of changes."""
        start_time = time.time()

        try:
            counts = process_batch(changed, runtime.settings(), guard)
            duration_ms = int((time.time() - start_time) * 1000)

            if json_output:
                event = {"type": "batch", **counts, "duration_ms": duration_ms}
                print(json.dumps(event), flush=True)
            elif not quiet and counts["rewritten"]:
                print(
                    f"Aliased {counts['links']} links in {counts['rewritten']} notes ({duration_ms}ms)",
                    flush=True,
                )
        except Exception as e:
            if json_output:
                print(json.dumps({"type": "error", "message": str(e)}), flush=True)
            else:
                print(f"Error: {e}", file=sys.stderr, flush=True)

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(vault_path, handle_batch, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(vault_path), recursive=True)

    if not quiet and not json_output:
        print(f"Watching {vault_path} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()

    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0

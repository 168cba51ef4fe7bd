"""Background execution of full scans.

At most one scan runs at a time, on a daemon thread, so callers are never
blocked.  A running scan can be cancelled; it stops before the next mod
folder and the previous results stay in place.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from kcd2_conflict_checker.scanner.directory import ScanCancelledError
from kcd2_conflict_checker.services.progress import ProgressCallback, noop_progress
from kcd2_conflict_checker.services.scan_service import ModScanner, ScanReport

logger = logging.getLogger(__name__)


class ScanInProgressError(Exception):
    pass


class ScanJobRunner:
    def __init__(self, scanner: ModScanner | None = None) -> None:
        self.scanner = scanner if scanner is not None else ModScanner()
        self._lock = threading.Lock()
        self._running = False
        self._thread: threading.Thread | None = None
        self._cancel_event = threading.Event()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def latest(self) -> ScanReport | None:
        return self.scanner.latest

    def start(
        self,
        game_path: str,
        steam_path: str = "",
        *,
        on_progress: ProgressCallback = noop_progress,
        on_finish: Callable[[], None] | None = None,
    ) -> threading.Thread:
        """Start a scan on a worker thread.

        Raises:
            ScanInProgressError: If another scan has not finished yet.
        """
        with self._lock:
            if self._running:
                raise ScanInProgressError("A scan is already running")
            self._running = True
            self._cancel_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(game_path, steam_path, self._cancel_event, on_progress, on_finish),
                name="kcc-scan",
                daemon=True,
            )
            self._thread = thread
        thread.start()
        return thread

    def _run(
        self,
        game_path: str,
        steam_path: str,
        cancel_event: threading.Event,
        on_progress: ProgressCallback,
        on_finish: Callable[[], None] | None,
    ) -> None:
        try:
            self.scanner.run_full_scan(
                game_path,
                steam_path,
                cancel_event=cancel_event,
                on_progress=on_progress,
            )
        except ScanCancelledError:
            logger.info("Scan cancelled")
            on_progress("cancelled", "Scan cancelled", 0)
        except Exception:
            logger.exception("Scan failed for game path '%s'", game_path)
            on_progress("error", "Scan failed unexpectedly", 0)
        finally:
            with self._lock:
                self._running = False
            if on_finish is not None:
                on_finish()

    def cancel(self) -> bool:
        """Signal the running scan to stop. Returns False when idle."""
        with self._lock:
            if not self._running:
                return False
            self._cancel_event.set()
            return True

    def shutdown(self, timeout: float = 5.0) -> None:
        self.cancel()
        thread = self._thread
        if thread is not None and thread.is_alive():
            thread.join(timeout)


scan_runner = ScanJobRunner()


def get_scan_runner() -> ScanJobRunner:
    return scan_runner

"""Periodic removal of stale temporary upload files.

Nothing is scheduled at import time: the host process calls
`TempFileReaper.start()` on startup and `await TempFileReaper.stop()` on
shutdown (see app.main).
"""

import asyncio
import logging
import os
import stat
import time
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from app.core.config import settings
from app.core.exceptions import CleanupError
from app.core.exceptions import DeleteError
from app.core.exceptions import DirectoryAccessError
from app.core.exceptions import StatError

logger = logging.getLogger(__name__)


@dataclass
class CleanupReport:
    """Outcome of one reaper tick."""

    scanned: int = 0
    deleted: list[str] = field(default_factory=list)
    errors: list[CleanupError] = field(default_factory=list)
    skipped: bool = False


class TempFileReaper:
    """Deletes files older than `max_age` seconds from `directory` every `interval` seconds."""

    def __init__(
        self,
        directory: Path | str | None = None,
        max_age: float | None = None,
        interval: float | None = None,
        run_on_start: bool | None = None,
    ) -> None:
        self.directory = Path(directory) if directory is not None else settings.temp_upload_dir
        self.max_age = max_age if max_age is not None else settings.temp_file_max_age
        self.interval = interval if interval is not None else settings.temp_cleanup_interval
        self.run_on_start = run_on_start if run_on_start is not None else settings.temp_cleanup_on_startup
        self._task: asyncio.Task[None] | None = None
        self._tick_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the periodic loop on the running event loop. Calling it twice is a no-op."""
        if self.running:
            logger.debug("Temp file reaper already running")
            return
        logger.info(
            f"Starting temp file reaper on {self.directory} "
            f"(max age {self.max_age}s, every {self.interval}s)"
        )
        self._task = asyncio.create_task(self._loop(), name="temp-file-reaper")

    async def stop(self) -> None:
        """Cancel the periodic loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Temp file reaper stopped")

    async def _loop(self) -> None:
        if not self.run_on_start:
            await asyncio.sleep(self.interval)
        while True:
            try:
                await self.run_once()
            except Exception as e:
                # Keep the loop alive; the next tick gets a fresh attempt
                logger.error(f"Unexpected error during temp cleanup: {e}", exc_info=True)
            await asyncio.sleep(self.interval)

    async def run_once(self) -> CleanupReport:
        """Run a single tick. A tick requested while another is in progress is skipped."""
        if self._tick_lock.locked():
            logger.warning("Previous temp cleanup still running, skipping this tick")
            return CleanupReport(skipped=True)

        async with self._tick_lock:
            report = await asyncio.to_thread(self._sweep)

        for error in report.errors:
            logger.error(str(error))
        if report.deleted or report.errors:
            logger.info(
                f"Temp cleanup finished: scanned {report.scanned}, "
                f"deleted {len(report.deleted)}, errors {len(report.errors)}"
            )
        return report

    def _sweep(self) -> CleanupReport:
        report = CleanupReport()
        try:
            entries = os.listdir(self.directory)
        except OSError as e:
            report.errors.append(DirectoryAccessError(self.directory, e))
            return report

        now = time.time()
        for name in entries:
            report.scanned += 1
            try:
                if self._remove_if_stale(self.directory / name, now):
                    report.deleted.append(name)
                    logger.info(f"Deleted old temp file: {name}")
            except CleanupError as e:
                report.errors.append(e)
        return report

    def _remove_if_stale(self, path: Path, now: float) -> bool:
        path = path.absolute()
        try:
            st = path.stat()
        except FileNotFoundError:
            logger.warning(f"Temp file vanished before it could be checked: {path.name}")
            return False
        except OSError as e:
            raise StatError(path, e) from e

        if not stat.S_ISREG(st.st_mode):
            return False
        if now - st.st_mtime <= self.max_age:
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"Temp file already removed (possibly by another cleaner): {path.name}")
            return False
        except OSError as e:
            raise DeleteError(path, e) from e
        return True


def cleanup_temp_files() -> CleanupReport:
    """Run one tick with the configured defaults, outside any event loop."""
    return asyncio.run(TempFileReaper().run_once())

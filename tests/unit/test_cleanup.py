import asyncio
import logging
import os
import pathlib
import threading
import time

import pytest

from app.core.cleanup import TempFileReaper
from app.core.config import settings
from app.core.exceptions import DeleteError
from app.core.exceptions import DirectoryAccessError
from app.core.exceptions import StatError

HOUR = 60 * 60


@pytest.mark.asyncio
async def test_stale_file_removed_fresh_file_kept(temp_dir, make_temp_file):
    stale = make_temp_file("a.tmp", age=2 * HOUR)
    fresh = make_temp_file("b.tmp", age=10 * 60)

    report = await TempFileReaper(directory=temp_dir).run_once()

    assert not stale.exists()
    assert fresh.exists()
    assert report.deleted == ["a.tmp"]
    assert report.scanned == 2
    assert report.errors == []


@pytest.mark.asyncio
async def test_second_tick_deletes_nothing(temp_dir, make_temp_file):
    make_temp_file("a.tmp", age=2 * HOUR)
    make_temp_file("b.tmp", age=60)
    reaper = TempFileReaper(directory=temp_dir)

    first = await reaper.run_once()
    second = await reaper.run_once()

    assert first.deleted == ["a.tmp"]
    assert second.deleted == []
    assert second.errors == []


@pytest.mark.asyncio
async def test_missing_directory_logged_then_recovers(tmp_path, caplog):
    directory = tmp_path / "uploads" / "temp"
    reaper = TempFileReaper(directory=directory)
    caplog.set_level(logging.INFO, logger="app.core.cleanup")

    report = await reaper.run_once()

    assert len(report.errors) == 1
    assert isinstance(report.errors[0], DirectoryAccessError)
    error_records = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(error_records) == 1
    assert str(directory) in error_records[0].getMessage()

    # Directory shows up later: the next tick works normally
    directory.mkdir(parents=True)
    old = directory / "old.tmp"
    old.write_bytes(b"x")
    os.utime(old, (time.time() - 2 * HOUR, time.time() - 2 * HOUR))
    report = await reaper.run_once()
    assert report.errors == []
    assert report.deleted == ["old.tmp"]


@pytest.mark.asyncio
async def test_deletion_is_logged_with_file_name(temp_dir, make_temp_file, caplog):
    make_temp_file("upload-123.png", age=3 * HOUR)
    caplog.set_level(logging.INFO, logger="app.core.cleanup")

    await TempFileReaper(directory=temp_dir).run_once()

    assert "Deleted old temp file: upload-123.png" in caplog.text


@pytest.mark.asyncio
async def test_stat_failure_does_not_block_other_files(temp_dir, make_temp_file, monkeypatch):
    make_temp_file("broken.tmp", age=2 * HOUR)
    stale = make_temp_file("stale.tmp", age=2 * HOUR)

    real_stat = pathlib.Path.stat

    def flaky_stat(self, *args, **kwargs):
        if self.name == "broken.tmp":
            raise PermissionError(13, "Permission denied")
        return real_stat(self, *args, **kwargs)

    monkeypatch.setattr(pathlib.Path, "stat", flaky_stat)

    report = await TempFileReaper(directory=temp_dir).run_once()

    assert not stale.exists()
    assert report.deleted == ["stale.tmp"]
    assert len(report.errors) == 1
    assert isinstance(report.errors[0], StatError)
    assert report.errors[0].path.name == "broken.tmp"


@pytest.mark.asyncio
async def test_delete_failure_is_reported(temp_dir, make_temp_file, monkeypatch):
    locked = make_temp_file("locked.tmp", age=2 * HOUR)
    make_temp_file("other.tmp", age=2 * HOUR)

    real_unlink = pathlib.Path.unlink

    def flaky_unlink(self, *args, **kwargs):
        if self.name == "locked.tmp":
            raise PermissionError(13, "Permission denied")
        return real_unlink(self, *args, **kwargs)

    monkeypatch.setattr(pathlib.Path, "unlink", flaky_unlink)

    report = await TempFileReaper(directory=temp_dir).run_once()

    assert locked.exists()
    assert report.deleted == ["other.tmp"]
    assert [type(e) for e in report.errors] == [DeleteError]


@pytest.mark.asyncio
async def test_file_removed_by_someone_else_is_tolerated(temp_dir, make_temp_file, monkeypatch):
    make_temp_file("raced.tmp", age=2 * HOUR)

    def gone(self, *args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(pathlib.Path, "unlink", gone)

    report = await TempFileReaper(directory=temp_dir).run_once()

    assert report.deleted == []
    assert report.errors == []


@pytest.mark.asyncio
async def test_directories_are_left_alone(temp_dir):
    nested = temp_dir / "chunks"
    nested.mkdir()

    report = await TempFileReaper(directory=temp_dir, max_age=0).run_once()

    assert nested.exists()
    assert report.deleted == []


@pytest.mark.asyncio
async def test_overlapping_tick_is_skipped(temp_dir, make_temp_file, monkeypatch):
    make_temp_file("a.tmp", age=2 * HOUR)
    reaper = TempFileReaper(directory=temp_dir)

    started = threading.Event()
    release = threading.Event()
    real_sweep = reaper._sweep

    def slow_sweep():
        started.set()
        release.wait(timeout=5)
        return real_sweep()

    monkeypatch.setattr(reaper, "_sweep", slow_sweep)

    first = asyncio.create_task(reaper.run_once())
    await asyncio.to_thread(started.wait, 5)

    second = await reaper.run_once()
    release.set()
    first_report = await first

    assert second.skipped is True
    assert second.deleted == []
    assert first_report.skipped is False
    assert first_report.deleted == ["a.tmp"]


@pytest.mark.asyncio
async def test_start_runs_periodically_and_stops(temp_dir, make_temp_file):
    stale = make_temp_file("a.tmp", age=2 * HOUR)
    reaper = TempFileReaper(directory=temp_dir, interval=0.01, run_on_start=True)

    reaper.start()
    reaper.start()  # second call is a no-op
    assert reaper.running

    for _ in range(200):
        if not stale.exists():
            break
        await asyncio.sleep(0.01)
    assert not stale.exists()

    # Files that go stale later are picked up by later ticks
    later = make_temp_file("b.tmp", age=2 * HOUR)
    for _ in range(200):
        if not later.exists():
            break
        await asyncio.sleep(0.01)
    assert not later.exists()

    await reaper.stop()
    assert not reaper.running


@pytest.mark.asyncio
async def test_first_tick_waits_one_interval_without_run_on_start(temp_dir, make_temp_file):
    stale = make_temp_file("a.tmp", age=2 * HOUR)
    reaper = TempFileReaper(directory=temp_dir, interval=HOUR, run_on_start=False)

    reaper.start()
    await asyncio.sleep(0.05)

    assert stale.exists()
    await reaper.stop()


@pytest.mark.asyncio
async def test_stop_without_start_is_harmless():
    reaper = TempFileReaper(directory="unused")
    await reaper.stop()
    assert not reaper.running


def test_defaults_come_from_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "temp_upload_dir", tmp_path)
    monkeypatch.setattr(settings, "temp_file_max_age", 120)

    reaper = TempFileReaper()

    assert reaper.directory == tmp_path
    assert reaper.max_age == 120
    assert reaper.interval == settings.temp_cleanup_interval

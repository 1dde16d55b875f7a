import asyncio
import logging

import pytest

from drive_relay.dispatcher import UploadDispatcher
from drive_relay.schemas import FilePayload
from drive_relay.worker_pool import BoundedWorkerPool


def make_files(*names):
    return [FilePayload(name=name, data=name.encode(), content_type="image/png") for name in names]


async def test_results_follow_submission_order(fake_drive):
    # c finishes first, a last
    fake_drive.delays = {"a.png": 0.03, "b.png": 0.02, "c.png": 0.0}
    dispatcher = UploadDispatcher(fake_drive, BoundedWorkerPool(max_workers=5))

    results = await dispatcher.dispatch(make_files("a.png", "b.png", "c.png"), "folder-x")

    assert [r.name for r in results] == ["a.png", "b.png", "c.png"]
    assert [call[1] for call in fake_drive.calls_for("create_file")] == ["folder-x"] * 3


async def test_in_flight_uploads_never_exceed_cap(fake_drive):
    dispatcher = UploadDispatcher(fake_drive, BoundedWorkerPool(max_workers=3))
    names = [f"{i}.jpg" for i in range(12)]

    results = await dispatcher.dispatch(make_files(*names), "folder-x")

    assert len(results) == 12
    assert fake_drive.peak_in_flight == 3


async def test_cap_holds_across_concurrent_batches(fake_drive):
    dispatcher = UploadDispatcher(fake_drive, BoundedWorkerPool(max_workers=2))

    first, second = await asyncio.gather(
        dispatcher.dispatch(make_files("a1", "a2", "a3"), "folder-a"),
        dispatcher.dispatch(make_files("b1", "b2", "b3", "b4"), "folder-b"),
    )

    assert [r.name for r in first] == ["a1", "a2", "a3"]
    assert [r.name for r in second] == ["b1", "b2", "b3", "b4"]
    assert fake_drive.peak_in_flight == 2


async def test_one_failure_fails_the_batch(fake_drive):
    fake_drive.fail_on = {"b.png": RuntimeError("quota exceeded")}
    dispatcher = UploadDispatcher(fake_drive, BoundedWorkerPool(max_workers=5))

    with pytest.raises(RuntimeError, match="quota exceeded"):
        await dispatcher.dispatch(make_files("a.png", "b.png", "c.png"), "folder-x")

    # siblings were still issued; their results are simply not reported
    assert len(fake_drive.calls_for("create_file")) == 3


async def test_empty_batch_makes_no_calls(fake_drive):
    dispatcher = UploadDispatcher(fake_drive, BoundedWorkerPool())

    assert await dispatcher.dispatch([], "folder-x") == []
    assert fake_drive.calls == []


async def test_batch_is_logged_with_size_and_folder(fake_drive, caplog):
    dispatcher = UploadDispatcher(fake_drive, BoundedWorkerPool(max_workers=2))

    with caplog.at_level(logging.INFO, logger="drive_relay.utils.decorators"):
        await dispatcher.dispatch(make_files("a.png", "bb.png"), "folder-x")

    assert "Uploading 2 file(s), 11 bytes, to folder folder-x" in caplog.text
    assert "Uploaded 2 file(s) to folder folder-x" in caplog.text


async def test_failed_batch_is_logged(fake_drive, caplog):
    fake_drive.fail_on = {"b.png": RuntimeError("quota exceeded")}
    dispatcher = UploadDispatcher(fake_drive, BoundedWorkerPool(max_workers=2))

    with caplog.at_level(logging.INFO, logger="drive_relay.utils.decorators"):
        with pytest.raises(RuntimeError):
            await dispatcher.dispatch(make_files("a.png", "b.png"), "folder-x")

    assert "Upload of 2 file(s) to folder folder-x failed" in caplog.text
    assert "quota exceeded" in caplog.text

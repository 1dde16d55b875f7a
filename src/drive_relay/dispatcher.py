"""Fan a batch of files out to Drive through the shared worker pool."""
import asyncio
import logging
from typing import List, Sequence

from drive_relay.drive.client import DriveGateway
from drive_relay.schemas import FilePayload, UploadResult
from drive_relay.utils.decorators import log_upload_batch
from drive_relay.worker_pool import BoundedWorkerPool

logger = logging.getLogger(__name__)


def _consume_outcome(future: asyncio.Future) -> None:
    # Mark late failures as retrieved once the batch has already failed.
    if not future.cancelled():
        future.exception()


class UploadDispatcher:
    """
    Upload every file of a request into one folder.

    Results are collected positionally, so they come back in submission
    order whatever order Drive finishes in. The batch is all-or-nothing:
    the first failure is raised and results of files that did succeed are
    dropped. Units that are already running are not cancelled.
    """

    def __init__(self, drive: DriveGateway, pool: BoundedWorkerPool):
        self._drive = drive
        self._pool = pool

    @log_upload_batch
    async def dispatch(self, files: Sequence[FilePayload], parent_id: str) -> List[UploadResult]:
        futures = [
            self._pool.submit(self._drive.create_file, parent_id, payload)
            for payload in files
        ]
        try:
            return list(await asyncio.gather(*futures))
        except Exception:
            for future in futures:
                future.add_done_callback(_consume_outcome)
            raise

"""Logging decorators for upload batches."""
import functools
import logging
import time
from typing import Any, Callable, Sequence, TypeVar, cast

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_upload_batch(func: F) -> F:
    """Log size, destination and duration of an upload batch.

    The decorated coroutine must take `(self, files, parent_id)` where
    `files` is a sequence of FilePayload.
    """
    @functools.wraps(func)
    async def wrapper(self, files: Sequence, parent_id: str, *args, **kwargs):
        total_bytes = sum(payload.size_bytes for payload in files)
        logger.info(
            "Uploading %d file(s), %d bytes, to folder %s", len(files), total_bytes, parent_id
        )
        start_time = time.monotonic()
        try:
            results = await func(self, files, parent_id, *args, **kwargs)
        except Exception as e:
            logger.error(
                "Upload of %d file(s) to folder %s failed after %.2fs: %s",
                len(files), parent_id, time.monotonic() - start_time, e,
            )
            raise
        logger.info(
            "Uploaded %d file(s) to folder %s in %.2fs",
            len(results), parent_id, time.monotonic() - start_time,
        )
        return results
    return cast(F, wrapper)

"""Resolve (or create) a named subfolder under a parent folder."""
import logging

from drive_relay.cache import FolderCache
from drive_relay.drive.client import DriveGateway

logger = logging.getLogger(__name__)


class SubfolderResolver:
    """
    Map `(parent_id, name)` to a Drive folder id, creating the folder on
    first use.

    The check-then-create sequence holds no lock, so two requests racing
    on a brand new name may both create a folder. The later cache write
    wins and both ids remain valid upload targets.
    """

    def __init__(self, drive: DriveGateway, cache: FolderCache):
        self._drive = drive
        self._cache = cache

    async def resolve(self, parent_id: str, name: str) -> str:
        cached = self._cache.get(parent_id, name)
        if cached:
            logger.debug("Folder cache hit for '%s' under %s", name, parent_id)
            return cached

        folder_id = await self._drive.find_folder(parent_id, name)
        if folder_id:
            logger.info("Found existing folder '%s' (%s)", name, folder_id)
        else:
            folder_id = await self._drive.create_folder(parent_id, name)

        self._cache.put(parent_id, name, folder_id)
        return folder_id

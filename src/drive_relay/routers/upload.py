import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from drive_relay.config.settings import Settings
from drive_relay.dependencies import get_app_settings, get_dispatcher, get_resolver
from drive_relay.dispatcher import UploadDispatcher
from drive_relay.drive.folders import SubfolderResolver
from drive_relay.errors import NoFilesError, ProviderError, UploadRejectedError
from drive_relay.schemas import ErrorResponse, FilePayload, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_payloads(files: List[UploadFile], settings: Settings) -> List[FilePayload]:
    """Read every part into memory, enforcing the per-request limits first."""
    if len(files) > settings.max_files:
        raise UploadRejectedError(
            f"Too many files: {len(files)} (max {settings.max_files})"
        )

    payloads = []
    for upload in files:
        data = await upload.read()
        if len(data) > settings.max_file_size_bytes:
            raise UploadRejectedError(
                f"File too large: {upload.filename} (max {settings.max_file_size_mb} MB)"
            )
        payloads.append(
            FilePayload(name=upload.filename, data=data, content_type=upload.content_type)
        )
    return payloads


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_files(
    files: Optional[List[UploadFile]] = File(None, description="Files to store in Drive"),
    subfolder_name: Optional[str] = Form(
        None,
        alias="subfolderName",
        description="Optional subfolder (created on first use) under the root folder",
    ),
    settings: Settings = Depends(get_app_settings),
    resolver: SubfolderResolver = Depends(get_resolver),
    dispatcher: UploadDispatcher = Depends(get_dispatcher),
) -> UploadResponse:
    """
    Upload one or more files to the configured Drive folder.

    Args:
        files: The multipart `files` parts
        subfolder_name: Optional subfolder name under the root folder

    Returns:
        UploadResponse: Drive metadata for every file, in request order
    """
    # browsers send an empty, nameless part for an untouched file input
    files = [f for f in files or [] if f.filename]
    if not files:
        raise NoFilesError()

    payloads = await read_payloads(files, settings)

    subfolder_name = (subfolder_name or "").strip()
    try:
        parent_id = settings.drive_folder_id
        if subfolder_name:
            parent_id = await resolver.resolve(settings.drive_folder_id, subfolder_name)
        results = await dispatcher.dispatch(payloads, parent_id)
    except Exception as e:
        logger.exception("Upload of %d file(s) failed", len(payloads))
        raise ProviderError.from_exception(e) from e

    return UploadResponse(count=len(results), results=results)

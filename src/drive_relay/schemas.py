####################################
# --- Request/response schemas --- #
####################################

from dataclasses import dataclass
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONTENT_TYPE = "application/octet-stream"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


@dataclass
class FilePayload:
    """One file taken from the multipart body."""
    name: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def mime_type(self) -> str:
        return self.content_type or DEFAULT_CONTENT_TYPE

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class UploadResult(BaseModel):
    """Drive metadata for one uploaded file."""
    id: str = Field(description="Drive file id.", json_schema_extra={"example": "1AbCdEf"})
    name: str = Field(description="Display name of the file in Drive.")
    webViewLink: Optional[str] = Field(None, description="Link to open the file in Drive.")
    webContentLink: Optional[str] = Field(None, description="Direct download link.")


class UploadResponse(BaseModel):
    """Response model for `POST /upload`."""
    ok: Literal[True] = True
    count: int
    results: List[UploadResult]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "ok": True,
                "count": 1,
                "results": [
                    {
                        "id": "1AbCdEf",
                        "name": "a.png",
                        "webViewLink": "https://drive.google.com/file/d/1AbCdEf/view",
                        "webContentLink": "https://drive.google.com/uc?id=1AbCdEf&export=download",
                    }
                ],
            }
        }
    )


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""
    ok: Literal[False] = False
    error: str

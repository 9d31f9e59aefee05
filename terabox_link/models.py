from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ShareListing:
    """Enumeration response: the raw entry tree plus the session parameters
    the download-link endpoint needs."""

    title: str
    entries: list[dict[str, Any]]
    uk: Any = None
    sign: Any = None
    timestamp: Any = None
    shareid: Any = None


@dataclass(frozen=True)
class FlatFile:
    entry: dict[str, Any] = field(repr=False)
    full_path: str

    @property
    def filename(self) -> str:
        return self.entry.get("server_filename") or ""

    @property
    def fs_id(self) -> Any:
        return self.entry.get("fs_id")


class ShareRequest(BaseModel):
    url: str = Field(strict=True, min_length=1)
    password: str = ""


class ResolvedFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: str
    full_path: str = Field(alias="fullPath")
    size: str
    size_bytes: int = Field(alias="sizeBytes")
    download_url: str = Field(alias="downloadUrl")
    thumbnail: Optional[str] = None
    file_type: str = Field(alias="fileType")
    fs_id: Optional[int | str] = Field(default=None, alias="fsId")
    md5: Optional[str] = None
    path: str = "/"
    isdir: bool = False


class ShareResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    share_title: str = Field(alias="shareTitle")
    share_id: str = Field(alias="shareId")
    files: list[ResolvedFile]
    total_files: int = Field(alias="totalFiles")
    processed_files: int = Field(alias="processedFiles")
    share_url: Optional[str] = Field(default=None, alias="shareUrl")
    timestamp: datetime


class ShareResponse(BaseModel):
    success: bool = True
    data: ShareResult

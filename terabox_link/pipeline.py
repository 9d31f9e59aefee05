import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

from terabox_link.errors import NoFilesInShare, NoLinksResolved, ShareError
from terabox_link.formatting import extract_thumbnail, format_file_size, get_file_type
from terabox_link.log import get_logger
from terabox_link.models import FlatFile, ResolvedFile, ShareListing, ShareResult
from terabox_link.upstream import ShareProvider

logger = get_logger("pipeline")


def is_folder(entry: dict) -> bool:
    return str(entry.get("isdir", 0)).lower() in ("1", "true")


def flatten_entries(entries: Iterable[dict], parent_path: str = "") -> List[FlatFile]:
    """
    Depth-first, pre-order flattening of the upstream entry tree.

    Folders are traversed in place and never emitted; a child's path is its
    parent's path joined with ``/``.
    """
    files: List[FlatFile] = []
    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed entry under %r: %r", parent_path or "/", entry)
            continue
        name = entry.get("server_filename") or ""
        full_path = f"{parent_path}/{name}" if parent_path else name
        if is_folder(entry):
            children = entry.get("children")
            if isinstance(children, list):
                files.extend(flatten_entries(children, full_path))
        else:
            files.append(FlatFile(entry=entry, full_path=full_path))
    return files


def build_resolved_file(file: FlatFile, download_url: str) -> ResolvedFile:
    entry = file.entry
    size_bytes = int(entry.get("size") or 0)
    return ResolvedFile(
        filename=file.filename,
        full_path=file.full_path,
        size=format_file_size(size_bytes),
        size_bytes=size_bytes,
        download_url=download_url,
        thumbnail=extract_thumbnail(entry),
        file_type=get_file_type(file.filename),
        fs_id=file.fs_id,
        md5=entry.get("md5") or None,
        path=entry.get("path") or "/",
    )


class ShareResolver:
    def __init__(
        self,
        provider: ShareProvider,
        max_files: int = 10,
        link_delay: float = 2.0,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        self.provider = provider
        self.max_files = max_files
        self.link_delay = link_delay
        self._sleep = sleep

    def resolve(self, share_id: str, password: str = "", share_url: Optional[str] = None) -> ShareResult:
        logger.info("Fetching share info for %s", share_id)
        listing = self.provider.fetch_listing(share_id, password)

        files = flatten_entries(listing.entries)
        if not files:
            raise NoFilesInShare(detail=f"share {share_id} has no files")

        bounded = files[: self.max_files]
        if len(bounded) < len(files):
            logger.info("Share %s has %d files, processing the first %d", share_id, len(files), len(bounded))

        resolved = self._mint_links(listing, bounded, share_url)
        if not resolved:
            raise NoLinksResolved(detail=f"0 of {len(bounded)} links resolved for share {share_id}")

        logger.info("Resolved %d/%d files for share %s", len(resolved), len(bounded), share_id)
        return ShareResult(
            share_title=listing.title or resolved[0].filename,
            share_id=share_id,
            files=resolved,
            total_files=len(files),
            processed_files=len(resolved),
            share_url=share_url,
            timestamp=datetime.now(timezone.utc),
        )

    def _mint_links(
        self, listing: ShareListing, files: List[FlatFile], referer: Optional[str]
    ) -> List[ResolvedFile]:
        resolved: List[ResolvedFile] = []
        for index, file in enumerate(files):
            if index > 0 and self.link_delay > 0:
                self._sleep(self.link_delay)

            logger.info("Processing file %d/%d: %s", index + 1, len(files), file.full_path)
            try:
                download_url = self.provider.fetch_download_link(listing, file, referer)
                if not download_url:
                    logger.warning("Failed to get download link for: %s", file.full_path)
                    continue
                resolved.append(build_resolved_file(file, download_url))
            except ShareError as exc:
                logger.warning("Error processing file %s: %s (%s)", file.full_path, exc.message, exc.detail)
            except (ValueError, TypeError, AttributeError) as exc:
                # Malformed entry or link payload; pydantic errors are ValueErrors.
                logger.warning("Error processing file %s: %s: %s", file.full_path, type(exc).__name__, exc)
        return resolved

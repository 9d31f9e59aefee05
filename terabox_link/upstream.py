from typing import Any, Dict, Optional, Protocol

import httpx

from terabox_link.config import Settings
from terabox_link.errors import (
    ConfigurationError,
    PasswordRequired,
    ShareNotFound,
    UnknownUpstreamError,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from terabox_link.log import get_logger
from terabox_link.models import FlatFile, ShareListing

logger = get_logger("upstream")

PASSWORD_HINTS = ("password", "pwd", "verify", "passcode")


class ShareProvider(Protocol):
    def fetch_listing(self, share_id: str, password: str = "") -> ShareListing:
        ...

    def fetch_download_link(
        self, listing: ShareListing, file: FlatFile, referer: Optional[str] = None
    ) -> Optional[str]:
        ...


class TeraboxClient:
    """
    Terabox web API adapter.

    Usage:
        with TeraboxClient(cookie="ndus=...") as client:
            listing = client.fetch_listing("1AbCdEf")
    """

    def __init__(
        self,
        cookie: str,
        base_url: str = "https://www.terabox.com",
        user_agent: str = "Mozilla/5.0",
        info_timeout: float = 15.0,
        link_timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not cookie or not cookie.strip():
            raise ConfigurationError(detail="TBX_TERABOX_COOKIE is not set")
        self.base_url = base_url.rstrip("/")
        self.info_timeout = info_timeout
        self.link_timeout = link_timeout
        self._client = httpx.Client(
            headers=self._default_headers(cookie.strip(), user_agent),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None
    ) -> "TeraboxClient":
        return cls(
            cookie=settings.terabox_cookie,
            base_url=settings.api_base_url,
            user_agent=settings.user_agent,
            info_timeout=settings.info_timeout_seconds,
            link_timeout=settings.link_timeout_seconds,
            transport=transport,
        )

    def __enter__(self) -> "TeraboxClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _default_headers(self, cookie: str, user_agent: str) -> Dict[str, str]:
        """Headers mirroring the Terabox web client."""
        return {
            "Cookie": cookie,
            "User-Agent": user_agent,
            "Referer": f"{self.base_url}/",
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": "en-US,en;q=0.9",
            "Sec-Fetch-Dest": "empty",
            "Sec-Fetch-Mode": "cors",
            "Sec-Fetch-Site": "same-origin",
        }

    def fetch_listing(self, share_id: str, password: str = "") -> ShareListing:
        """
        Fetch the full entry tree of a share in one call.

        Raises PasswordRequired or ShareNotFound when the upstream reports a
        non-zero errno.
        """
        params = {"surl": share_id, "root": "1"}
        if password:
            params["pwd"] = password

        data = self._request("/api/shorturlinfo", params=params, timeout=self.info_timeout)
        errno = data.get("errno")
        if errno != 0:
            message = str(data.get("errmsg") or data.get("message") or f"errno {errno}")
            logger.warning("Share %s rejected by upstream: errno=%s message=%s", share_id, errno, message)
            if any(hint in message.lower() for hint in PASSWORD_HINTS):
                raise PasswordRequired(detail=message)
            raise ShareNotFound(detail=message)

        entries = data.get("list") or []
        if not isinstance(entries, list):
            raise UnknownUpstreamError(detail=f"unexpected file list for share {share_id}: {type(entries).__name__}")

        return ShareListing(
            title=str(data.get("title") or ""),
            entries=entries,
            uk=data.get("uk"),
            sign=data.get("sign"),
            timestamp=data.get("timestamp"),
            shareid=data.get("shareid"),
        )

    def fetch_download_link(
        self, listing: ShareListing, file: FlatFile, referer: Optional[str] = None
    ) -> Optional[str]:
        """Return the direct link for one file, or None if the upstream has none."""
        params = {
            "sign": listing.sign,
            "timestamp": listing.timestamp,
            "fid_list": f"[{file.fs_id}]",
            "primaryid": listing.shareid,
            "uk": listing.uk,
            "product": "share",
            "type": "nolimit",
        }
        headers = {"Referer": referer} if referer else None

        data = self._request(
            "/api/download", params=params, headers=headers, timeout=self.link_timeout
        )
        if data.get("errno") != 0:
            return None
        links = data.get("list")
        if not isinstance(links, list) or not links:
            return None
        if not isinstance(links[0], dict):
            raise UnknownUpstreamError(detail=f"unexpected link entry for fs_id {file.fs_id}: {links[0]!r}")
        dlink = links[0].get("dlink")
        return dlink if isinstance(dlink, str) and dlink else None

    def _request(self, endpoint: str, timeout: float, **kwargs: Any) -> Dict:
        """
        GET wrapper that maps transport and status failures onto ShareError.
        """
        url = f"{self.base_url}{endpoint}"
        try:
            response = self._client.get(url, timeout=timeout, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            raise UpstreamTimeout(detail=f"timeout after {timeout}s for {endpoint}") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 403:
                raise UpstreamUnavailable(detail=f"HTTP 403 for {endpoint}") from exc
            if status == 404:
                raise ShareNotFound(detail=f"HTTP 404 for {endpoint}") from exc
            raise UnknownUpstreamError(detail=f"HTTP {status} for {endpoint}") from exc
        except httpx.HTTPError as exc:
            raise UnknownUpstreamError(detail=f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            # JSON decode error.
            raise UnknownUpstreamError(detail=f"invalid JSON from {endpoint}") from exc

        if not isinstance(data, dict):
            raise UnknownUpstreamError(detail=f"unexpected response shape from {endpoint}")
        return data

"""Extension directory client.

Resolves extension metadata by slug and downloads archives from a
plugin-information endpoint compatible with ``api.wordpress.org/plugins/info/1.2/``.
"""

from __future__ import annotations

import logging

import httpx

from wpai.store.errors import DirectoryError
from wpai.store.models import ExtensionInfo

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY_URL = "https://api.wordpress.org/plugins/info/1.2/"


class ExtensionDirectory:
    """Thin synchronous client around the directory's info and download URLs."""

    def __init__(
        self,
        base_url: str = DEFAULT_DIRECTORY_URL,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
        return self._client

    def get_info(self, slug: str) -> ExtensionInfo:
        """Fetch metadata for *slug*. Raises DirectoryError on any failure."""
        params = {
            "action": "plugin_information",
            "request[slug]": slug,
            "request[fields][sections]": "0",
        }
        try:
            resp = self._http().get(self.base_url, params=params)
        except httpx.HTTPError as e:
            raise DirectoryError(f"An unexpected error occurred contacting the directory: {e}")

        try:
            data = resp.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("error"):
            status = resp.status_code if resp.status_code >= 400 else 404
            raise DirectoryError(str(data["error"]), status=status)
        if resp.status_code >= 400 or not isinstance(data, dict):
            raise DirectoryError(
                f"Directory returned HTTP {resp.status_code} for '{slug}'",
                status=resp.status_code if resp.status_code >= 400 else 502,
            )

        return ExtensionInfo(
            slug=data.get("slug") or slug,
            name=data.get("name", ""),
            version=str(data.get("version", "")),
            download_link=data.get("download_link", ""),
        )

    def download(self, url: str) -> bytes:
        logger.debug("Downloading extension archive %s", url)
        try:
            resp = self._http().get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DirectoryError(
                f"Download failed: HTTP {e.response.status_code}", status=e.response.status_code
            )
        except httpx.HTTPError as e:
            raise DirectoryError(f"Download failed: {e}")
        return resp.content

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

"""Figma REST API client for version and preview-image lookups."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from designspec_engine.providers import PreviewNotFoundError, ProviderError, Version

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.figma.com"


class FigmaClient:
    """Thin synchronous wrapper over the two endpoints the engine needs.

    Preview URLs returned by the images endpoint are temporary (about 30
    days) and are embedded as-is.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        image_format: str = "png",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.image_format = image_format
        self._client = httpx.Client(
            base_url=api_url,
            headers={"X-Figma-Token": token},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> FigmaClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_latest_version(self, file_id: str) -> Version:
        """Return the most recent saved version of a file."""
        data = self._get(f"/v1/files/{file_id}/versions")
        versions = data.get("versions") or []
        if not versions:
            raise ProviderError(f"No versions returned for file {file_id}")
        latest = versions[0]
        try:
            return Version(id=str(latest["id"]), created_at=str(latest["created_at"]))
        except (KeyError, TypeError) as e:
            raise ProviderError(f"Malformed version payload for file {file_id}: {e}") from e

    def fetch_preview_url(self, file_id: str, node_id: str) -> str:
        """Return a rendered preview image URL for one node.

        Raises:
            PreviewNotFoundError: If the API has no image for the node.
        """
        data = self._get(
            f"/v1/images/{file_id}",
            params={"ids": node_id, "format": self.image_format},
        )
        if data.get("err"):
            raise ProviderError(f"Image render failed for {file_id} {node_id}: {data['err']}")
        url = (data.get("images") or {}).get(node_id)
        if not url:
            raise PreviewNotFoundError(f"Could not get image for node {node_id}")
        logger.info("Using preview URL for %s (expires in 30 days): %s", node_id, url)
        return url

    def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ProviderError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            raise ProviderError(f"GET {path} returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError(f"GET {path} returned {type(data).__name__}, expected an object")
        return data

"""Pull-request description store backed by the GitHub REST API."""

from __future__ import annotations

import logging

import httpx

from designspec_engine.providers import ProviderError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class GitHubPullRequestStore:
    """Read and write a pull request's body. ``ref`` is the PR number."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.owner = owner
        self.repo = repo
        self._client = httpx.Client(
            base_url=api_url,
            headers={
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> GitHubPullRequestStore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _path(self, ref: str) -> str:
        return f"/repos/{self.owner}/{self.repo}/pulls/{ref}"

    def fetch_document(self, ref: str) -> str:
        """Return the current PR body (empty string when the PR has none)."""
        logger.info("Fetching PR body for #%s in %s/%s", ref, self.owner, self.repo)
        try:
            response = self._client.get(self._path(ref))
            response.raise_for_status()
            body = response.json().get("body")
        except httpx.HTTPError as e:
            raise ProviderError(f"Could not fetch PR #{ref}: {e}") from e
        except (ValueError, AttributeError) as e:
            raise ProviderError(f"Unexpected response for PR #{ref}: {e}") from e
        return body or ""

    def persist_document(self, ref: str, text: str) -> int:
        """Replace the PR body. Returns the HTTP status code."""
        logger.info("Updating PR #%s in %s/%s", ref, self.owner, self.repo)
        try:
            response = self._client.patch(self._path(ref), json={"body": text})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ProviderError(f"Could not update PR #{ref}: {e}") from e
        return response.status_code

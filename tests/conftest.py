"""Shared test fixtures for designspec-engine."""

from datetime import datetime, timezone

import pytest

from designspec_engine.providers import PreviewNotFoundError, ProviderError, Version

FIXED_NOW = datetime(2025, 3, 10, 12, 30, 0, tzinfo=timezone.utc)


class FakeProvider:
    """In-memory DesignProvider that records its calls."""

    def __init__(self, versions=None, previews=None, failing_files=()):
        self.versions = versions or {}
        self.previews = previews or {}
        self.failing_files = set(failing_files)
        self.version_calls = []
        self.preview_calls = []

    def fetch_latest_version(self, file_id):
        self.version_calls.append(file_id)
        if file_id in self.failing_files:
            raise ProviderError(f"boom for {file_id}")
        if file_id in self.versions:
            return self.versions[file_id]
        return Version(id=f"V-{file_id}", created_at="2025-01-01T00:00:00Z")

    def fetch_preview_url(self, file_id, node_id):
        self.preview_calls.append((file_id, node_id))
        key = (file_id, node_id)
        if key in self.previews:
            url = self.previews[key]
            if url is None:
                raise PreviewNotFoundError(f"Could not get image for node {node_id}")
            return url
        return f"https://img.example/{file_id}/{node_id.replace(':', '_')}.png"


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW

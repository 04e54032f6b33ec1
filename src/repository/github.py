"""GitHub API client for repository releases.

Provides the three release endpoints the cleanup needs: the paginated
release listing, release deletion by id and tag-reference deletion.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from constants import Constants
from common.http_client import ApiClient, ApiError
from versioning.models import ReleaseRecord

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """The release listing could not be retrieved completely."""

    def __init__(self, message: str, *, page: int, cause: Optional[ApiError] = None):
        super().__init__(message)
        self.page = page
        self.cause = cause


class GitHubReleasesClient:
    """Release operations for a single ``owner/name`` repository."""

    def __init__(
        self,
        api: ApiClient,
        repo: str,
        base_url: Optional[str] = None,
        per_page: int = Constants.REPO_API_PER_PAGE,
    ):
        """Initialize the releases client.

        Args:
            api: Resilient client used for every request
            repo: Repository identifier in ``owner/name`` form
            base_url: Base URL for GitHub API (defaults to Constants.GITHUB_API_BASE)
            per_page: Page size for the release listing
        """
        self.api = api
        self.repo = repo
        self.base_url = (base_url or Constants.GITHUB_API_BASE).rstrip("/")
        self.per_page = per_page

    @property
    def repo_url(self) -> str:
        return f"{self.base_url}/repos/{self.repo}"

    def fetch_all(self) -> List[ReleaseRecord]:
        """Fetch every release, page by page.

        Stops at the first empty or short page.

        Returns:
            Releases in API order

        Raises:
            FetchError: if any page fails; nothing fetched so far is returned
        """
        logger.info("Fetching releases from %s...", self.repo)
        releases: List[ReleaseRecord] = []
        page = 1

        while True:
            url = f"{self.repo_url}/releases?per_page={self.per_page}&page={page}"
            try:
                data = self.api.call("GET", url)
            except ApiError as exc:
                logger.error(
                    "Failed to fetch releases page %d (HTTP %s): %s", page, exc.status_code, exc
                )
                raise FetchError(
                    f"Failed to fetch releases page {page}", page=page, cause=exc
                ) from exc

            if not isinstance(data, list):
                logger.error("Unexpected response for releases page %d", page)
                raise FetchError(f"Unexpected response for releases page {page}", page=page)

            count = len(data)
            if count == 0:
                break

            releases.extend(self._to_records(data))
            logger.info("Fetched page %d: %d releases (total: %d)", page, count, len(releases))

            if count < self.per_page:
                break
            page += 1

        logger.info("Fetched %d releases across %d page(s)", len(releases), page)
        return releases

    def delete_release(self, release_id: int) -> None:
        """Delete a release by id. Raises ApiError on failure."""
        self.api.call("DELETE", f"{self.repo_url}/releases/{release_id}")

    def delete_tag(self, tag: str) -> None:
        """Delete the ``refs/tags/<tag>`` reference. Raises ApiError on failure."""
        self.api.call("DELETE", f"{self.repo_url}/git/refs/tags/{quote(tag, safe='')}")

    def _to_records(self, data: List[Dict[str, Any]]) -> List[ReleaseRecord]:
        """Convert raw release dicts, skipping entries without a tag or id."""
        records = []
        for item in data:
            if not isinstance(item, dict):
                continue
            tag = item.get("tag_name")
            release_id = item.get("id")
            if not tag or release_id is None:
                logger.warning("Skipping release without tag name or id: %s", item.get("name"))
                continue
            try:
                records.append(
                    ReleaseRecord.from_api(tag, release_id, bool(item.get("prerelease", False)))
                )
            except (TypeError, ValueError):
                logger.warning("Skipping release %s with invalid id: %r", tag, release_id)
        return records

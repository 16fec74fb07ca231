"""HTTP download of legacy tar.gz artifacts."""

import logging

import httpx

from arenapack.constants import IN_CLUSTER_ARTIFACT_URL, LOOPBACK_ARTIFACT_URL
from arenapack.exceptions import ArchiveExtractionError
from arenapack.fetcher.archive import extract_tar_gz
from arenapack.fetcher.types import RawFileMap

logger = logging.getLogger(__name__)


def rewrite_artifact_url(
    url: str,
    loopback_url: str = LOOPBACK_ARTIFACT_URL,
    service_url: str = IN_CLUSTER_ARTIFACT_URL,
) -> str:
    """Point artifact URLs published on the loopback address at the in-cluster service."""
    loopback_host = loopback_url.split("://", 1)[-1]
    if loopback_host in url:
        return url.replace(loopback_url, service_url)
    return url


def fetch_artifact(
    client: httpx.Client,
    url: str,
    *,
    loopback_url: str = LOOPBACK_ARTIFACT_URL,
    service_url: str = IN_CLUSTER_ARTIFACT_URL,
) -> RawFileMap | None:
    """Download a tar.gz artifact and extract its files.

    Args:
        client: HTTP client used for the request
        url: Artifact URL as published by the source
        loopback_url: Loopback base URL to rewrite
        service_url: In-cluster base URL it is rewritten to

    Returns:
        Mapping of relative path to file content, or None if the artifact
        could not be downloaded or extracted
    """
    fetch_url = rewrite_artifact_url(url, loopback_url, service_url)

    try:
        response = client.get(fetch_url)
    except (httpx.RequestError, httpx.InvalidURL) as e:
        logger.warning("Network error fetching artifact %s: %s", fetch_url, e)
        return None

    if not response.is_success:
        logger.warning(
            "Failed to fetch artifact: %s %s", response.status_code, response.reason_phrase
        )
        return None

    try:
        return extract_tar_gz(response.content)
    except ArchiveExtractionError as e:
        logger.warning("Tar extraction error for %s: %s", fetch_url, e)
        return None

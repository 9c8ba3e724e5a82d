"""Probe service checking which thumbnail tiers exist for a video."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from yt_thumbnails.core.config import get_settings
from yt_thumbnails.domain.thumbnails import (
    NoThumbnailsError,
    ProbeFailureError,
    QualityTier,
    ThumbnailCandidate,
    download_name,
)
from yt_thumbnails.infra.http import create_client
from yt_thumbnails.services.extract import require_video_id

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThumbnailResult:
    """Outcome of a successful lookup: the id and its existing thumbnails in tier order."""

    video_id: str
    thumbnails: list[ThumbnailCandidate]


def thumbnail_url(video_id: str, tier: QualityTier, image_host: str) -> str:
    """Return the image address for ``video_id`` at ``tier``."""

    return f"https://{image_host}/vi/{video_id}/{tier.value}.jpg"


def build_candidates(video_id: str, image_host: Optional[str] = None) -> list[ThumbnailCandidate]:
    """Build one unchecked candidate per quality tier.

    Notes
    -----
    - Always returns exactly five candidates, highest resolution first.
    - ``image_host`` defaults to the configured ``Settings.image_host``.
    """

    host: str = image_host or get_settings().image_host
    return [
        ThumbnailCandidate(
            tier=tier,
            label=tier.label,
            url=thumbnail_url(video_id, tier, host),
            exists=False,
            downloadName=download_name(video_id, tier),
        )
        for tier in QualityTier
    ]


async def check_candidate(client: httpx.AsyncClient, candidate: ThumbnailCandidate) -> ThumbnailCandidate:
    """Issue a HEAD request for a candidate and record whether it exists.

    Notes
    -----
    - A 2xx status means the image exists. Any other status, and any transport or
      protocol failure, means it does not; errors never escape this function.
    - Returns a new candidate; the input is not mutated.
    """

    try:
        response: httpx.Response = await client.head(candidate.url)
    except (httpx.HTTPError, httpx.InvalidURL) as ex:
        logger.debug("Existence check failed for %s: %r", candidate.url, ex)
        return candidate.model_copy(update={"exists": False, "statusCode": None})

    exists: bool = response.is_success
    logger.debug("Existence check for %s returned %s", candidate.url, response.status_code)
    return candidate.model_copy(update={"exists": exists, "statusCode": response.status_code})


async def probe_candidates(
    video_id: str,
    client: Optional[httpx.AsyncClient] = None,
    image_host: Optional[str] = None,
) -> list[ThumbnailCandidate]:
    """Check all five tiers concurrently and return every candidate with its outcome.

    Parameters
    ----------
    video_id: str
        A well-formed 11-character identifier.
    client: Optional[httpx.AsyncClient]
        Client to issue requests with. A fresh one is created and closed when omitted.
    image_host: Optional[str]
        Image host override; defaults to ``Settings.image_host``.

    Returns
    -------
    list[ThumbnailCandidate]
        All five candidates in tier order, each with ``exists`` set.

    Raises
    ------
    ProbeFailureError
        If the batch itself fails. Individual request failures are absorbed.
    """

    candidates: list[ThumbnailCandidate] = build_candidates(video_id, image_host)
    if client is None:
        async with create_client() as own_client:
            return await _gather_checks(own_client, candidates, video_id)
    return await _gather_checks(client, candidates, video_id)


async def _gather_checks(
    client: httpx.AsyncClient, candidates: list[ThumbnailCandidate], video_id: str
) -> list[ThumbnailCandidate]:
    tasks: list[asyncio.Task[ThumbnailCandidate]] = [
        asyncio.create_task(check_candidate(client, c)) for c in candidates
    ]
    try:
        results: list[Any] = await asyncio.gather(*tasks)
    except Exception as ex:  # noqa: BLE001 - any batch failure surfaces as one message
        logger.warning("Probe batch failed", exc_info=True, extra={"video_id": video_id})
        # Siblings must not outlive the client they were issued on
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise ProbeFailureError() from ex
    return list(results)


async def find_thumbnails(
    raw_url: str,
    client: Optional[httpx.AsyncClient] = None,
    image_host: Optional[str] = None,
) -> ThumbnailResult:
    """Extract the video id from ``raw_url`` and return its existing thumbnails.

    Notes
    -----
    - Extraction happens first; invalid input raises before any network call.
    - Only thumbnails with ``exists`` set are returned, in tier order.

    Raises
    ------
    InvalidVideoURLError
        When no identifier can be extracted.
    NoThumbnailsError
        When every tier reports absent.
    ProbeFailureError
        When the batch of checks fails as a whole.
    """

    video_id: str = require_video_id(raw_url)
    checked: list[ThumbnailCandidate] = await probe_candidates(video_id, client, image_host)
    existing: list[ThumbnailCandidate] = [c for c in checked if c.exists]
    logger.info(
        "Probed %d thumbnail tiers, %d available",
        len(checked),
        len(existing),
        extra={"video_id": video_id},
    )
    if not existing:
        raise NoThumbnailsError()
    return ThumbnailResult(video_id=video_id, thumbnails=existing)

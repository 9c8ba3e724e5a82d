"""HTTP API routes for the YouTube Thumbnail Downloader service."""
from __future__ import annotations

import re
from typing import Optional

import httpx
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from yt_thumbnails.core.config import Settings, get_settings
from yt_thumbnails.domain.submissions import Submission, submissions
from yt_thumbnails.domain.thumbnails import (
    InvalidVideoURLError,
    NoThumbnailsError,
    ProbeFailureError,
    QualityTier,
    SupersededSubmissionError,
    ThumbnailError,
    ThumbnailsRequest,
    ThumbnailsResponse,
    download_name,
)
from yt_thumbnails.infra.http import create_client
from yt_thumbnails.services.probe import ThumbnailResult, find_thumbnails, thumbnail_url

router: APIRouter = APIRouter(prefix="/api", tags=["api"])

_ERROR_STATUS: dict[type[ThumbnailError], int] = {
    InvalidVideoURLError: 400,
    NoThumbnailsError: 404,
    ProbeFailureError: 502,
}

VIDEO_ID_RE: re.Pattern[str] = re.compile(r"[A-Za-z0-9_-]{11}")


@router.post("/thumbnails", response_model=ThumbnailsResponse)
async def post_thumbnails(payload: ThumbnailsRequest) -> ThumbnailsResponse:
    """Look up the existing thumbnails for a pasted video URL.

    Parameters
    ----------
    payload: ThumbnailsRequest
        The pasted URL and an optional client session token.

    Returns
    -------
    ThumbnailsResponse
        The extracted video id and the thumbnails that exist, highest resolution first.

    Notes
    -----
    - Issues five HEAD requests against the image host per call.
    - When ``sessionId`` is given and a newer request for that session started while
      this one was probing, the outcome is discarded with 409, whether it was a
      result or an error.

    Raises
    ------
    HTTPException
        400 for an invalid URL; 404 when no thumbnail exists; 409 when superseded;
        502 when the probe batch fails.
    """

    settings: Settings = get_settings()
    submission: Submission = await submissions.begin(payload.sessionId)

    failure: Optional[ThumbnailError] = None
    try:
        async with create_client() as client:
            result: ThumbnailResult = await find_thumbnails(payload.url, client, settings.image_host)
    except ThumbnailError as ex:
        failure = ex

    # Superseded submissions deliver nothing, results and errors alike
    if not await submissions.is_current(submission):
        stale: SupersededSubmissionError = SupersededSubmissionError()
        raise HTTPException(status_code=409, detail=str(stale)) from failure
    if failure is not None:
        status_code: int = _ERROR_STATUS.get(type(failure), 500)
        raise HTTPException(status_code=status_code, detail=str(failure)) from failure

    return ThumbnailsResponse(
        videoId=result.video_id,
        sequence=submission.sequence,
        thumbnails=result.thumbnails,
    )


@router.get("/thumbnails/{video_id}/{tier}/download")
async def get_thumbnail_download(video_id: str, tier: QualityTier) -> Response:
    """Fetch a thumbnail image and return it as a file attachment.

    Notes
    -----
    - Lets the browser save the image under ``youtube-thumbnail-<id>-<tier>.jpg``;
      a cross-origin ``<a download>`` link would otherwise be ignored.
    - Unknown tiers are rejected by FastAPI validation with 422.

    Raises
    ------
    HTTPException
        400 for an id that is not 11 URL-safe characters; 404 when the image host reports it missing;
        502 on network failure.
    """

    if VIDEO_ID_RE.fullmatch(video_id) is None:
        raise HTTPException(status_code=400, detail=InvalidVideoURLError.message)

    settings: Settings = get_settings()
    url: str = thumbnail_url(video_id, tier, settings.image_host)
    try:
        async with create_client() as client:
            upstream: httpx.Response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as ex:
        raise HTTPException(status_code=502, detail="Failed to download thumbnail. Please try again.") from ex

    if not upstream.is_success:
        raise HTTPException(status_code=404, detail="Thumbnail not found")

    filename: str = download_name(video_id, tier)
    return Response(
        content=upstream.content,
        media_type=upstream.headers.get("content-type", "image/jpeg"),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

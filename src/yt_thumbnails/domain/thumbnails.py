"""Domain models and errors for thumbnail lookup.

These models define the quality tiers, the per-tier candidate records, and the
request and response payloads for the thumbnails API.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class QualityTier(str, Enum):
    """Fixed thumbnail quality tiers, ordered highest to lowest resolution.

    Notes
    -----
    - Member values are the file names used in the image address template.
    - Declaration order is the presentation order; iterate the enum to get it.
    """

    MAX = "maxresdefault"
    STANDARD = "sddefault"
    HIGH = "hqdefault"
    MEDIUM = "mqdefault"
    DEFAULT = "default"

    @property
    def label(self) -> str:
        return TIER_LABELS[self]


TIER_LABELS: dict[QualityTier, str] = {
    QualityTier.MAX: "Maximum Resolution (1280x720)",
    QualityTier.STANDARD: "Standard Definition (640x480)",
    QualityTier.HIGH: "High Quality (480x360)",
    QualityTier.MEDIUM: "Medium Quality (320x180)",
    QualityTier.DEFAULT: "Default (120x90)",
}

VIDEO_ID_LENGTH: int = 11


def download_name(video_id: str, tier: QualityTier) -> str:
    """Return the suggested file name when saving a thumbnail."""

    return f"youtube-thumbnail-{video_id}-{tier.value}.jpg"


class ThumbnailCandidate(BaseModel):
    """One candidate thumbnail address and the outcome of its existence check.

    Notes
    -----
    - ``exists`` is ``True`` only for a 2xx response to the HEAD request.
    - ``statusCode`` is ``None`` when the check failed below HTTP (DNS, connect,
      timeout); otherwise it holds the response status even when ``exists`` is false.
    """

    tier: QualityTier = Field(description="Quality tier of this thumbnail")
    label: str = Field(description="Human-readable tier label")
    url: str = Field(description="Direct image address")
    exists: bool = Field(default=False, description="Whether the image address resolves")
    statusCode: Optional[int] = Field(default=None, description="HTTP status of the existence check")
    downloadName: str = Field(description="Suggested file name for downloading")


class ThumbnailsRequest(BaseModel):
    """Request payload to look up thumbnails for a pasted video URL.

    Notes
    -----
    - ``sessionId`` is an opaque client-chosen token. When present, a newer request
      with the same token supersedes this one and its results are discarded.
    """

    url: str = Field(description="Video URL as typed or pasted by the user")
    sessionId: Optional[str] = Field(default=None, description="Client session token for stale-result detection")


class ThumbnailsResponse(BaseModel):
    """Response payload with the thumbnails that exist, in tier order."""

    videoId: str = Field(description="Extracted 11-character video identifier")
    sequence: int = Field(default=0, description="Submission sequence number within the session")
    thumbnails: list[ThumbnailCandidate] = Field(default_factory=list, description="Existing thumbnails")


class ThumbnailError(Exception):
    """Base class for errors surfaced to the user as a single message."""

    message: str = "Something went wrong."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidVideoURLError(ThumbnailError, ValueError):
    """The input did not yield an 11-character identifier from any known URL shape."""

    message = "Invalid YouTube URL. Please enter a valid YouTube video link."


class NoThumbnailsError(ThumbnailError):
    """Every candidate thumbnail reported absent."""

    message = "No thumbnails found for this video."


class ProbeFailureError(ThumbnailError):
    """The concurrent batch of existence checks itself failed."""

    message = "Failed to load thumbnails. Please try again."


class SupersededSubmissionError(ThumbnailError):
    """A newer submission from the same session replaced this one."""

    message = "A newer request replaced this one."

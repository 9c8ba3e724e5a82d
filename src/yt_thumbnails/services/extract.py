"""Video identifier extraction from free-form URL input."""
from __future__ import annotations

import re
from typing import Any, Optional

from yt_thumbnails.domain.thumbnails import VIDEO_ID_LENGTH, InvalidVideoURLError

# The greedy prefix makes the last marker in the string win, so
# "watch?feature=x&v=<id>" captures the id after "&v=". The capture stops at
# the first fragment, query, or parameter separator.
_VIDEO_URL_RE: re.Pattern[str] = re.compile(
    r"^.*(youtu\.be/|v/|u/\w/|embed/|shorts/|live/|watch\?v=|&v=)([^#&?]*).*"
)


def extract_video_id(raw: Any) -> Optional[str]:
    """Extract the 11-character video identifier from pasted input.

    Parameters
    ----------
    raw: Any
        Text as typed or pasted by the user. Non-string values are rejected.

    Returns
    -------
    Optional[str]
        The identifier, or ``None`` when no known URL shape matched or the captured
        segment is not exactly 11 characters long.

    Notes
    -----
    - Recognizes ``watch?v=``, ``&v=``, ``youtu.be/``, ``embed/``, ``v/``, ``u/<x>/``,
      ``shorts/`` and ``live/`` forms on any host.
    - Purely syntactic: a returned id may still name a private or deleted video.
    - Never raises.
    """

    if not isinstance(raw, str):
        return None
    match: Optional[re.Match[str]] = _VIDEO_URL_RE.match(raw.strip())
    if match is None:
        return None
    candidate: str = match.group(2)
    return candidate if len(candidate) == VIDEO_ID_LENGTH else None


def require_video_id(raw: Any) -> str:
    """Like ``extract_video_id`` but raise ``InvalidVideoURLError`` on failure."""

    video_id: Optional[str] = extract_video_id(raw)
    if video_id is None:
        raise InvalidVideoURLError()
    return video_id

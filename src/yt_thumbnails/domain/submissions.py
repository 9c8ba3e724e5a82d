"""In-memory submission sequencing for discarding stale probe results.

A client may submit a new URL while the previous lookup is still probing.
Probes cannot be aborted once issued, so each submission is tagged with a
per-session sequence number and a finished lookup only delivers its result if
no newer submission has started for the same session since. State is
process-local and is never persisted.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class Submission:
    """A tagged submission. ``session_id`` of ``None`` means untracked."""

    session_id: Optional[str]
    sequence: int


class SubmissionManager:
    """Per-session monotonically increasing submission counters.

    Notes
    -----
    - Process-local only: no persistence, no cross-process coordination.
    - Uses an ``asyncio.Lock`` to serialize access to the counter map.
    - Submissions without a session id always receive sequence ``0`` and are never stale.
    """

    def __init__(self) -> None:
        self._latest: Dict[str, int] = {}
        self._lock: asyncio.Lock = asyncio.Lock()

    async def begin(self, session_id: Optional[str]) -> Submission:
        """Register a new submission and return its tag.

        Notes
        -----
        - Every call for the same session returns a strictly larger sequence number,
          which immediately makes all earlier submissions of that session stale.
        """

        if not session_id:
            return Submission(session_id=None, sequence=0)
        async with self._lock:
            sequence: int = self._latest.get(session_id, 0) + 1
            self._latest[session_id] = sequence
        return Submission(session_id=session_id, sequence=sequence)

    async def is_current(self, submission: Submission) -> bool:
        """Return ``True`` if no newer submission exists for the same session."""

        if submission.session_id is None:
            return True
        async with self._lock:
            return self._latest.get(submission.session_id) == submission.sequence


# Global manager instance for app scope
submissions: SubmissionManager = SubmissionManager()

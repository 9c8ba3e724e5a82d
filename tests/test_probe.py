"""Unit tests for the thumbnail probe service using a mocked image host."""
from __future__ import annotations

import asyncio
import unittest
from typing import Callable
from unittest.mock import patch

import httpx

from yt_thumbnails.domain.thumbnails import (
    InvalidVideoURLError,
    NoThumbnailsError,
    ProbeFailureError,
    QualityTier,
    ThumbnailCandidate,
)
from yt_thumbnails.services.probe import (
    ThumbnailResult,
    build_candidates,
    check_candidate,
    find_thumbnails,
    probe_candidates,
)

VIDEO_ID: str = "dQw4w9WgXcQ"
HOST: str = "img.example.test"


def _host(existing: set[str], seen: list[httpx.Request]) -> Callable[[httpx.Request], httpx.Response]:
    """Build a MockTransport handler answering 200 for tiers in ``existing`` and 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        tier: str = request.url.path.rsplit("/", 1)[-1].removesuffix(".jpg")
        return httpx.Response(200 if tier in existing else 404)

    return handler


class TestBuildCandidates(unittest.TestCase):
    """Tests for candidate construction."""

    def test_five_candidates_in_tier_order(self) -> None:
        """Exactly five candidates follow the literal address template, highest first."""
        candidates: list[ThumbnailCandidate] = build_candidates(VIDEO_ID, HOST)
        self.assertEqual(len(candidates), 5)
        self.assertEqual(
            [c.tier.value for c in candidates],
            ["maxresdefault", "sddefault", "hqdefault", "mqdefault", "default"],
        )
        self.assertEqual(candidates[2].url, f"https://{HOST}/vi/{VIDEO_ID}/hqdefault.jpg")
        self.assertTrue(all(not c.exists for c in candidates))

    def test_labels_and_download_names(self) -> None:
        """Each candidate carries its tier label and suggested file name."""
        first: ThumbnailCandidate = build_candidates(VIDEO_ID, HOST)[0]
        self.assertEqual(first.label, "Maximum Resolution (1280x720)")
        self.assertEqual(first.downloadName, f"youtube-thumbnail-{VIDEO_ID}-maxresdefault.jpg")

    def test_default_host_comes_from_settings(self) -> None:
        """Without an override the configured image host is used."""
        candidates: list[ThumbnailCandidate] = build_candidates(VIDEO_ID)
        self.assertEqual(candidates[4].url, f"https://img.youtube.com/vi/{VIDEO_ID}/default.jpg")


class TestProbe(unittest.IsolatedAsyncioTestCase):
    """Async tests for existence checks and lookup outcomes."""

    async def test_check_candidate_uses_head_and_records_status(self) -> None:
        """A HEAD request is issued; 200 means exists and the status is recorded."""
        seen: list[httpx.Request] = []
        transport = httpx.MockTransport(_host({"hqdefault"}, seen))
        candidates = build_candidates(VIDEO_ID, HOST)
        async with httpx.AsyncClient(transport=transport) as client:
            present = await check_candidate(client, candidates[2])
            absent = await check_candidate(client, candidates[0])

        self.assertEqual([r.method for r in seen], ["HEAD", "HEAD"])
        self.assertTrue(present.exists)
        self.assertEqual(present.statusCode, 200)
        self.assertFalse(absent.exists)
        self.assertEqual(absent.statusCode, 404)
        self.assertFalse(candidates[2].exists)

    async def test_network_error_becomes_absent(self) -> None:
        """Transport failures are absorbed as exists=False with no status code."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await check_candidate(client, build_candidates(VIDEO_ID, HOST)[0])

        self.assertFalse(result.exists)
        self.assertIsNone(result.statusCode)

    async def test_probe_candidates_checks_all_tiers(self) -> None:
        """All five tiers are checked and returned in tier order."""
        seen: list[httpx.Request] = []
        transport = httpx.MockTransport(_host({"sddefault", "default"}, seen))
        async with httpx.AsyncClient(transport=transport) as client:
            checked = await probe_candidates(VIDEO_ID, client, HOST)

        self.assertEqual(len(seen), 5)
        self.assertEqual([c.tier for c in checked], list(QualityTier))
        self.assertEqual([c.exists for c in checked], [False, True, False, False, True])

    async def test_probe_candidates_creates_own_client(self) -> None:
        """When no client is passed one is created from the factory and closed."""
        seen: list[httpx.Request] = []
        transport = httpx.MockTransport(_host({"hqdefault"}, seen))

        def factory() -> httpx.AsyncClient:
            return httpx.AsyncClient(transport=transport)

        with patch("yt_thumbnails.services.probe.create_client", factory):
            checked = await probe_candidates(VIDEO_ID, image_host=HOST)

        self.assertEqual(len(seen), 5)
        self.assertEqual(sum(c.exists for c in checked), 1)

    async def test_find_thumbnails_returns_existing_in_order(self) -> None:
        """k of 5 present yields exactly k thumbnails in tier order."""
        seen: list[httpx.Request] = []
        transport = httpx.MockTransport(_host({"default", "hqdefault", "mqdefault"}, seen))
        async with httpx.AsyncClient(transport=transport) as client:
            result: ThumbnailResult = await find_thumbnails(f"https://youtu.be/{VIDEO_ID}", client, HOST)

        self.assertEqual(result.video_id, VIDEO_ID)
        self.assertEqual(
            [t.tier for t in result.thumbnails],
            [QualityTier.HIGH, QualityTier.MEDIUM, QualityTier.DEFAULT],
        )
        self.assertTrue(all(t.exists for t in result.thumbnails))

    async def test_find_thumbnails_all_absent_raises(self) -> None:
        """If every tier is absent the outcome is NoThumbnailsError, not an empty list."""
        seen: list[httpx.Request] = []
        transport = httpx.MockTransport(_host(set(), seen))
        async with httpx.AsyncClient(transport=transport) as client:
            with self.assertRaises(NoThumbnailsError):
                await find_thumbnails(f"https://www.youtube.com/watch?v={VIDEO_ID}", client, HOST)
        self.assertEqual(len(seen), 5)

    async def test_invalid_input_issues_no_requests(self) -> None:
        """Invalid input fails before any network call."""
        seen: list[httpx.Request] = []
        transport = httpx.MockTransport(_host({"default"}, seen))
        async with httpx.AsyncClient(transport=transport) as client:
            with self.assertRaises(InvalidVideoURLError):
                await find_thumbnails("not a url", client, HOST)
        self.assertEqual(seen, [])

    async def test_batch_failure_raises_probe_failure(self) -> None:
        """An unexpected error from the fan-out surfaces as ProbeFailureError."""

        async def broken(client: httpx.AsyncClient, candidate: ThumbnailCandidate) -> ThumbnailCandidate:
            raise RuntimeError("boom")

        async with httpx.AsyncClient(transport=httpx.MockTransport(_host(set(), []))) as client:
            with patch("yt_thumbnails.services.probe.check_candidate", broken):
                with self.assertRaises(ProbeFailureError):
                    await probe_candidates(VIDEO_ID, client, HOST)

    async def test_all_checks_are_in_flight_together(self) -> None:
        """No check completes until all five requests have been issued."""
        arrived: list[httpx.Request] = []
        all_arrived: asyncio.Event = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            arrived.append(request)
            if len(arrived) == len(QualityTier):
                all_arrived.set()
            await all_arrived.wait()
            return httpx.Response(200)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            checked = await asyncio.wait_for(probe_candidates(VIDEO_ID, client, HOST), timeout=5.0)

        self.assertEqual([c.exists for c in checked], [True] * 5)

    async def test_batch_failure_cancels_remaining_checks(self) -> None:
        """When one check blows up the others are cancelled before the error surfaces."""
        cancelled: list[QualityTier] = []
        never: asyncio.Event = asyncio.Event()

        async def one_broken(client: httpx.AsyncClient, candidate: ThumbnailCandidate) -> ThumbnailCandidate:
            if candidate.tier is QualityTier.MAX:
                raise RuntimeError("boom")
            try:
                await never.wait()
            except asyncio.CancelledError:
                cancelled.append(candidate.tier)
                raise
            return candidate

        async with httpx.AsyncClient(transport=httpx.MockTransport(_host(set(), []))) as client:
            with patch("yt_thumbnails.services.probe.check_candidate", one_broken):
                with self.assertRaises(ProbeFailureError):
                    await asyncio.wait_for(probe_candidates(VIDEO_ID, client, HOST), timeout=5.0)

        self.assertEqual(sorted(t.value for t in cancelled), sorted(t.value for t in list(QualityTier)[1:]))


if __name__ == "__main__":
    unittest.main()

"""YouTube source loader — transcript text plus title/author from oEmbed."""

import asyncio
import logging
import re
from urllib.parse import parse_qs, urlparse

import httpx
import requests
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)

from sourcerag.application.interfaces.source_loader import LoadedSource, SourceLoader
from sourcerag.domain.entities import Document, SourceMetadata, SourceType
from sourcerag.domain.exceptions import IngestionError

logger = logging.getLogger(__name__)

UNKNOWN_VIDEO_TITLE = "Unknown Video"
UNKNOWN_AUTHOR = "Unknown Author"

_OEMBED_URL = "https://www.youtube.com/oembed"
_VIDEO_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")
_PATH_PREFIXES = ("/shorts/", "/embed/", "/live/", "/v/")


def parse_video_id(url_or_id: str) -> str | None:
    """Extract the 11-character video id from a YouTube URL (or a bare id)."""
    candidate = url_or_id.strip()
    if _VIDEO_ID.match(candidate):
        return candidate

    parsed = urlparse(candidate)
    host = (parsed.hostname or "").lower()

    video_id: str | None = None
    if host in ("youtu.be", "www.youtu.be"):
        video_id = parsed.path.lstrip("/").split("/")[0]
    elif host.endswith("youtube.com") or host.endswith("youtube-nocookie.com"):
        if parsed.path == "/watch":
            video_id = (parse_qs(parsed.query).get("v") or [None])[0]
        else:
            for prefix in _PATH_PREFIXES:
                if parsed.path.startswith(prefix):
                    video_id = parsed.path[len(prefix):].split("/")[0]
                    break

    if video_id and _VIDEO_ID.match(video_id):
        return video_id
    return None


class YouTubeSourceLoader(SourceLoader):
    """Loads the transcript of a YouTube video in the configured language."""

    def __init__(
        self,
        *,
        language: str = "en",
        transcript_api: YouTubeTranscriptApi | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._language = language
        self._transcript_api = transcript_api or YouTubeTranscriptApi()
        self._http_client = http_client
        self._timeout = timeout

    @property
    def source_type(self) -> SourceType:
        return SourceType.YOUTUBE

    async def load(self, locator: str) -> LoadedSource:
        video_id = parse_video_id(locator)
        if video_id is None:
            raise IngestionError(
                f"Could not find a YouTube video id in '{locator}'",
                source_type=SourceType.YOUTUBE.value,
                locator=locator,
            )

        transcript = await self._fetch_transcript(video_id, locator)
        title, author = await self._fetch_video_info(locator, video_id)
        logger.info("Loaded YouTube transcript for '%s' by %s (%d chars)", title, author, len(transcript))

        return LoadedSource(
            documents=[
                Document(
                    text=transcript,
                    attributes={"video_id": video_id, "title": title, "author": author},
                )
            ],
            source=SourceMetadata.for_youtube(locator, title, author),
        )

    # ── Private helpers ──────────────────────────────────────────────

    async def _fetch_transcript(self, video_id: str, locator: str) -> str:
        try:
            fetched = await asyncio.to_thread(
                self._transcript_api.fetch, video_id, languages=[self._language]
            )
        except (NoTranscriptFound, TranscriptsDisabled, VideoUnavailable) as e:
            raise IngestionError(
                f"No transcript available for video {video_id}",
                source_type=SourceType.YOUTUBE.value,
                locator=locator,
            ) from e
        except CouldNotRetrieveTranscript as e:
            raise IngestionError(
                f"Could not retrieve transcript for video {video_id}: {e}",
                source_type=SourceType.YOUTUBE.value,
                locator=locator,
            ) from e
        except requests.RequestException as e:
            raise IngestionError(
                f"Could not reach YouTube for video {video_id}: {e}",
                source_type=SourceType.YOUTUBE.value,
                locator=locator,
            ) from e

        text = " ".join(snippet.text.strip() for snippet in fetched if snippet.text.strip())
        if not text:
            raise IngestionError(
                f"Transcript for video {video_id} is empty",
                source_type=SourceType.YOUTUBE.value,
                locator=locator,
            )
        return text

    async def _fetch_video_info(self, url: str, video_id: str) -> tuple[str, str]:
        """Title and author via oEmbed; unknown placeholders on any failure."""
        watch_url = url if url.startswith("http") else f"https://www.youtube.com/watch?v={video_id}"
        client = self._http_client or httpx.AsyncClient(timeout=self._timeout)
        should_close = self._http_client is None

        try:
            response = await client.get(_OEMBED_URL, params={"url": watch_url, "format": "json"})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not fetch video info for %s: %s", video_id, e)
            return UNKNOWN_VIDEO_TITLE, UNKNOWN_AUTHOR
        finally:
            if should_close:
                await client.aclose()

        return (
            data.get("title") or UNKNOWN_VIDEO_TITLE,
            data.get("author_name") or UNKNOWN_AUTHOR,
        )

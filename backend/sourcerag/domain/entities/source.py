"""Domain entities describing where indexed content came from."""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class SourceType(str, Enum):
    """The closed set of ingestible source kinds."""

    PDF = "pdf"
    WEBSITE = "website"
    YOUTUBE = "youtube"


_SOURCE_ID_PREFIXES: dict[SourceType, str] = {
    SourceType.PDF: "pdf",
    SourceType.WEBSITE: "web",
    SourceType.YOUTUBE: "yt",
}


def new_source_id(source_type: SourceType) -> str:
    """Return an id unique to one ingestion event.

    The millisecond timestamp keeps ids increasing across re-ingestions of
    the same logical source; the random suffix separates ingestions that
    land within the same millisecond.
    """
    prefix = _SOURCE_ID_PREFIXES[source_type]
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class SourceMetadata:
    """Provenance attached to every chunk of one ingested source.

    ``source_description`` is prepended verbatim to each chunk's content so
    the generation model can tell sources apart. ``details`` carries the
    type-specific fields (filename; url/title/links_count; url/video_title/
    author).
    """

    source_type: SourceType
    source_id: str
    source_description: str
    ingested_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    details: dict[str, Any] = field(default_factory=dict)

    def as_metadata(self) -> dict[str, Any]:
        """Flatten into the JSON-serializable dict stored with each chunk."""
        return {
            **self.details,
            "source_type": self.source_type.value,
            "source_id": self.source_id,
            "source_description": self.source_description,
            "ingested_at": self.ingested_at.isoformat(),
        }

    # ── Factories per source type ────────────────────────────────────

    @classmethod
    def for_pdf(cls, filename: str) -> "SourceMetadata":
        return cls(
            source_type=SourceType.PDF,
            source_id=new_source_id(SourceType.PDF),
            source_description=f'PDF file: "{filename}"',
            details={"filename": filename},
        )

    @classmethod
    def for_website(cls, url: str, title: str, links_count: int) -> "SourceMetadata":
        return cls(
            source_type=SourceType.WEBSITE,
            source_id=new_source_id(SourceType.WEBSITE),
            source_description=f'Website: "{title}" ({url})',
            details={"source_url": url, "title": title, "links_count": links_count},
        )

    @classmethod
    def for_youtube(cls, url: str, video_title: str, author: str) -> "SourceMetadata":
        return cls(
            source_type=SourceType.YOUTUBE,
            source_id=new_source_id(SourceType.YOUTUBE),
            source_description=f'YouTube video: "{video_title}" by {author}',
            details={"source_url": url, "video_title": video_title, "author": author},
        )

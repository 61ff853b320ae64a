"""Source loaders — one adapter per ingestible source type."""

from .pdf_loader import PdfSourceLoader
from .web_loader import WebSourceLoader, extract_links
from .youtube_loader import YouTubeSourceLoader, parse_video_id

__all__ = [
    "PdfSourceLoader",
    "WebSourceLoader",
    "YouTubeSourceLoader",
    "extract_links",
    "parse_video_id",
]

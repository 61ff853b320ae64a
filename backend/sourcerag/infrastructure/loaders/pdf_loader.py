"""PDF source loader — PyMuPDF text extraction, one document per page."""

import asyncio
import logging
from pathlib import Path

from sourcerag.application.interfaces.source_loader import LoadedSource, SourceLoader
from sourcerag.domain.entities import Document, SourceMetadata, SourceType
from sourcerag.domain.exceptions import IngestionError

logger = logging.getLogger(__name__)

_PDF_MAGIC = b"%PDF-"


class PdfSourceLoader(SourceLoader):
    """Loads a PDF from local disk.

    The file must carry a ``.pdf`` extension and start with the PDF magic
    bytes. Pages without a text layer (scanned pages) are skipped.
    """

    @property
    def source_type(self) -> SourceType:
        return SourceType.PDF

    async def load(self, locator: str, *, display_name: str | None = None) -> LoadedSource:
        path = Path(locator)
        filename = display_name or path.name
        self._check_pdf(path, filename)

        documents, total_pages = await asyncio.to_thread(self._extract_pages, path, filename)
        logger.info("Loaded %d pages with text from %s (%d total)", len(documents), filename, total_pages)

        return LoadedSource(
            documents=documents,
            source=SourceMetadata.for_pdf(filename),
            counters={"pages": total_pages},
        )

    # ── Private helpers ──────────────────────────────────────────────

    def _check_pdf(self, path: Path, filename: str) -> None:
        if not path.is_file():
            raise IngestionError(
                f"File not found: {filename}", source_type=SourceType.PDF.value, locator=str(path)
            )
        if Path(filename).suffix.lower() != ".pdf":
            raise IngestionError(
                f"Only PDF files are supported, got '{filename}'",
                source_type=SourceType.PDF.value,
                locator=str(path),
            )
        with path.open("rb") as fh:
            header = fh.read(len(_PDF_MAGIC))
        if header != _PDF_MAGIC:
            raise IngestionError(
                f"'{filename}' is not a valid PDF file",
                source_type=SourceType.PDF.value,
                locator=str(path),
            )

    @staticmethod
    def _extract_pages(path: Path, filename: str) -> tuple[list[Document], int]:
        import fitz  # PyMuPDF

        try:
            doc = fitz.open(path)
        except Exception as e:
            raise IngestionError(
                f"Could not open PDF '{filename}': {e}",
                source_type=SourceType.PDF.value,
                locator=str(path),
            ) from e

        try:
            total_pages = doc.page_count
            documents: list[Document] = []
            for page_num, page in enumerate(doc):
                try:
                    text = page.get_text("text")
                except Exception as e:
                    raise IngestionError(
                        f"Could not read page {page_num + 1} of '{filename}': {e}",
                        source_type=SourceType.PDF.value,
                        locator=str(path),
                    ) from e
                if text.strip():
                    documents.append(
                        Document(
                            text=text,
                            attributes={"page": page_num + 1, "total_pages": total_pages},
                        )
                    )
                else:
                    logger.debug("Page %d appears to be scanned (no text layer)", page_num + 1)
        finally:
            doc.close()

        return documents, total_pages

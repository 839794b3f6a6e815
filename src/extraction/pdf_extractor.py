# src/extraction/pdf_extractor.py - v2
"""PDF text layer via PyMuPDF (fitz).

Scanned PDFs without a text layer come back empty; the generator then
rejects them as too short.
"""

from __future__ import annotations

import logging

from draftmodels.core.models import ExtractionResult
from draftmodels.extraction.base_extractor import (
    BaseExtractor,
    ExtractionError,
    Source,
    read_bytes,
)

logger = logging.getLogger(__name__)


class PdfExtractor(BaseExtractor):
    extensions = (".pdf",)

    async def extract(self, source: Source) -> ExtractionResult:
        import fitz

        with fitz.open(stream=read_bytes(source), filetype="pdf") as doc:
            if doc.needs_pass:
                raise ExtractionError("PDF is password protected")
            pages = [page.get_text("text") for page in doc]

        text = "\n".join(pages)
        if not text.strip():
            logger.debug("PDF has no text layer (%d pages)", len(pages))
        return ExtractionResult(raw_text=text, source_format="pdf", page_count=len(pages))

# src/extraction/docx_extractor.py - v2
"""Word documents via python-docx.

Paragraphs and tables are read in document order. Table rows become
``cell | cell`` lines; blank paragraphs and rows are dropped.
"""

from __future__ import annotations

import io

from draftmodels.core.models import ExtractionResult
from draftmodels.extraction.base_extractor import BaseExtractor, Source, read_bytes


class DocxExtractor(BaseExtractor):
    extensions = (".docx",)

    async def extract(self, source: Source) -> ExtractionResult:
        import docx
        from docx.table import Table

        document = docx.Document(io.BytesIO(read_bytes(source)))
        blocks: list[str] = []
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                text = table_text([[cell.text.strip() for cell in row.cells] for row in block.rows])
            else:
                text = block.text if block.text.strip() else ""
            if text:
                blocks.append(text)
        return ExtractionResult(raw_text="\n\n".join(blocks), source_format="docx")


def table_text(rows: list[list[str]]) -> str:
    return "\n".join(" | ".join(cells) for cells in rows if any(cells))

# tests/unit/extraction/test_unit_binary_formats.py - v2
"""Tests for extraction/pdf_extractor.py and extraction/docx_extractor.py.

Documents are built in memory with the same libraries the extractors use.
"""

from __future__ import annotations

import io

import pytest

from draftmodels.extraction.base_extractor import ExtractionError
from draftmodels.extraction.docx_extractor import DocxExtractor, table_text
from draftmodels.extraction.pdf_extractor import PdfExtractor


def _pdf_bytes(*pages: str, password: str | None = None) -> bytes:
    import fitz

    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    if password:
        data = doc.tobytes(
            encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw=password, user_pw=password,
        )
    else:
        data = doc.tobytes()
    doc.close()
    return data


def _docx_bytes() -> bytes:
    import docx

    document = docx.Document()
    document.add_paragraph("Opening paragraph")
    document.add_paragraph("   ")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Name"
    table.cell(0, 1).text = "Value"
    table.cell(1, 0).text = "A"
    table.cell(1, 1).text = "1"
    document.add_paragraph("Closing paragraph")
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


class TestPdfExtractor:
    @pytest.mark.asyncio
    async def test_pages_in_order(self):
        result = await PdfExtractor().extract(_pdf_bytes("First page", "Second page"))
        assert result.page_count == 2
        assert result.raw_text.index("First page") < result.raw_text.index("Second page")

    @pytest.mark.asyncio
    async def test_from_path(self, tmp_path):
        path = tmp_path / "doc.pdf"
        path.write_bytes(_pdf_bytes("On disk"))
        result = await PdfExtractor().extract(path)
        assert "On disk" in result.raw_text

    @pytest.mark.asyncio
    async def test_password_protected(self):
        with pytest.raises(ExtractionError, match="password"):
            await PdfExtractor().extract(_pdf_bytes("Secret", password="pw"))


class TestDocxExtractor:
    @pytest.mark.asyncio
    async def test_paragraphs_and_tables(self):
        result = await DocxExtractor().extract(_docx_bytes())
        assert result.source_format == "docx"
        assert result.raw_text == "Opening paragraph\n\nName | Value\nA | 1\n\nClosing paragraph"

    def test_table_text_skips_empty_rows(self):
        rows = [["Name", "Value"], ["", ""], ["B", "2"]]
        assert table_text(rows) == "Name | Value\nB | 2"

    @pytest.mark.asyncio
    async def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await DocxExtractor().extract(tmp_path / "missing.docx")

import io

import pytest
from PIL import Image

from answerlens.pdf.base import BasePdfRasterizer
from answerlens.pdf.exceptions import PdfRenderError
from answerlens.pdf.pdfplumber_adapter import PdfPlumberAdapter
from answerlens.pdf.pymupdf_adapter import PyMuPdfAdapter

PNG_MAGIC = b"\x89PNG"


@pytest.fixture(params=[PyMuPdfAdapter, PdfPlumberAdapter], ids=["pymupdf", "pdfplumber"])
def rasterizer(request: pytest.FixtureRequest) -> BasePdfRasterizer:
    return request.param()


class TestRasterizers:
    def test_renders_single_page_png(
        self, rasterizer: BasePdfRasterizer, sample_pdf_bytes: bytes
    ) -> None:
        pages = rasterizer.render_pages(sample_pdf_bytes, dpi=72, max_pages=20)

        assert len(pages) == 1
        assert pages[0].startswith(PNG_MAGIC)

    def test_renders_pages_in_order(
        self, rasterizer: BasePdfRasterizer, multi_page_pdf_bytes: bytes
    ) -> None:
        pages = rasterizer.render_pages(multi_page_pdf_bytes, dpi=72, max_pages=20)

        assert len(pages) == 2
        assert all(p.startswith(PNG_MAGIC) for p in pages)

    def test_respects_max_pages(
        self, rasterizer: BasePdfRasterizer, multi_page_pdf_bytes: bytes
    ) -> None:
        pages = rasterizer.render_pages(multi_page_pdf_bytes, dpi=72, max_pages=1)

        assert len(pages) == 1

    def test_dpi_controls_image_size(
        self, rasterizer: BasePdfRasterizer, sample_pdf_bytes: bytes
    ) -> None:
        low = rasterizer.render_pages(sample_pdf_bytes, dpi=50, max_pages=1)[0]
        high = rasterizer.render_pages(sample_pdf_bytes, dpi=100, max_pages=1)[0]

        with Image.open(io.BytesIO(low)) as a, Image.open(io.BytesIO(high)) as b:
            assert b.width > a.width

    def test_invalid_pdf_raises(self, rasterizer: BasePdfRasterizer) -> None:
        with pytest.raises(PdfRenderError) as exc:
            rasterizer.render_pages(b"%PDF-garbage", dpi=72, max_pages=1)

        assert exc.value.stage == "ocr"
        assert exc.value.code == "pdf_render_failed"

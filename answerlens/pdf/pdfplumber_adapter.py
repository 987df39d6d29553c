import io

import pdfplumber

from answerlens.pdf.base import BasePdfRasterizer
from answerlens.pdf.exceptions import PdfRenderError


class PdfPlumberAdapter(BasePdfRasterizer):
    """Renders PDF pages using pdfplumber's page images."""

    def render_pages(self, pdf_bytes: bytes, *, dpi: int, max_pages: int) -> list[bytes]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [self._to_png(page, dpi) for page in pdf.pages[:max_pages]]
        except Exception as exc:
            raise PdfRenderError(f"pdfplumber rendering failed: {exc}") from exc
        if not pages:
            raise PdfRenderError("PDF contains no pages")
        return pages

    @staticmethod
    def _to_png(page: "pdfplumber.page.Page", dpi: int) -> bytes:
        buf = io.BytesIO()
        page.to_image(resolution=dpi).original.save(buf, format="PNG")
        return buf.getvalue()

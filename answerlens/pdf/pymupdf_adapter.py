import pymupdf

from answerlens.pdf.base import BasePdfRasterizer
from answerlens.pdf.exceptions import PdfRenderError


class PyMuPdfAdapter(BasePdfRasterizer):
    """Renders PDF pages using PyMuPDF."""

    def render_pages(self, pdf_bytes: bytes, *, dpi: int, max_pages: int) -> list[bytes]:
        try:
            with pymupdf.open(  # type: ignore[no-untyped-call]
                stream=pdf_bytes, filetype="pdf"
            ) as doc:
                pages = [
                    page.get_pixmap(dpi=dpi).tobytes("png")
                    for index, page in enumerate(doc)
                    if index < max_pages
                ]
        except Exception as exc:
            raise PdfRenderError(f"pymupdf rendering failed: {exc}") from exc
        if not pages:
            raise PdfRenderError("PDF contains no pages")
        return pages
